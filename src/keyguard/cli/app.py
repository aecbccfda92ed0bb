"""Main CLI application using Typer."""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from keyguard.version import __version__
from keyguard.core.config import get_settings
from keyguard.core.exceptions import PersistenceError
from keyguard.core.logging import setup_logging

app = typer.Typer(
    name="keyguard",
    help="KeyGuard - find exposed API keys in public web pages",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"KeyGuard version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """KeyGuard - credential exposure scanner."""
    setup_logging()


@app.command()
def scan(
    url: Annotated[str, typer.Argument(help="Page URL to scan (http or https)")],
    format_type: Annotated[
        str,
        typer.Option("--format", help="Output format: table, json"),
    ] = "table",
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the JSON result to this file"),
    ] = None,
    no_ai: Annotated[
        bool,
        typer.Option("--no-ai", help="Use the built-in remediation report only"),
    ] = False,
) -> None:
    """
    Scan a page, its scripts and its stylesheets for exposed credentials.

    Examples:
        keyguard scan https://example.com
        keyguard scan https://example.com --format json
        keyguard scan https://example.com --no-ai --output result.json
    """
    from keyguard.ai.recommender import get_recommender
    from keyguard.database.store import MemoryScanStore
    from keyguard.orchestration.orchestrator import ScanOrchestrator

    if format_type not in ("table", "json"):
        console.print(f"[red]Unknown format: {format_type}[/red]")
        raise typer.Exit(2)

    if format_type == "table":
        console.print(
            Panel(
                f"[bold blue]KeyGuard Scan[/bold blue]\n"
                f"URL: [green]{url}[/green]",
                title="Starting Scan",
            )
        )

    orchestrator = ScanOrchestrator(
        store=MemoryScanStore(),
        recommender=None if no_ai else get_recommender(),
    )

    with console.status("[bold green]Scanning...[/bold green]"):
        try:
            result = asyncio.run(orchestrator.run(url))
        except ValueError as e:
            console.print(f"[red]Invalid URL: {e}[/red]")
            raise typer.Exit(1) from None
        except PersistenceError as e:
            console.print(f"[red]Scan failed: {e}[/red]")
            raise typer.Exit(1) from None

    if output:
        from keyguard.cli.formatters import export_json

        export_json(result, output)
        console.print(f"[green]Results saved to {output}[/green]")

    if format_type == "json":
        from keyguard.cli.formatters import format_json

        format_json(console, result)
    else:
        from keyguard.cli.formatters import format_scan_result

        format_scan_result(console, result)

    if result.error:
        raise typer.Exit(1)


@app.command()
def patterns() -> None:
    """List the credential patterns the detector looks for."""
    from keyguard.scanners.patterns import PATTERNS

    table = Table(title=f"Credential Patterns ({len(PATTERNS)})")
    table.add_column("Name", style="cyan")
    table.add_column("Provider")
    table.add_column("Severity")
    table.add_column("Regex", style="dim")

    for pattern in PATTERNS:
        table.add_row(
            pattern.name,
            pattern.provider,
            pattern.severity.value,
            pattern.matcher.pattern,
        )

    console.print(table)


@app.command()
def config(
    show: Annotated[
        bool,
        typer.Option("--show", "-s", help="Show current configuration"),
    ] = False,
    validate: Annotated[
        bool,
        typer.Option("--validate", help="Validate configuration"),
    ] = False,
) -> None:
    """Manage configuration settings."""
    settings = get_settings()

    if show or not validate:
        table = Table(title="Configuration")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("API Host", settings.api_host)
        table.add_row("API Port", str(settings.api_port))
        table.add_row(
            "API Key",
            "[green]Set[/green]" if settings.api_key else "[yellow]Not set (auth disabled)[/yellow]",
        )
        table.add_row("Database URL", settings.database_url)
        table.add_row("Log Level", settings.log_level)
        table.add_row("Log Format", settings.log_format)
        table.add_row("AI Remediation", "enabled" if settings.ai_enabled else "disabled")
        table.add_row("Default AI Provider", settings.default_ai_provider)
        table.add_row("Anthropic Model", settings.anthropic_model)
        table.add_row("OpenAI Model", settings.openai_model)
        table.add_row("Ollama Host", settings.ollama_host)
        table.add_row("Ollama Model", settings.ollama_model)
        table.add_row(
            "Anthropic API Key",
            "[green]Set[/green]" if settings.anthropic_api_key else "[red]Not set[/red]",
        )
        table.add_row(
            "OpenAI API Key",
            "[green]Set[/green]" if settings.openai_api_key else "[red]Not set[/red]",
        )
        table.add_row("Max Concurrent Scans", str(settings.max_concurrent_scans))
        table.add_row("Max Concurrent Fetches", str(settings.max_concurrent_fetches))
        table.add_row("Fetch Rate Limit", f"{settings.fetch_requests_per_second}/s")
        table.add_row("Max Response Size", f"{settings.max_response_bytes} bytes")
        table.add_row("HTTP Timeout", f"{settings.http_timeout}s")

        console.print(table)

    if validate:
        errors = []

        if settings.ai_enabled:
            if settings.default_ai_provider == "anthropic" and not settings.anthropic_api_key:
                errors.append("ANTHROPIC_API_KEY is required for Anthropic provider")
            if settings.default_ai_provider == "openai" and not settings.openai_api_key:
                errors.append("OPENAI_API_KEY is required for OpenAI provider")

        if errors:
            console.print("[red]Configuration errors:[/red]")
            for error in errors:
                console.print(f"  - {error}")
            raise typer.Exit(1)
        else:
            console.print("[green]Configuration is valid[/green]")


@app.command()
def serve(
    host: Annotated[
        Optional[str],
        typer.Option("--host", "-h", help="Host to bind to"),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", help="Port to bind to"),
    ] = None,
    reload: Annotated[
        bool,
        typer.Option("--reload", "-r", help="Enable auto-reload for development"),
    ] = False,
) -> None:
    """Start the REST API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print(
        Panel(
            f"[bold blue]Starting API Server[/bold blue]\n"
            f"Host: [green]{host}[/green]\n"
            f"Port: [green]{port}[/green]\n"
            f"Docs: [cyan]http://{host}:{port}/docs[/cyan]",
            title="API Server",
        )
    )

    uvicorn.run(
        "keyguard.api.app:app",
        host=host,
        port=port,
        reload=reload,
    )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
