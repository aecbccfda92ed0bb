"""JSON formatter for CLI output."""

import json
from pathlib import Path

from rich.console import Console

from keyguard.models import ScanJob


def format_json(console: Console, result: ScanJob) -> None:
    """Format and display scan results as JSON."""
    console.print_json(result.model_dump_json(indent=2))


def export_json(result: ScanJob, path: str | Path) -> None:
    """Export scan results to a JSON file."""
    with open(path, "w") as f:
        json.dump(result.to_json_dict(), f, indent=2, default=str)
