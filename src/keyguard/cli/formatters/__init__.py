"""CLI output formatters."""

from keyguard.cli.formatters.table import format_scan_result
from keyguard.cli.formatters.json_fmt import export_json, format_json

__all__ = ["format_scan_result", "format_json", "export_json"]
