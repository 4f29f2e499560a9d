"""
CLI result formatters for per-target results.

Keeps display logic out of the command functions: one summary table for the
batch, one detail table per target whose payload is tabular, or JSON.
"""

import json
import logging
from typing import Any, List, Optional

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ccmclient.domain.results import ResultRecord

logger = logging.getLogger(__name__)
console = Console()


def _rows(payload: Any) -> Optional[List[dict]]:
    """Payload as table rows, or None when it is a scalar."""
    if isinstance(payload, BaseModel):
        return [payload.model_dump(mode="json")]
    if isinstance(payload, dict):
        return [payload]
    if isinstance(payload, list) and payload and all(isinstance(p, (BaseModel, dict)) for p in payload):
        return [p.model_dump(mode="json") if isinstance(p, BaseModel) else p for p in payload]
    return None


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def _summary(payload: Any) -> str:
    if payload is None:
        return "Done"
    if isinstance(payload, bool):
        return "Yes" if payload else "No"
    if isinstance(payload, list):
        if not payload:
            return "No items"
        rows = _rows(payload)
        if rows is None:
            return _cell(payload)
        return f"{len(rows)} item(s)"
    if isinstance(payload, (BaseModel, dict)):
        return "See below"
    return str(payload)


class ResultFormatter:
    """Renders ResultRecord lists to the console."""

    def __init__(self, output: Optional[Console] = None):
        self.console = output or console

    def display_json(self, records: List[ResultRecord]) -> None:
        """One JSON array, one object per target."""
        text = json.dumps([record.to_dict() for record in records], indent=2, default=str)
        typer.echo(text)

    def display_results(self, records: List[ResultRecord], title: str, columns: Optional[List[str]] = None) -> None:
        """
        Summary table plus a detail table per successful tabular payload.

        Args:
            records: Per-target results, in target order
            title: Table title
            columns: Detail columns to show; all payload fields when None
        """
        table = Table(title=title)
        table.add_column("Target", style="cyan", no_wrap=True)
        table.add_column("Status")
        table.add_column("Transport", style="magenta")
        table.add_column("Result")

        for record in records:
            if record.success:
                status = "[green]✅ OK[/green]"
                detail = escape(_summary(record.payload))
            else:
                status = "[red]❌ Failed[/red]"
                detail = f"[red]{record.error_kind}: {escape(record.error or '')}[/red]"
            if record.degraded:
                detail = f"{detail}\n[yellow]⚠ {escape(record.degraded)}[/yellow]"
            table.add_row(record.computer_name, status, record.transport or "-", detail)

        self.console.print(table)

        for record in records:
            if not record.success:
                continue
            rows = _rows(record.payload)
            if rows:
                self._display_rows(rows, f"{title} - {record.computer_name}", columns)

        failed = sum(1 for record in records if not record.success)
        summary_style = "red" if failed else "blue"
        self.console.print(
            f"\n[{summary_style}]📊 Summary: {len(records) - failed}/{len(records)} targets succeeded[/{summary_style}]"
        )

    def _display_rows(self, rows: List[dict], title: str, columns: Optional[List[str]]) -> None:
        names = columns or list(rows[0].keys())
        table = Table(title=title, title_style="bold")
        for name in names:
            table.add_column(name.replace("_", " ").title())
        for row in rows:
            table.add_row(*(escape(_cell(row.get(name))) for name in names))
        self.console.print(table)
