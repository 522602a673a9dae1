"""
Result Reporter - Explain why a locator resolved the way it did.

A success names the node and the strategy that found it, which shows when
a fallback fired. A failure lists every strategy in order with its
candidate count, which shows where resolution broke down.
"""

import json
import os
from datetime import datetime
from typing import Any, Dict, Optional, TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from pinpoint.core.locator import LocatorSpec
    from pinpoint.layers.intelligence.outcome import ResolutionOutcome, StrategyResult


def _count_label(attempt: "StrategyResult") -> str:
    if not attempt.applicable:
        return "-"
    if attempt.narrowed_count is not None:
        return f"{len(attempt.nodes)} -> {attempt.narrowed_count}"
    return str(len(attempt.nodes))


def describe(outcome: "ResolutionOutcome") -> str:
    """Multi-line plain text description of an outcome."""
    lines = [outcome.summary()]
    for attempt in outcome.attempts:
        if attempt.applicable:
            lines.append(f"  {attempt.strategy:<15} {_count_label(attempt):>8}  {attempt.detail}")
        else:
            lines.append(f"  {attempt.strategy:<15} {'skipped':>8}  {attempt.detail}")
    return "\n".join(lines)


def build_report(outcome: "ResolutionOutcome", spec: Optional["LocatorSpec"] = None) -> Dict[str, Any]:
    """JSON-serializable report of one resolution."""
    report = outcome.to_dict()
    report["generated_at"] = datetime.now().isoformat()
    if spec is not None:
        report["locator"] = str(spec)
        report["spec"] = spec.to_dict()
    return report


def save_report(outcome: "ResolutionOutcome", path: str, spec: Optional["LocatorSpec"] = None) -> str:
    """Write the report as JSON and return its path."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(build_report(outcome, spec), f, indent=2)
    return path


def render_outcome(outcome: "ResolutionOutcome", console: Optional[Console] = None) -> None:
    """Print an outcome and its strategy attempts as a rich table."""
    console = console or Console()

    if outcome.success:
        console.print(f"[bold green]✅ {escape(outcome.summary())}[/bold green]")
    elif outcome.kind == "ambiguous":
        console.print(f"[bold yellow]⚠️ {escape(outcome.summary())}[/bold yellow]")
    else:
        console.print(f"[bold red]❌ {escape(outcome.summary())}[/bold red]")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=3)
    table.add_column("Strategy", style="blue")
    table.add_column("Candidates", justify="right")
    table.add_column("Detail", style="dim", max_width=60)

    winner = getattr(outcome, "strategy", None)
    for i, attempt in enumerate(outcome.attempts, 1):
        count = _count_label(attempt)
        if attempt.strategy == winner:
            count = f"[green]{count}[/green]"
        elif attempt.applicable and attempt.count > 1:
            count = f"[yellow]{count}[/yellow]"
        elif not attempt.applicable:
            count = "[dim]skipped[/dim]"
        table.add_row(str(i), attempt.strategy, count, escape(attempt.detail))

    console.print(table)
