"""Rich terminal formatter for subweight."""

import math
from collections import Counter
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..diff import DiffKind, ExtrinsicDiff, TotalDiff
from ..models import Dimension, Percent, RelativeChange
from .base import BaseFormatter

NO_CHANGES = "No changes found."

_CLASSIFICATION_STYLES = {
    RelativeChange.UNCHANGED: "dim",
    RelativeChange.ADDED: "cyan",
    RelativeChange.REMOVED: "magenta",
    RelativeChange.CHANGED: "yellow",
}


def format_percent(p: Percent) -> str:
    if math.isinf(p):
        return "+inf" if p > 0 else "-inf"
    return f"{p:+.2f}"


def _percent_cell(p: Percent) -> str:
    text = format_percent(p)
    if p > 0:
        return f"[red]{text}[/red]"
    if p < 0:
        return f"[green]{text}[/green]"
    return text


def _value_cell(value: Optional[int], unit: Dimension) -> str:
    return "-" if value is None else unit.fmt_value(value)


class RichDiffFormatter(BaseFormatter):
    """Table of all entries, most severe last, followed by a summary line."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console

    def render(self, diff: TotalDiff, unit: Dimension) -> None:
        console = self.console or Console()
        if not diff:
            console.print(NO_CHANGES)
            return
        console.print(self._table(diff, unit))
        console.print(self._summary(diff))

    def format(self, diff: TotalDiff, unit: Dimension) -> str:
        console = Console(width=200)
        with console.capture() as capture:
            RichDiffFormatter(console).render(diff, unit)
        return capture.get()

    def _table(self, diff: TotalDiff, unit: Dimension) -> Table:
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("File", no_wrap=True)
        table.add_column("Extrinsic", no_wrap=True)
        table.add_column("Old", justify="right")
        table.add_column("New", justify="right")
        table.add_column("Change [%]", justify="right")
        table.add_column("Classification")
        table.add_column("Notes", overflow="fold")
        for entry in diff:
            table.add_row(*self._row(entry, unit))
        return table

    def _row(self, entry: ExtrinsicDiff, unit: Dimension) -> tuple:
        pallet, name = escape(entry.pallet), escape(entry.name)
        if entry.outcome.kind is DiffKind.FAILED:
            return (pallet, name, "-", "-", "-", "[red bold]Failed[/red bold]", escape(entry.error()))

        change = entry.term()
        style = _CLASSIFICATION_STYLES[change.classification]
        if change.classification in (RelativeChange.CHANGED, RelativeChange.UNCHANGED):
            percent_text = _percent_cell(change.percent)
        else:
            percent_text = "-"
        notes = entry.warning()
        return (
            pallet,
            name,
            _value_cell(change.old_value, unit),
            _value_cell(change.new_value, unit),
            percent_text,
            f"[{style}]{change.classification.label}[/{style}]",
            f"[yellow]{escape(notes)}[/yellow]" if notes else "",
        )

    def _summary(self, diff: TotalDiff) -> str:
        counts = Counter(
            "failed" if entry.term() is None else entry.term().classification.value
            for entry in diff
        )
        parts = [f"{counts[key]} {key}" for key in sorted(counts)]
        return f"{len(diff)} entries: " + ", ".join(parts)
