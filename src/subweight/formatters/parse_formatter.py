"""Listing of parsed weight functions for ``subweight parse``."""

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..models import Extrinsic
from ..term import READ, WRITE


class ParseFormatter:
    """Show what the parser understood, one row per extrinsic."""

    def __init__(self, console: Optional[Console] = None, show_formulas: bool = False):
        self.console = console
        self.show_formulas = show_formulas

    def render(self, extrinsics: List[Extrinsic], files: int) -> None:
        console = self.console or Console()
        if self.show_formulas and extrinsics:
            table = Table(show_header=True, header_style="bold cyan")
            table.add_column("File", no_wrap=True)
            table.add_column("Extrinsic", no_wrap=True)
            table.add_column("Components")
            table.add_column("Formula", overflow="fold")
            for ext in extrinsics:
                components = ", ".join(sorted(ext.term.variables() - {READ, WRITE}))
                table.add_row(
                    escape(ext.pallet), escape(ext.name), components, escape(str(ext.term))
                )
            console.print(table)
        console.print(f"Parsed {len(extrinsics)} extrinsics from {files} files.")
