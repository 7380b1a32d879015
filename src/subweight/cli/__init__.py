"""CLI entry point; registers all subcommands."""

import typer

app = typer.Typer(
    name="subweight",
    help="subweight - Compare Substrate weight files between revisions",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

compare_app = typer.Typer(
    help="Compare the weights of two git revisions or two sets of files.",
    no_args_is_help=True,
)
parse_app = typer.Typer(
    help="Tries to parse all files in the given file list or folder.",
    no_args_is_help=True,
)
app.add_typer(compare_app, name="compare")
app.add_typer(parse_app, name="parse")


# Import subcommands to register them
from .root import root as _root_callback  # noqa: F401, E402
from .compare import compare_commits_cmd as _commits, compare_files_cmd as _files  # noqa: F401, E402
from .parse import parse_files_cmd as _parse_files  # noqa: F401, E402


def main() -> None:
    app()
