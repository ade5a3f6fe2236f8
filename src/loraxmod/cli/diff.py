"""lorax diff command - semantic diff of two versions of a file."""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from loraxmod.cli.extract import resolve_language
from loraxmod.cli.utils import echo_json, language_option, lorax_errors, schema_option
from loraxmod.diff.models import DiffResult
from loraxmod.parser import LanguageParser

_TYPE_STYLES = {
    "ADD": "green",
    "REMOVE": "red",
    "RENAME": "cyan",
    "MOVE": "magenta",
    "MODIFY": "yellow",
}


def _identity(change: dict) -> str:
    old, new = change["old_identity"], change["new_identity"]
    if old is not None and new is not None and old != new:
        return f"{old} -> {new}"
    return old if old is not None else (new or "")


def _make_diff_table(result: DiffResult) -> Table:
    """One row per change, then a dim summary row."""
    table = Table(show_header=True, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("change", width=6)
    table.add_column("node type", style="white")
    table.add_column("identity", style="bold")
    table.add_column("path", style="dim")

    for change in result.to_dict()["changes"]:
        style = _TYPE_STYLES[change["type"]]
        table.add_row(
            f"[{style}]{change['type']}[/{style}]",
            change["node_type"],
            _identity(change),
            change["path"] or "(top level)",
        )

    counts = ", ".join(f"{count} {name}" for name, count in result.summary.items() if count)
    table.add_row("", "", "", counts or "no changes", style="dim")
    return table


@click.command()
@click.argument("old", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@language_option
@schema_option
@click.option("--full-text", is_flag=True, help="Do not truncate old/new values")
@click.option("--metadata", is_flag=True, help="Include old/new paths and line numbers")
@click.option("--summary", "summary_only", is_flag=True, help="Print only change counts")
@click.option("--table", "as_table", is_flag=True, help="Print a table instead of JSON")
@click.pass_context
def diff_command(
    ctx: click.Context,
    old: Path,
    new: Path,
    language: str | None,
    schema_path: Path | None,
    full_text: bool,
    metadata: bool,
    summary_only: bool,
    as_table: bool,
) -> None:
    """Semantic diff from OLD to NEW as JSON.

    The language is detected from OLD unless --language is given.
    """
    config = ctx.obj["config"]
    with lorax_errors():
        parser = LanguageParser.create(
            resolve_language(old, language), schema_path=schema_path, config=config
        )
        result = parser.diff_files(old, new, include_full_text=full_text or None)

    if as_table:
        Console(highlight=False).print(_make_diff_table(result))
    elif summary_only:
        echo_json(result.summary)
    else:
        echo_json(result.to_dict(with_metadata=metadata))
