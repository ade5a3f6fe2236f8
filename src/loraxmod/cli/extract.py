"""lorax extract command - schema-driven extraction for one file."""

from pathlib import Path

import click

from loraxmod.cli.utils import echo_json, language_option, lorax_errors, schema_option
from loraxmod.languages import detect_language
from loraxmod.parser import LanguageParser


def resolve_language(path: Path, language: str | None) -> str:
    """Language id from the option, else from the file extension."""
    if language:
        return language
    detected = detect_language(path)
    if detected is None:
        raise click.ClickException(
            f"Cannot detect language for '{path.name}'. Pass --language explicitly."
        )
    return detected


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@language_option
@schema_option
@click.option("-r", "--recurse", is_flag=True, help="Extract every named node, in pre-order")
@click.option(
    "-t",
    "--type",
    "node_types",
    multiple=True,
    help="Only extract nodes of this type (repeatable)",
)
@click.pass_context
def extract_command(
    ctx: click.Context,
    file: Path,
    language: str | None,
    schema_path: Path | None,
    recurse: bool,
    node_types: tuple[str, ...],
) -> None:
    """Extract canonical intents from FILE as JSON.

    Without options only the root node is extracted.
    """
    config = ctx.obj["config"]
    with lorax_errors():
        parser = LanguageParser.create(
            resolve_language(file, language), schema_path=schema_path, config=config
        )
        source = file.read_bytes()
        if node_types:
            nodes = parser.extract_by_type(source, node_types)
            echo_json([n.to_dict() for n in nodes])
        elif recurse:
            nodes = parser.extract_all(source, recurse=True)
            echo_json([n.to_dict() for n in nodes])
        else:
            echo_json(parser.extract_all(source).to_dict())
