"""lorax resolve command - show intent bindings from a schema file."""

from pathlib import Path

import click

from loraxmod.cli.utils import echo_json, lorax_errors
from loraxmod.schema.intents import IntentResolver
from loraxmod.schema.reader import SchemaReader


@click.command()
@click.argument("schema", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("node_types", nargs=-1)
def resolve_command(schema: Path, node_types: tuple[str, ...]) -> None:
    """Print intent -> field bindings for NODE_TYPES in SCHEMA.

    SCHEMA is a node-types.json file. With no NODE_TYPES, every node type
    that resolves at least one intent is listed.
    """
    with lorax_errors():
        resolver = IntentResolver(SchemaReader.from_file(schema))

    if node_types:
        echo_json({t: resolver.resolve(t) for t in node_types})
        return

    resolved = {t: resolver.resolve(t) for t in resolver.schema.node_types}
    echo_json({t: fields for t, fields in sorted(resolved.items()) if fields})
