"""loraxmod CLI - lorax command."""

import click

from loraxmod.cli.diff import diff_command
from loraxmod.cli.extract import extract_command
from loraxmod.cli.resolve import resolve_command
from loraxmod.cli.utils import load_cli_config
from loraxmod.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="lorax")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """loraxmod - schema-driven extraction and semantic diff for tree-sitter grammars."""
    ctx.ensure_object(dict)
    config = load_cli_config()
    configure_logging(config=config.logging, verbose=verbose)
    ctx.obj["config"] = config


cli.add_command(extract_command, name="extract")
cli.add_command(diff_command, name="diff")
cli.add_command(resolve_command, name="resolve")


if __name__ == "__main__":
    cli()
