"""CLI utilities."""

import json
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import click
import structlog

from loraxmod.config.loader import load_config
from loraxmod.config.models import LoraxConfig
from loraxmod.core.errors import LoraxError
from loraxmod.core.logging import get_log_file_path

log = structlog.get_logger(__name__)


def load_cli_config(project_root: Path | None = None) -> LoraxConfig:
    """Load config for a CLI invocation.

    Raises:
        click.ClickException: If the config files or env vars are invalid
    """
    with lorax_errors():
        return load_config(project_root)


@contextmanager
def lorax_errors() -> Iterator[None]:
    """Re-raise ``LoraxError`` as ``click.ClickException`` with its code.

    The error is logged with its details first; when a file output is
    configured the message points at that file.
    """
    try:
        yield
    except LoraxError as e:
        log.error("command_failed", **e.to_dict())
        message = str(e)
        log_file = get_log_file_path()
        if log_file is not None:
            message = f"{message}\nSee {log_file} for details."
        raise click.ClickException(message) from e


def echo_json(data: Any, *, indent: int | None = 2) -> None:
    click.echo(json.dumps(data, indent=indent, ensure_ascii=False))


def language_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "-l",
        "--language",
        default=None,
        help="Language id (default: detected from the file extension)",
    )(func)


def schema_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "-s",
        "--schema",
        "schema_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="node-types.json to use instead of the configured lookup",
    )(func)
