"""linear-provider CLI -- manage Linear workflow states from the command line."""
# mypy: disable-error-code="misc,untyped-decorator"

from __future__ import annotations

import logging
import sys

import click
import structlog

from linear_provider import __version__
from linear_provider.cli.commands.workflow_state import workflow_state
from linear_provider.config.settings import Settings


def configure_logging(verbose: bool = False) -> None:
    """Send log lines to stderr so stdout carries only command output."""
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


@click.group()
@click.option(
    "--api-url",
    default=None,
    help="Linear GraphQL endpoint. Defaults to LINEAR_API_URL or the public API.",
)
@click.option(
    "--api-key",
    default=None,
    help="Linear API key. Defaults to LINEAR_API_KEY.",
)
@click.option(
    "--state-file",
    default=None,
    help="Path of the JSON state file. Defaults to LINEAR_STATE_FILE.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Log lifecycle details to stderr.",
)
@click.version_option(version=__version__, prog_name="linear-provider")
@click.pass_context
def cli(
    ctx: click.Context,
    api_url: str | None,
    api_key: str | None,
    state_file: str | None,
    output_format: str,
    verbose: bool,
) -> None:
    """linear-provider -- declarative management of Linear workflow states."""
    configure_logging(verbose)

    overrides = {"api_url": api_url, "api_key": api_key, "state_file": state_file}
    settings = Settings().model_copy(update={k: v for k, v in overrides.items() if v is not None})

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["format"] = output_format


cli.add_command(workflow_state)


if __name__ == "__main__":
    cli()
