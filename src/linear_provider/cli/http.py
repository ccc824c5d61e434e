"""Lifecycle server construction for CLI commands."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import click

from linear_provider.cli.output import print_error
from linear_provider.config.settings import Settings
from linear_provider.provider.provider import LinearProvider
from linear_provider.provider.server import ResourceServer
from linear_provider.provider.state import StateStore


@contextmanager
def open_server(ctx: click.Context) -> Iterator[ResourceServer]:
    """Yield a ResourceServer over the configured state file.

    The provider builds its API client from the settings held in
    ``ctx.obj``. Exits with status 1 when the state file cannot be read.
    """
    settings: Settings = ctx.obj["settings"]
    try:
        store = StateStore.load(settings.state_file)
    except (OSError, ValueError) as exc:
        print_error(f"Could not read state file {settings.state_file}: {exc}")
        ctx.exit(1)

    provider = LinearProvider()
    provider.configure(settings)
    try:
        yield ResourceServer(provider, store)
    finally:
        provider.close()
