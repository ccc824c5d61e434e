"""Workflow state lifecycle commands."""
# mypy: disable-error-code="misc,untyped-decorator"

from __future__ import annotations

from typing import Any

import click

from linear_provider.cli.http import open_server
from linear_provider.cli.output import print_detail, print_diagnostics, print_error, print_json, print_table
from linear_provider.provider.server import ApplyResult, resource_address
from linear_provider.provider.state import StateStore

TYPE_NAME = "linear_workflow_state"

_FIELDS = ["id", "name", "type", "position", "color", "description", "team_id"]


def _report(ctx: click.Context, result: ApplyResult) -> None:
    if result.diagnostics:
        print_diagnostics(result.diagnostics)
    if not result.ok:
        ctx.exit(1)

    if ctx.obj.get("format") == "json":
        print_json(
            {
                "address": result.address,
                "action": result.action.value if result.action else None,
                "state": result.state,
            }
        )
        return

    action = f" ({result.action.value})" if result.action else ""
    click.echo(f"{result.address}{action}")
    for field in _FIELDS:
        if result.state and field in result.state:
            print_detail(field, _display(result.state[field]))


def _display(value: Any) -> str:
    return "" if value is None else str(value)


@click.group("workflow-state")
def workflow_state() -> None:
    """Manage Linear team workflow states."""


@workflow_state.command()
@click.argument("resource_name", metavar="NAME")
@click.option("--name", "state_name", required=True, help="Name of the workflow state.")
@click.option(
    "--type",
    "state_type",
    required=True,
    help="triage, backlog, unstarted, started, completed or canceled.",
)
@click.option("--position", required=True, help="Position of the workflow state.")
@click.option("--color", required=True, help="Hex color, e.g. #5e6ad2.")
@click.option("--description", default=None, help="Description of the workflow state.")
@click.option("--team-id", required=True, help="Identifier of the owning team.")
@click.pass_context
def apply(
    ctx: click.Context,
    resource_name: str,
    state_name: str,
    state_type: str,
    position: str,
    color: str,
    description: str | None,
    team_id: str,
) -> None:
    """Create, update or replace the workflow state tracked as NAME."""
    config = {
        "name": state_name,
        "type": state_type,
        "position": position,
        "color": color,
        "description": description,
        "team_id": team_id,
    }
    with open_server(ctx) as server:
        result = server.apply(TYPE_NAME, resource_name, config)
    _report(ctx, result)


@workflow_state.command()
@click.argument("resource_name", metavar="NAME")
@click.pass_context
def refresh(ctx: click.Context, resource_name: str) -> None:
    """Refresh the stored state of NAME from Linear."""
    with open_server(ctx) as server:
        result = server.refresh(TYPE_NAME, resource_name)
    _report(ctx, result)


@workflow_state.command()
@click.argument("resource_name", metavar="NAME")
@click.pass_context
def destroy(ctx: click.Context, resource_name: str) -> None:
    """Delete the workflow state tracked as NAME."""
    with open_server(ctx) as server:
        result = server.destroy(TYPE_NAME, resource_name)
    _report(ctx, result)


@workflow_state.command("import")
@click.argument("resource_name", metavar="NAME")
@click.argument("identifier")
@click.pass_context
def import_(ctx: click.Context, resource_name: str, identifier: str) -> None:
    """Adopt an existing workflow state as NAME.

    IDENTIFIER has the form <workflow state name>:<team key>, e.g. Done:ENG.
    """
    with open_server(ctx) as server:
        result = server.import_resource(TYPE_NAME, resource_name, identifier)
    _report(ctx, result)


@workflow_state.command()
@click.argument("resource_name", metavar="NAME", required=False)
@click.pass_context
def show(ctx: click.Context, resource_name: str | None) -> None:
    """Show stored workflow states, or the one tracked as NAME."""
    state_file = ctx.obj["settings"].state_file
    try:
        store = StateStore.load(state_file)
    except (OSError, ValueError) as exc:
        print_error(f"Could not read state file {state_file}: {exc}")
        ctx.exit(1)

    if resource_name is not None:
        address = resource_address(TYPE_NAME, resource_name)
        values = store.get(address)
        if values is None:
            print_error(f"{address} is not in state.")
            ctx.exit(1)
        _report(ctx, ApplyResult(address=address, state=values))
        return

    prefix = f"{TYPE_NAME}."
    addresses = [a for a in store.addresses() if a.startswith(prefix)]
    if ctx.obj.get("format") == "json":
        print_json({address: store.get(address) for address in addresses})
        return

    if not addresses:
        click.echo("No workflow states in state.")
        return

    rows = []
    for address in addresses:
        values = store.get(address) or {}
        rows.append(
            [
                address[len(prefix):],
                _display(values.get("id")),
                _display(values.get("name")),
                _display(values.get("type")),
                _display(values.get("position")),
            ]
        )
    print_table(["NAME", "ID", "STATE", "TYPE", "POSITION"], rows)
