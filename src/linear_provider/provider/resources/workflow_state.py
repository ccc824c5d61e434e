"""Linear team workflow state resource."""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, ClassVar

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from linear_provider.client import LinearClient, LinearError
from linear_provider.client.models import (
    WorkflowState,
    WorkflowStateCreateInput,
    WorkflowStateUpdateInput,
)
from linear_provider.provider.exceptions import (
    ClientError,
    ConfigureError,
    ImportIdentifierError,
    ProviderError,
    SchemaValidationError,
)
from linear_provider.provider.resource import ImportableResource
from linear_provider.provider.schema import (
    Attribute,
    AttributeKind,
    Schema,
    one_of,
    regex_matches,
    requires_replace,
    to_decimal,
    use_state_for_unknown,
    utf8_length_at_least,
)

logger = structlog.get_logger()

WORKFLOW_STATE_TYPES = ("triage", "backlog", "unstarted", "started", "completed", "canceled")
COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")
UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)

_CLIENT_ERRORS = (LinearError, PydanticValidationError)


class WorkflowStateModel(BaseModel):
    """Local record of a workflow state.

    Everything is optional: an imported record holds only ``id`` until the
    next read fills in the rest.
    """

    id: str | None = None
    name: str | None = None
    type: str | None = None
    description: str | None = None
    color: str | None = None
    position: Decimal | None = None
    team_id: str | None = None


class WorkflowStateResource(ImportableResource[WorkflowStateModel]):
    """Manages a workflow state of a Linear team.

    ``type`` and ``team_id`` cannot change in place, a change to either
    replaces the workflow state. Import identifiers have the form
    ``<workflow state name>:<team key>``.
    """

    type_name_suffix: ClassVar[str] = "workflow_state"
    model: ClassVar[type[BaseModel]] = WorkflowStateModel

    def __init__(self, client: LinearClient | None = None) -> None:
        self._client = client

    def schema(self) -> Schema:
        return Schema(
            description="Linear team workflow state.",
            attributes=[
                Attribute(
                    name="id",
                    description="Identifier of the workflow state.",
                    computed=True,
                    plan_modifiers=[use_state_for_unknown()],
                ),
                Attribute(
                    name="name",
                    description="Name of the workflow state.",
                    required=True,
                    validators=[utf8_length_at_least(1)],
                ),
                Attribute(
                    name="type",
                    description="Type of the workflow state.",
                    required=True,
                    validators=[one_of(*WORKFLOW_STATE_TYPES)],
                    plan_modifiers=[requires_replace()],
                ),
                Attribute(
                    name="position",
                    kind=AttributeKind.NUMBER,
                    description="Position of the workflow state.",
                    required=True,
                ),
                Attribute(
                    name="color",
                    description="Color of the workflow state.",
                    required=True,
                    validators=[regex_matches(COLOR_PATTERN, "must be a hex color")],
                ),
                Attribute(
                    name="description",
                    description="Description of the workflow state.",
                    optional=True,
                ),
                Attribute(
                    name="team_id",
                    description="Identifier of the team.",
                    required=True,
                    validators=[regex_matches(UUID_PATTERN, "must be an uuid")],
                    plan_modifiers=[requires_replace()],
                ),
            ],
        )

    def configure(self, provider_data: Any) -> None:
        # Nothing to do until the provider has been configured
        if provider_data is None:
            return

        if not isinstance(provider_data, LinearClient):
            raise ConfigureError(
                f"Expected LinearClient, got: {type(provider_data).__name__}. "
                "Please report this issue to the provider developers."
            )

        self._client = provider_data

    # -- Lifecycle ----------------------------------------------------------

    def create(self, plan: WorkflowStateModel) -> WorkflowStateModel:
        self._validate(plan)
        client = self._require_client()

        data = WorkflowStateCreateInput(
            name=plan.name,
            type=plan.type,
            position=float(plan.position),
            color=plan.color,
            description=plan.description,
            team_id=plan.team_id,
        )

        try:
            workflow_state = client.workflow_states.create(data)
        except _CLIENT_ERRORS as exc:
            raise ClientError(f"Unable to create workflow state, got error: {exc}") from exc

        logger.debug("workflow_state_created", workflow_state_id=workflow_state.id)

        return plan.model_copy(
            update={
                "id": workflow_state.id,
                "name": workflow_state.name,
                "type": workflow_state.type,
                "position": to_decimal(workflow_state.position),
                "color": workflow_state.color,
                "description": workflow_state.description,
            }
        )

    def read(self, state: WorkflowStateModel) -> WorkflowStateModel:
        client = self._require_client()

        try:
            workflow_state = client.workflow_states.get(state.id or "")
        except _CLIENT_ERRORS as exc:
            raise ClientError(f"Unable to read workflow state, got error: {exc}") from exc

        logger.debug("workflow_state_read", workflow_state_id=state.id)

        return state.model_copy(
            update={
                "name": workflow_state.name,
                "type": workflow_state.type,
                "position": to_decimal(workflow_state.position),
                "color": workflow_state.color,
                "team_id": _team_id(workflow_state),
                "description": workflow_state.description,
            }
        )

    def update(self, plan: WorkflowStateModel, state: WorkflowStateModel) -> WorkflowStateModel:
        self._validate(plan)
        client = self._require_client()

        data = WorkflowStateUpdateInput(
            name=plan.name,
            color=plan.color,
            description=plan.description,
            position=float(plan.position),
        )

        workflow_state_id = plan.id or state.id or ""
        try:
            workflow_state = client.workflow_states.update(workflow_state_id, data)
        except _CLIENT_ERRORS as exc:
            raise ClientError(f"Unable to update workflow state, got error: {exc}") from exc

        logger.debug("workflow_state_updated", workflow_state_id=workflow_state_id)

        return plan.model_copy(
            update={
                "id": workflow_state_id,
                "name": workflow_state.name,
                "position": to_decimal(workflow_state.position),
                "color": workflow_state.color,
                "description": workflow_state.description,
            }
        )

    def delete(self, state: WorkflowStateModel) -> None:
        client = self._require_client()

        try:
            client.workflow_states.delete(state.id or "")
        except _CLIENT_ERRORS as exc:
            raise ClientError(f"Unable to delete workflow state, got error: {exc}") from exc

        logger.debug("workflow_state_deleted", workflow_state_id=state.id)

    def import_state(self, identifier: str) -> WorkflowStateModel:
        parts = identifier.split(":")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise ImportIdentifierError(
                "Expected import identifier with format: workflow_state_name:team_key. "
                f'Got: "{identifier}"'
            )

        name, team_key = parts
        client = self._require_client()

        try:
            matches = client.workflow_states.find(name, team_key)
        except _CLIENT_ERRORS as exc:
            raise ClientError(f"Unable to import workflow state, got error: {exc}") from exc

        if len(matches) != 1:
            raise ClientError(
                f'Unable to import workflow state, expected exactly one workflow state named "{name}" '
                f'in team "{team_key}", found {len(matches)}'
            )

        logger.debug("workflow_state_imported", workflow_state_id=matches[0].id, identifier=identifier)
        return WorkflowStateModel(id=matches[0].id)

    # -- Helpers --------------------------------------------------------------

    def _require_client(self) -> LinearClient:
        if self._client is None:
            raise ProviderError(
                "The provider has not been configured with an API client.",
                summary="Unconfigured Provider",
            )
        return self._client

    def _validate(self, record: WorkflowStateModel) -> None:
        diags = self.schema().validate_config(record.model_dump(exclude={"id"}))
        if diags.has_error():
            raise SchemaValidationError(diags)


def _team_id(workflow_state: WorkflowState) -> str | None:
    return workflow_state.team.id if workflow_state.team else None
