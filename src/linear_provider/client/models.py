"""Pydantic models for the Linear workflow state GraphQL operations."""

from __future__ import annotations

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class WorkflowStateCreateInput(BaseModel):
    """Input of the ``workflowStateCreate`` mutation."""

    name: str
    type: str
    position: float
    color: str
    description: str | None = None
    team_id: str = Field(alias="teamId")

    model_config = {"populate_by_name": True}


class WorkflowStateUpdateInput(BaseModel):
    """Input of the ``workflowStateUpdate`` mutation.

    ``type`` and ``teamId`` are absent: neither can change in place.
    """

    name: str
    color: str
    description: str | None = None
    position: float


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class TeamRef(BaseModel):
    """Nested team reference."""

    id: str


class WorkflowState(BaseModel):
    """Workflow state as returned by the API.

    Which fields are populated depends on the selection set of the
    operation that produced it.
    """

    id: str = ""
    name: str = ""
    type: str = ""
    position: float = 0.0
    color: str = ""
    description: str | None = None
    team: TeamRef | None = None


class WorkflowStateRef(BaseModel):
    """Lookup result carrying only the identifier."""

    id: str
