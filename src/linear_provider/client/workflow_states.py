"""Workflow state operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from linear_provider.client.exceptions import LinearError, NotFoundError
from linear_provider.client.models import (
    WorkflowState,
    WorkflowStateCreateInput,
    WorkflowStateRef,
    WorkflowStateUpdateInput,
)

if TYPE_CHECKING:
    from linear_provider.client.client import LinearClient

CREATE_WORKFLOW_STATE = """
mutation createWorkflowState($input: WorkflowStateCreateInput!) {
  workflowStateCreate(input: $input) {
    workflowState {
      id
      name
      type
      position
      color
      description
    }
  }
}
"""

GET_WORKFLOW_STATE = """
query getWorkflowState($id: String!) {
  workflowState(id: $id) {
    id
    name
    type
    position
    color
    description
    team {
      id
    }
  }
}
"""

UPDATE_WORKFLOW_STATE = """
mutation updateWorkflowState($input: WorkflowStateUpdateInput!, $id: String!) {
  workflowStateUpdate(input: $input, id: $id) {
    workflowState {
      id
      name
      position
      color
      description
    }
  }
}
"""

DELETE_WORKFLOW_STATE = """
mutation deleteWorkflowState($id: String!) {
  workflowStateArchive(id: $id) {
    success
  }
}
"""

FIND_WORKFLOW_STATE = """
query findWorkflowState($name: String!, $key: String!) {
  workflowStates(filter: {name: {eq: $name}, team: {key: {eq: $key}}}) {
    nodes {
      id
    }
  }
}
"""


def _select(payload: dict[str, Any], *path: str) -> Any:
    """Walk ``path`` into a response payload, raising on a missing member."""
    node: Any = payload
    for key in path:
        if not isinstance(node, dict) or key not in node:
            raise LinearError(f"Unexpected response shape: missing {'.'.join(path)}")
        node = node[key]
    return node


class WorkflowStatesAPI:
    """Workflow state queries and mutations.

    Reached through :attr:`LinearClient.workflow_states`.
    """

    def __init__(self, client: LinearClient) -> None:
        self._client = client

    def create(self, data: WorkflowStateCreateInput) -> WorkflowState:
        """Create a workflow state and return the stored record."""
        payload = self._client.execute(
            "createWorkflowState",
            CREATE_WORKFLOW_STATE,
            {"input": data.model_dump(by_alias=True, exclude_none=True)},
        )
        return WorkflowState.model_validate(_select(payload, "workflowStateCreate", "workflowState"))

    def get(self, workflow_state_id: str) -> WorkflowState:
        """Fetch a workflow state, including its team reference."""
        payload = self._client.execute(
            "getWorkflowState",
            GET_WORKFLOW_STATE,
            {"id": workflow_state_id},
        )
        node = _select(payload, "workflowState")
        if node is None:
            raise NotFoundError(f"Workflow state {workflow_state_id} not found")
        return WorkflowState.model_validate(node)

    def update(self, workflow_state_id: str, data: WorkflowStateUpdateInput) -> WorkflowState:
        """Update the mutable fields of a workflow state."""
        # description is sent even when None so that removing it clears it
        payload = self._client.execute(
            "updateWorkflowState",
            UPDATE_WORKFLOW_STATE,
            {"input": data.model_dump(), "id": workflow_state_id},
        )
        return WorkflowState.model_validate(_select(payload, "workflowStateUpdate", "workflowState"))

    def delete(self, workflow_state_id: str) -> None:
        """Archive a workflow state."""
        self._client.execute(
            "deleteWorkflowState",
            DELETE_WORKFLOW_STATE,
            {"id": workflow_state_id},
        )

    def find(self, name: str, team_key: str) -> list[WorkflowStateRef]:
        """Look up workflow states by name within the team with ``team_key``."""
        payload = self._client.execute(
            "findWorkflowState",
            FIND_WORKFLOW_STATE,
            {"name": name, "key": team_key},
        )
        nodes = _select(payload, "workflowStates", "nodes") or []
        return [WorkflowStateRef.model_validate(node) for node in nodes]
