"""Managed resource implementations."""

from linear_provider.provider.resources.workflow_state import (
    WorkflowStateModel,
    WorkflowStateResource,
)

__all__ = ["WorkflowStateModel", "WorkflowStateResource"]
