"""Drives resource lifecycle operations against the state store.

Every call attempts its remote operations exactly once. Failures come
back as diagnostics on the result and leave stored state as it was
before the failing remote call.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import BaseModel, Field

from linear_provider.provider.diagnostics import Diagnostics
from linear_provider.provider.exceptions import ProviderError, SchemaValidationError
from linear_provider.provider.provider import LinearProvider
from linear_provider.provider.resource import ImportableResource, Resource
from linear_provider.provider.schema import Plan, PlanAction
from linear_provider.provider.state import StateStore

logger = structlog.get_logger()


class ApplyResult(BaseModel):
    """Outcome of one lifecycle call."""

    address: str
    action: PlanAction | None = None
    state: dict[str, Any] | None = None
    diagnostics: Diagnostics = Field(default_factory=Diagnostics)

    model_config = {"arbitrary_types_allowed": True}

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_error()


def resource_address(type_name: str, name: str) -> str:
    return f"{type_name}.{name}"


class ResourceServer:
    """Plan, apply, refresh, destroy and import managed resources."""

    def __init__(self, provider: LinearProvider, store: StateStore) -> None:
        self._provider = provider
        self._store = store

    # -- Plan -----------------------------------------------------------------

    def plan(self, type_name: str, name: str, config: Mapping[str, Any]) -> Plan:
        """Validate ``config`` and diff it against stored state.

        Raises :class:`SchemaValidationError` before any remote call when
        the configuration does not satisfy the schema.
        """
        resource = self._provider.resource(type_name)
        return self._plan(resource, resource_address(type_name, name), config)

    def _plan(self, resource: Resource, address: str, config: Mapping[str, Any]) -> Plan:
        schema = resource.schema()
        diags = schema.validate_config(config)
        if diags.has_error():
            raise SchemaValidationError(diags)
        return schema.plan(self._prior(resource, address), config)

    def _prior(self, resource: Resource, address: str) -> dict[str, Any] | None:
        stored = self._store.get(address)
        if stored is None:
            return None
        # round-trip through the record type so numbers compare as decimals
        return resource.to_values(resource.to_model(stored))

    # -- Apply ----------------------------------------------------------------

    def apply(self, type_name: str, name: str, config: Mapping[str, Any]) -> ApplyResult:
        """Bring the remote object in line with ``config``."""
        address = resource_address(type_name, name)
        resource = self._provider.resource(type_name)

        try:
            plan = self._plan(resource, address, config)
        except ProviderError as exc:
            return self._failed(address, None, exc)

        try:
            state = self._apply_plan(resource, address, plan)
        except ProviderError as exc:
            return self._failed(address, plan.action, exc)

        logger.info("resource_applied", address=address, action=plan.action.value)
        return ApplyResult(address=address, action=plan.action, state=state)

    def _apply_plan(self, resource: Resource, address: str, plan: Plan) -> dict[str, Any] | None:
        planned = resource.to_model(plan.planned)

        if plan.action == PlanAction.NOOP:
            return self._store.get(address)

        if plan.action == PlanAction.UPDATE:
            prior = resource.to_model(plan.prior or {})
            return self._persist(address, resource.to_values(resource.update(planned, prior)))

        if plan.action == PlanAction.REPLACE:
            prior = resource.to_model(plan.prior or {})
            resource.delete(prior)
            # the old object is gone even if the create below fails
            self._store.remove(address)
            self._store.save()
            logger.info("resource_replacing", address=address, attributes=plan.requires_replace)

        return self._persist(address, resource.to_values(resource.create(planned)))

    # -- Refresh / destroy / import ---------------------------------------------

    def refresh(self, type_name: str, name: str) -> ApplyResult:
        """Overwrite stored state with the remote object."""
        address = resource_address(type_name, name)
        resource = self._provider.resource(type_name)

        try:
            current = self._require_state(resource, address)
            state = self._persist(address, resource.to_values(resource.read(current)))
        except ProviderError as exc:
            return self._failed(address, None, exc)

        return ApplyResult(address=address, state=state)

    def destroy(self, type_name: str, name: str) -> ApplyResult:
        """Delete the remote object and forget it."""
        address = resource_address(type_name, name)
        resource = self._provider.resource(type_name)

        try:
            current = self._require_state(resource, address)
            resource.delete(current)
        except ProviderError as exc:
            return self._failed(address, PlanAction.DELETE, exc)

        self._store.remove(address)
        self._store.save()
        logger.info("resource_destroyed", address=address)
        return ApplyResult(address=address, action=PlanAction.DELETE)

    def import_resource(self, type_name: str, name: str, identifier: str) -> ApplyResult:
        """Adopt an existing remote object into state, then read it in full."""
        address = resource_address(type_name, name)
        resource = self._provider.resource(type_name)

        if address in self._store:
            diags = Diagnostics()
            diags.add_error(
                "Resource already managed",
                f"{address} is already in state. Remove it before importing.",
            )
            return ApplyResult(address=address, state=self._store.get(address), diagnostics=diags)

        if not isinstance(resource, ImportableResource):
            diags = Diagnostics()
            diags.add_error("Resource Import Not Implemented", f"{type_name} cannot be imported.")
            return ApplyResult(address=address, diagnostics=diags)

        try:
            imported = resource.import_state(identifier)
            self._store.set_attribute(address, "id", resource.to_values(imported)["id"])
            current = resource.to_model(self._store.get(address) or {})
            state = self._persist(address, resource.to_values(resource.read(current)))
        except ProviderError as exc:
            self._store.remove(address)
            return self._failed(address, None, exc)

        logger.info("resource_imported", address=address, identifier=identifier)
        return ApplyResult(address=address, state=state)

    # -- Helpers ----------------------------------------------------------------

    def _require_state(self, resource: Resource, address: str) -> BaseModel:
        stored = self._store.get(address)
        if stored is None:
            raise ProviderError(f"{address} is not in state.", summary="Resource Not Found In State")
        return resource.to_model(stored)

    def _persist(self, address: str, values: dict[str, Any]) -> dict[str, Any]:
        self._store.set(address, values)
        self._store.save()
        return values

    def _failed(self, address: str, action: PlanAction | None, exc: ProviderError) -> ApplyResult:
        logger.error("resource_operation_failed", address=address, error=exc.detail)
        return ApplyResult(
            address=address,
            action=action,
            state=self._store.get(address),
            diagnostics=exc.diagnostics,
        )
