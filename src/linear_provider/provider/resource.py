"""Base interface for managed resources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from linear_provider.provider.schema import UNKNOWN, Schema

ModelT = TypeVar("ModelT", bound=BaseModel)


class Resource(ABC, Generic[ModelT]):
    """Lifecycle handler for one managed resource type.

    Each operation takes a typed record and returns the record to persist,
    raising a :class:`~linear_provider.provider.exceptions.ProviderError`
    on failure. Operations are attempted exactly once.
    """

    type_name_suffix: ClassVar[str]
    model: ClassVar[type[BaseModel]]

    def metadata(self, provider_type_name: str) -> str:
        """Return the full resource type name, e.g. ``linear_workflow_state``."""
        return f"{provider_type_name}_{self.type_name_suffix}"

    @abstractmethod
    def schema(self) -> Schema:
        """Return the attribute schema."""

    @abstractmethod
    def configure(self, provider_data: Any) -> None:
        """Receive the client handle built by the provider."""

    @abstractmethod
    def create(self, plan: ModelT) -> ModelT:
        """Create the remote object described by ``plan``."""

    @abstractmethod
    def read(self, state: ModelT) -> ModelT:
        """Refresh ``state`` from the remote object."""

    @abstractmethod
    def update(self, plan: ModelT, state: ModelT) -> ModelT:
        """Apply in-place changes from ``plan`` to the remote object."""

    @abstractmethod
    def delete(self, state: ModelT) -> None:
        """Delete the remote object."""

    # -- Conversions between schema values and records ---------------------

    def to_model(self, values: Mapping[str, Any]) -> ModelT:
        known = {k: (None if v is UNKNOWN else v) for k, v in values.items()}
        return self.model.model_validate(known)  # type: ignore[return-value]

    def to_values(self, model: ModelT) -> dict[str, Any]:
        return model.model_dump()


class ImportableResource(Resource[ModelT]):
    """Resource that can be adopted into state from an import identifier."""

    @abstractmethod
    def import_state(self, identifier: str) -> ModelT:
        """Resolve ``identifier`` to a record carrying at least the id."""
