"""Linear provider: builds the API client and hands it to resources."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from linear_provider.client import LinearClient
from linear_provider.config.settings import Settings
from linear_provider.provider.resource import Resource
from linear_provider.provider.resources import WorkflowStateResource

logger = structlog.get_logger()


class LinearProvider:
    """Registry of resource types sharing one configured API client."""

    type_name = "linear"

    def __init__(self) -> None:
        self._factories: dict[str, Callable[[], Resource]] = {}
        self._client: LinearClient | None = None
        self.register(WorkflowStateResource)

    def register(self, factory: Callable[[], Resource]) -> None:
        """Register a resource factory under its full type name."""
        self._factories[factory().metadata(self.type_name)] = factory

    def configure(self, settings: Settings | None = None) -> LinearClient:
        """Build the API client every resource created afterwards receives."""
        settings = settings or Settings()
        self._client = LinearClient(
            api_url=settings.api_url,
            api_key=settings.api_key or None,
            token=settings.token or None,
            timeout=settings.timeout,
        )
        logger.debug("provider_configured", api_url=settings.api_url)
        return self._client

    def configure_client(self, client: LinearClient) -> None:
        """Use an already built client."""
        self._client = client

    def resource(self, type_name: str) -> Resource:
        """Return a configured resource handler for ``type_name``."""
        if type_name not in self._factories:
            raise ValueError(
                f"No resource registered for type '{type_name}'. "
                f"Available: {self.resource_types}"
            )
        resource = self._factories[type_name]()
        resource.configure(self._client)
        return resource

    @property
    def resource_types(self) -> list[str]:
        return list(self._factories)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
