"""Synchronous Linear GraphQL client."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from linear_provider import __version__
from linear_provider.client._response import handle_response
from linear_provider.client.exceptions import LinearError
from linear_provider.client.workflow_states import WorkflowStatesAPI

logger = structlog.get_logger()

DEFAULT_API_URL = "https://api.linear.app/graphql"
DEFAULT_TIMEOUT = 30.0


class LinearClient:
    """Synchronous client for the Linear GraphQL API.

    Usage::

        with LinearClient(api_key="lin_api_...") as client:
            state = client.workflow_states.get("1f0b...")
            print(state.name, state.position)
    """

    def __init__(
        self,
        *,
        api_url: str = DEFAULT_API_URL,
        api_key: str | None = None,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers: dict[str, str] = {
            "User-Agent": f"linear-provider/{__version__}",
            "Content-Type": "application/json",
        }
        # Personal API keys go in verbatim, OAuth tokens as a bearer token
        if api_key:
            headers["Authorization"] = api_key
        elif token:
            headers["Authorization"] = f"Bearer {token}"

        self.api_url = api_url
        self._http = httpx.Client(
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

        # Operation namespaces
        self.workflow_states = WorkflowStatesAPI(self)

    # -- Context manager --------------------------------------------------

    def __enter__(self) -> LinearClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP transport."""
        self._http.close()

    # -- GraphQL ----------------------------------------------------------

    def execute(
        self,
        operation_name: str,
        query: str,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Run one GraphQL operation and return its ``data`` object."""
        request = {
            "operationName": operation_name,
            "query": query,
            "variables": variables or {},
        }
        try:
            response = self._http.post(self.api_url, json=request)
        except httpx.HTTPError as exc:
            logger.error("graphql_request_failed", operation=operation_name, error=str(exc))
            raise LinearError(f"{operation_name} request failed: {exc}") from exc

        try:
            return handle_response(response)
        except LinearError as exc:
            logger.error(
                "graphql_request_failed",
                operation=operation_name,
                status_code=exc.status_code,
                error=exc.message,
            )
            raise
