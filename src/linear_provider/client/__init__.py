"""Linear GraphQL API client."""

from __future__ import annotations

from linear_provider.client.client import LinearClient
from linear_provider.client.exceptions import (
    AuthenticationError,
    GraphQLError,
    LinearError,
    NotFoundError,
    RateLimitError,
    ServerError,
)

__all__ = [
    "AuthenticationError",
    "GraphQLError",
    "LinearClient",
    "LinearError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
]
