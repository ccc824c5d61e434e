"""Shared GraphQL response handling."""

from __future__ import annotations

from typing import Any

import httpx

from linear_provider.client.exceptions import (
    AuthenticationError,
    GraphQLError,
    LinearError,
    NotFoundError,
    RateLimitError,
    ServerError,
)


def _error_messages(errors: list[dict[str, Any]]) -> str:
    messages = [str(err.get("message", "")) for err in errors if isinstance(err, dict)]
    return "; ".join(m for m in messages if m)


def _error_codes(errors: list[dict[str, Any]]) -> set[str]:
    codes: set[str] = set()
    for err in errors:
        if not isinstance(err, dict):
            continue
        extensions = err.get("extensions") or {}
        code = extensions.get("code") if isinstance(extensions, dict) else None
        if code:
            codes.add(str(code))
    return codes


def _retry_after(response: httpx.Response) -> int | None:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def handle_response(response: httpx.Response) -> dict[str, Any]:
    """Return the ``data`` member of a GraphQL response or raise.

    Non-2xx statuses map onto the transport exceptions. A 2xx (or 400)
    body carrying an ``errors`` array raises :class:`GraphQLError`, or
    :class:`RateLimitError` when Linear flags the request as rate
    limited.
    """
    status = response.status_code

    body: Any = None
    try:
        body = response.json()
    except ValueError:
        body = None

    errors: list[dict[str, Any]] = []
    if isinstance(body, dict) and isinstance(body.get("errors"), list):
        errors = body["errors"]

    detail = _error_messages(errors)
    if not detail and not response.is_success:
        detail = response.text[:200] if response.text else ""

    if "RATELIMITED" in _error_codes(errors) or status == 429:
        raise RateLimitError(
            detail or "Rate limit exceeded",
            retry_after=_retry_after(response),
        )

    if status in (401, 403):
        raise AuthenticationError(detail or "Authentication failed")

    if status == 404:
        raise NotFoundError(detail or "Resource not found")

    if status >= 500:
        raise ServerError(detail or "Internal server error", status_code=status)

    # Linear answers malformed queries with 400 and a GraphQL errors body
    if errors:
        raise GraphQLError(detail or "GraphQL request failed", errors=errors, status_code=status)

    if not response.is_success:
        raise LinearError(detail or f"Request failed with status {status}", status_code=status)

    if not isinstance(body, dict) or not isinstance(body.get("data"), dict):
        raise LinearError("Response did not contain a data object", status_code=status)

    return body["data"]
