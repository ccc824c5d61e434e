"""Errors raised by provider lifecycle operations.

Each error knows how to present itself as diagnostics so the lifecycle
server can surface it to the user without inspecting its type.
"""

from __future__ import annotations

from linear_provider.provider.diagnostics import Diagnostics


class ProviderError(Exception):
    """Base exception for lifecycle failures."""

    summary = "Provider Error"

    def __init__(self, detail: str, summary: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        if summary is not None:
            self.summary = summary

    @property
    def diagnostics(self) -> Diagnostics:
        diags = Diagnostics()
        diags.add_error(self.summary, self.detail)
        return diags


class SchemaValidationError(ProviderError):
    """Configuration rejected by the resource schema before any remote call."""

    summary = "Invalid Configuration"

    def __init__(self, diagnostics: Diagnostics) -> None:
        detail = "; ".join(str(d) for d in diagnostics.errors)
        super().__init__(detail)
        self._diagnostics = diagnostics

    @property
    def diagnostics(self) -> Diagnostics:
        return self._diagnostics


class ClientError(ProviderError):
    """A remote call failed or returned an unusable result."""

    summary = "Client Error"


class ImportIdentifierError(ClientError):
    """Import identifier does not have the expected ``name:team_key`` shape."""

    summary = "Unexpected Import Identifier"


class ConfigureError(ProviderError):
    """A resource was configured with provider data of the wrong type."""

    summary = "Unexpected Resource Configure Type"
