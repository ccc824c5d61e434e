"""Accumulated user-facing errors and warnings of a lifecycle operation."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import StrEnum

from pydantic import BaseModel


class Severity(StrEnum):
    """Diagnostic severity."""

    ERROR = "error"
    WARNING = "warning"


class Diagnostic(BaseModel):
    """A single diagnostic, optionally tied to an attribute."""

    severity: Severity
    summary: str
    detail: str = ""
    attribute: str | None = None

    def __str__(self) -> str:
        prefix = f"{self.attribute}: " if self.attribute else ""
        text = f"{prefix}{self.summary}"
        return f"{text}: {self.detail}" if self.detail else text


class Diagnostics:
    """Ordered collection of diagnostics."""

    def __init__(self, items: Iterable[Diagnostic] | None = None) -> None:
        self._items: list[Diagnostic] = list(items or [])

    def add_error(self, summary: str, detail: str = "", attribute: str | None = None) -> None:
        self._items.append(
            Diagnostic(severity=Severity.ERROR, summary=summary, detail=detail, attribute=attribute)
        )

    def add_warning(self, summary: str, detail: str = "", attribute: str | None = None) -> None:
        self._items.append(
            Diagnostic(severity=Severity.WARNING, summary=summary, detail=detail, attribute=attribute)
        )

    def extend(self, other: Iterable[Diagnostic]) -> None:
        self._items.extend(other)

    def has_error(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self._items)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity == Severity.WARNING]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"Diagnostics({self._items!r})"
