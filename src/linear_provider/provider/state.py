"""JSON-file backed store of last-known resource attribute values."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import structlog

logger = structlog.get_logger()

STATE_VERSION = 1


def _encode(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class StateStore:
    """Last-known attribute values keyed by resource address.

    Addresses look like ``linear_workflow_state.done``. Values are plain
    dicts; numbers are persisted as strings so decimals survive a round
    trip through the file.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        self._resources: dict[str, dict[str, Any]] = {}

    @classmethod
    def load(cls, path: str | Path) -> StateStore:
        """Open the state file at ``path``, starting empty when it is missing."""
        store = cls(path)
        if store.path is None or not store.path.exists():
            return store

        raw = json.loads(store.path.read_text())
        if not isinstance(raw, dict):
            raise ValueError(f"State file {store.path} does not contain a JSON object")
        version = raw.get("version")
        if version != STATE_VERSION:
            raise ValueError(f"Unsupported state file version {version!r} in {store.path}")
        store._resources = {
            address: dict(values) for address, values in raw.get("resources", {}).items()
        }
        logger.debug("state_loaded", path=str(store.path), resources=len(store._resources))
        return store

    def save(self) -> None:
        """Write the state file. A store without a path keeps state in memory."""
        if self.path is None:
            return
        payload = {"version": STATE_VERSION, "resources": self._resources}
        self.path.write_text(json.dumps(payload, indent=2, sort_keys=True, default=_encode) + "\n")
        logger.debug("state_saved", path=str(self.path), resources=len(self._resources))

    def get(self, address: str) -> dict[str, Any] | None:
        values = self._resources.get(address)
        return dict(values) if values is not None else None

    def set(self, address: str, values: dict[str, Any]) -> None:
        self._resources[address] = dict(values)

    def set_attribute(self, address: str, name: str, value: Any) -> None:
        self._resources.setdefault(address, {})[name] = value

    def remove(self, address: str) -> None:
        self._resources.pop(address, None)

    def addresses(self) -> list[str]:
        return sorted(self._resources)

    def __contains__(self, address: object) -> bool:
        return address in self._resources
