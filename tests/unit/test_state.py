"""Tests for the JSON state store."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

import pytest

from linear_provider.provider.state import STATE_VERSION, StateStore


class TestStateStore:
    def test_in_memory_operations(self) -> None:
        store = StateStore()
        store.set("linear_workflow_state.b", {"id": "2"})
        store.set_attribute("linear_workflow_state.a", "id", "1")

        assert store.addresses() == ["linear_workflow_state.a", "linear_workflow_state.b"]
        assert store.get("linear_workflow_state.a") == {"id": "1"}
        assert "linear_workflow_state.b" in store

        store.remove("linear_workflow_state.b")
        store.remove("linear_workflow_state.missing")
        assert store.get("linear_workflow_state.b") is None

    def test_get_returns_copy(self) -> None:
        store = StateStore()
        store.set("x.y", {"id": "1"})
        store.get("x.y")["id"] = "changed"  # type: ignore[index]
        assert store.get("x.y") == {"id": "1"}

    def test_save_without_path_is_noop(self) -> None:
        StateStore().save()

    def test_load_missing_file_is_empty(self, tmp_path: Path) -> None:
        store = StateStore.load(tmp_path / "absent.json")
        assert store.addresses() == []

    def test_save_and_load(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        store = StateStore(path)
        store.set(
            "linear_workflow_state.done",
            {"id": "ws-1", "position": Decimal("0.1"), "description": None},
        )
        store.save()

        raw = json.loads(path.read_text())
        assert raw["version"] == STATE_VERSION
        assert raw["resources"]["linear_workflow_state.done"]["position"] == "0.1"

        reloaded = StateStore.load(path)
        assert reloaded.get("linear_workflow_state.done") == {
            "id": "ws-1",
            "position": "0.1",
            "description": None,
        }

    def test_load_rejects_other_versions(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"version": 99, "resources": {}}))
        with pytest.raises(ValueError, match="Unsupported state file version"):
            StateStore.load(path)

    def test_load_rejects_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="does not contain a JSON object"):
            StateStore.load(path)
