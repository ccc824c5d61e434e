"""Tests for schema validation and plan computation."""

from __future__ import annotations

import copy
from decimal import Decimal
from typing import Any

import pytest

from linear_provider.provider.diagnostics import Diagnostics
from linear_provider.provider.resources import WorkflowStateResource
from linear_provider.provider.schema import (
    UNKNOWN,
    PlanAction,
    Schema,
    one_of,
    regex_matches,
    requires_replace,
    to_decimal,
    use_state_for_unknown,
    utf8_length_at_least,
)
from tests.fakes import OTHER_TEAM_ID, TEAM_ID


@pytest.fixture
def schema() -> Schema:
    return WorkflowStateResource().schema()


def _config(**overrides: Any) -> dict[str, Any]:
    config: dict[str, Any] = {
        "name": "Done",
        "type": "completed",
        "position": 4,
        "color": "#5e6ad2",
        "description": None,
        "team_id": TEAM_ID,
    }
    config.update(overrides)
    return config


def _prior(**overrides: Any) -> dict[str, Any]:
    prior: dict[str, Any] = {
        "id": "ws-1",
        "name": "Done",
        "type": "completed",
        "position": Decimal("4.0"),
        "color": "#5e6ad2",
        "description": None,
        "team_id": TEAM_ID,
    }
    prior.update(overrides)
    return prior


def _error_attributes(diags: Diagnostics) -> list[str | None]:
    return [d.attribute for d in diags.errors]


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


class TestValidators:
    def test_length_at_least(self) -> None:
        diags = Diagnostics()
        utf8_length_at_least(1).validate("name", "", diags)
        assert diags.errors[0].summary == "Invalid Attribute Value Length"
        assert "at least 1, got: 0" in diags.errors[0].detail

    def test_length_counts_characters_not_bytes(self) -> None:
        diags = Diagnostics()
        utf8_length_at_least(2).validate("name", "é", diags)
        assert diags.has_error()

    def test_one_of(self) -> None:
        diags = Diagnostics()
        validator = one_of("triage", "backlog")
        validator.validate("type", "backlog", diags)
        assert not diags
        validator.validate("type", "doing", diags)
        assert '["triage", "backlog"], got: "doing"' in diags.errors[0].detail

    def test_regex_matches_uses_message(self) -> None:
        diags = Diagnostics()
        regex_matches(r"^#[0-9a-f]{6}$", "must be a hex color").validate("color", "blue", diags)
        assert diags.errors[0].detail == "Attribute color must be a hex color, got: blue"

    def test_regex_matches_default_description(self) -> None:
        assert "^a+$" in regex_matches("^a+$").description


class TestPlanModifiers:
    def test_use_state_for_unknown_keeps_prior(self) -> None:
        modifier = use_state_for_unknown()
        assert modifier.plan_value("ws-1", UNKNOWN) == "ws-1"
        assert modifier.plan_value(None, UNKNOWN) is UNKNOWN

    def test_requires_replace_on_change_only(self) -> None:
        modifier = requires_replace()
        assert modifier.requires_replace("started", "completed")
        assert not modifier.requires_replace("started", "started")
        assert not modifier.requires_replace("started", UNKNOWN)


class TestToDecimal:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(4, Decimal("4")), (0.1, Decimal("0.1")), ("2.50", Decimal("2.50")), (Decimal("1e3"), Decimal("1e3"))],
    )
    def test_accepts_numbers(self, value: Any, expected: Decimal) -> None:
        assert to_decimal(value) == expected

    @pytest.mark.parametrize(
        "value", [True, "four", "nan", float("inf"), "1e400", Decimal("-1e309"), [1]]
    )
    def test_rejects_non_numbers(self, value: Any) -> None:
        with pytest.raises(ValueError):
            to_decimal(value)

    def test_float_round_trip(self) -> None:
        assert float(to_decimal(1 / 3)) == 1 / 3


# ---------------------------------------------------------------------------
# Config validation
# ---------------------------------------------------------------------------


class TestValidateConfig:
    def test_valid_config(self, schema: Schema) -> None:
        assert not schema.validate_config(_config(description="Finished work"))

    def test_rejects_non_hex_color(self, schema: Schema) -> None:
        diags = schema.validate_config(_config(color="blue"))
        assert _error_attributes(diags) == ["color"]
        assert "must be a hex color" in diags.errors[0].detail

    def test_rejects_non_uuid_team_id(self, schema: Schema) -> None:
        diags = schema.validate_config(_config(team_id="not-a-uuid"))
        assert _error_attributes(diags) == ["team_id"]
        assert "must be an uuid" in diags.errors[0].detail

    def test_rejects_empty_name(self, schema: Schema) -> None:
        assert _error_attributes(schema.validate_config(_config(name=""))) == ["name"]

    def test_rejects_unknown_type(self, schema: Schema) -> None:
        assert _error_attributes(schema.validate_config(_config(type="done"))) == ["type"]

    @pytest.mark.parametrize(
        "state_type", ["triage", "backlog", "unstarted", "started", "completed", "canceled"]
    )
    def test_accepts_every_type(self, schema: Schema, state_type: str) -> None:
        assert not schema.validate_config(_config(type=state_type))

    def test_missing_required_arguments(self, schema: Schema) -> None:
        diags = schema.validate_config({"description": "only this"})
        assert _error_attributes(diags) == ["name", "type", "position", "color", "team_id"]
        assert {d.summary for d in diags} == {"Missing required argument"}

    def test_description_is_optional(self, schema: Schema) -> None:
        config = _config()
        del config["description"]
        assert not schema.validate_config(config)

    def test_rejects_unsupported_argument(self, schema: Schema) -> None:
        diags = schema.validate_config(_config(emoji="check"))
        assert diags.errors[0].summary == "Unsupported argument"

    def test_rejects_computed_id(self, schema: Schema) -> None:
        diags = schema.validate_config(_config(id="ws-1"))
        assert diags.errors[0].summary == "Invalid Configuration for Read-Only Attribute"

    def test_rejects_wrong_value_types(self, schema: Schema) -> None:
        diags = schema.validate_config(_config(position="high", name=7))
        assert sorted(_error_attributes(diags)) == ["name", "position"]

    def test_rejects_position_beyond_float_range(self, schema: Schema) -> None:
        diags = schema.validate_config(_config(position="1e400"))
        assert _error_attributes(diags) == ["position"]
        assert diags.errors[0].summary == "Incorrect attribute value type"

    def test_collects_every_error(self, schema: Schema) -> None:
        diags = schema.validate_config(_config(color="blue", team_id="not-a-uuid", name=""))
        assert len(diags.errors) == 3


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


class TestPlan:
    def test_create_when_no_prior_state(self, schema: Schema) -> None:
        plan = schema.plan(None, _config())
        assert plan.action == PlanAction.CREATE
        assert plan.planned["id"] is UNKNOWN
        assert plan.planned["position"] == Decimal("4")

    def test_noop_when_nothing_changed(self, schema: Schema) -> None:
        plan = schema.plan(_prior(), _config())
        assert plan.action == PlanAction.NOOP
        assert plan.planned["id"] == "ws-1"
        assert plan.changed == []

    def test_update_for_mutable_fields(self, schema: Schema) -> None:
        plan = schema.plan(_prior(), _config(color="#000000", position="5.5", description="x"))
        assert plan.action == PlanAction.UPDATE
        assert plan.changed == ["position", "color", "description"]
        assert plan.requires_replace == []
        assert plan.planned["id"] == "ws-1"

    def test_type_change_forces_replace(self, schema: Schema) -> None:
        plan = schema.plan(_prior(), _config(type="canceled"))
        assert plan.action == PlanAction.REPLACE
        assert plan.requires_replace == ["type"]
        assert plan.planned["id"] is UNKNOWN

    def test_team_change_forces_replace(self, schema: Schema) -> None:
        plan = schema.plan(_prior(), _config(team_id=OTHER_TEAM_ID, name="Shipped"))
        assert plan.action == PlanAction.REPLACE
        assert plan.requires_replace == ["team_id"]
        assert plan.changed == ["name", "team_id"]

    def test_plan_does_not_mutate_prior(self, schema: Schema) -> None:
        prior = _prior()
        snapshot = copy.deepcopy(prior)
        schema.plan(prior, _config(type="canceled"))
        assert prior == snapshot
