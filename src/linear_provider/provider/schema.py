"""Declarative resource schemas: attributes, validators and plan modifiers."""

from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from linear_provider.provider.diagnostics import Diagnostics


class _Unknown:
    """Placeholder for a value that is only known after apply."""

    _instance: _Unknown | None = None

    def __new__(cls) -> _Unknown:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "(known after apply)"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Unknown:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Unknown:
        return self


UNKNOWN = _Unknown()


def to_decimal(value: Any) -> Decimal:
    """Convert a configured number to ``Decimal``.

    Floats go through ``repr`` so that a float read back from the wire
    produces the shortest decimal that round-trips to the same float.
    """
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got {value!r}")
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, float):
        number = Decimal(repr(value))
    elif isinstance(value, (int, str)):
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"expected a number, got {value!r}") from None
    else:
        raise ValueError(f"expected a number, got {type(value).__name__}")
    if not number.is_finite():
        raise ValueError(f"expected a finite number, got {value!r}")
    # positions travel as float64
    if not math.isfinite(float(number)):
        raise ValueError(f"number {value!r} is out of range for a 64-bit float")
    return number


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


class AttributeValidator(ABC):
    """Checks a known, non-null attribute value."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human readable description of the constraint."""

    @abstractmethod
    def validate(self, attribute: str, value: Any, diags: Diagnostics) -> None:
        """Append an error to ``diags`` when ``value`` is invalid."""


class UTF8LengthAtLeast(AttributeValidator):
    def __init__(self, minimum: int) -> None:
        self.minimum = minimum

    @property
    def description(self) -> str:
        return f"string length must be at least {self.minimum}"

    def validate(self, attribute: str, value: Any, diags: Diagnostics) -> None:
        if len(value) < self.minimum:
            diags.add_error(
                "Invalid Attribute Value Length",
                f"Attribute {attribute} UTF-8 character count must be at least "
                f"{self.minimum}, got: {len(value)}",
                attribute=attribute,
            )


class OneOf(AttributeValidator):
    def __init__(self, *values: str) -> None:
        self.values = values

    @property
    def description(self) -> str:
        quoted = ", ".join(f'"{v}"' for v in self.values)
        return f"value must be one of: [{quoted}]"

    def validate(self, attribute: str, value: Any, diags: Diagnostics) -> None:
        if value not in self.values:
            diags.add_error(
                "Invalid Attribute Value Match",
                f'Attribute {attribute} {self.description}, got: "{value}"',
                attribute=attribute,
            )


class RegexMatches(AttributeValidator):
    def __init__(self, pattern: str | re.Pattern[str], message: str = "") -> None:
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.message = message

    @property
    def description(self) -> str:
        return self.message or f"value must match regular expression '{self.pattern.pattern}'"

    def validate(self, attribute: str, value: Any, diags: Diagnostics) -> None:
        if not self.pattern.search(value):
            diags.add_error(
                "Invalid Attribute Value Match",
                f"Attribute {attribute} {self.description}, got: {value}",
                attribute=attribute,
            )


def utf8_length_at_least(minimum: int) -> UTF8LengthAtLeast:
    return UTF8LengthAtLeast(minimum)


def one_of(*values: str) -> OneOf:
    return OneOf(*values)


def regex_matches(pattern: str | re.Pattern[str], message: str = "") -> RegexMatches:
    return RegexMatches(pattern, message)


# ---------------------------------------------------------------------------
# Plan modifiers
# ---------------------------------------------------------------------------


class PlanModifier(ABC):
    """Adjusts the planned value of an attribute against prior state."""

    def plan_value(self, prior: Any, planned: Any) -> Any:
        return planned

    def requires_replace(self, prior: Any, planned: Any) -> bool:
        return False


class UseStateForUnknown(PlanModifier):
    """Keep the prior value instead of planning an unknown one."""

    def plan_value(self, prior: Any, planned: Any) -> Any:
        if planned is UNKNOWN and prior is not None:
            return prior
        return planned


class RequiresReplace(PlanModifier):
    """Changing the value destroys and recreates the resource."""

    def requires_replace(self, prior: Any, planned: Any) -> bool:
        return planned is not UNKNOWN and prior != planned


def use_state_for_unknown() -> UseStateForUnknown:
    return UseStateForUnknown()


def requires_replace() -> RequiresReplace:
    return RequiresReplace()


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class AttributeKind(StrEnum):
    STRING = "string"
    NUMBER = "number"


class Attribute(BaseModel):
    """A single attribute of a resource schema."""

    name: str
    kind: AttributeKind = AttributeKind.STRING
    description: str = ""
    required: bool = False
    optional: bool = False
    computed: bool = False
    validators: list[AttributeValidator] = Field(default_factory=list)
    plan_modifiers: list[PlanModifier] = Field(default_factory=list)

    model_config = {"arbitrary_types_allowed": True}

    @property
    def configurable(self) -> bool:
        return self.required or self.optional


class PlanAction(StrEnum):
    """What applying a plan does to the remote object."""

    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"
    DELETE = "delete"
    NOOP = "noop"


class Plan(BaseModel):
    """Planned attribute values and the action needed to reach them."""

    action: PlanAction
    planned: dict[str, Any] = Field(default_factory=dict)
    prior: dict[str, Any] | None = None
    changed: list[str] = Field(default_factory=list)
    requires_replace: list[str] = Field(default_factory=list)

    model_config = {"arbitrary_types_allowed": True}


class Schema(BaseModel):
    """Attribute schema of one resource type."""

    description: str = ""
    attributes: list[Attribute]

    model_config = {"arbitrary_types_allowed": True}

    def attribute(self, name: str) -> Attribute:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        raise KeyError(name)

    @property
    def attribute_names(self) -> list[str]:
        return [attr.name for attr in self.attributes]

    def validate_config(self, config: Mapping[str, Any]) -> Diagnostics:
        """Check ``config`` against the schema without touching remote state."""
        diags = Diagnostics()
        known = set(self.attribute_names)

        for key in config:
            if key not in known:
                diags.add_error(
                    "Unsupported argument",
                    f'An argument named "{key}" is not expected here.',
                    attribute=key,
                )

        for attr in self.attributes:
            value = config.get(attr.name)
            if value is None:
                if attr.required:
                    diags.add_error(
                        "Missing required argument",
                        f'The argument "{attr.name}" is required, but no definition was found.',
                        attribute=attr.name,
                    )
                continue

            if not attr.configurable:
                diags.add_error(
                    "Invalid Configuration for Read-Only Attribute",
                    f"Cannot set value for attribute {attr.name}, it is computed.",
                    attribute=attr.name,
                )
                continue

            if attr.kind == AttributeKind.NUMBER:
                try:
                    value = to_decimal(value)
                except ValueError as exc:
                    diags.add_error("Incorrect attribute value type", str(exc), attribute=attr.name)
                    continue
            elif not isinstance(value, str):
                diags.add_error(
                    "Incorrect attribute value type",
                    f"expected a string, got {type(value).__name__}",
                    attribute=attr.name,
                )
                continue

            for validator in attr.validators:
                validator.validate(attr.name, value, diags)

        return diags

    def normalize(self, config: Mapping[str, Any]) -> dict[str, Any]:
        """Return configured values for every attribute, computed ones unknown.

        ``config`` is expected to have passed :meth:`validate_config`.
        """
        values: dict[str, Any] = {}
        for attr in self.attributes:
            if not attr.configurable:
                values[attr.name] = UNKNOWN
                continue
            value = config.get(attr.name)
            if value is not None and attr.kind == AttributeKind.NUMBER:
                value = to_decimal(value)
            values[attr.name] = value
        return values

    def plan(self, prior: Mapping[str, Any] | None, config: Mapping[str, Any]) -> Plan:
        """Compute the planned values and action for ``config``."""
        planned = self.normalize(config)
        if prior is None:
            return Plan(action=PlanAction.CREATE, planned=planned, changed=list(planned))

        prior = dict(prior)
        for attr in self.attributes:
            for modifier in attr.plan_modifiers:
                planned[attr.name] = modifier.plan_value(prior.get(attr.name), planned[attr.name])

        changed = [
            attr.name
            for attr in self.attributes
            if attr.configurable and planned[attr.name] != prior.get(attr.name)
        ]
        replace = [
            name
            for name in changed
            if any(
                m.requires_replace(prior.get(name), planned[name])
                for m in self.attribute(name).plan_modifiers
            )
        ]

        if replace:
            # a replacement gets a fresh remote object
            for attr in self.attributes:
                if not attr.configurable:
                    planned[attr.name] = UNKNOWN
            action = PlanAction.REPLACE
        elif changed:
            action = PlanAction.UPDATE
        else:
            action = PlanAction.NOOP

        return Plan(
            action=action,
            planned=planned,
            prior=prior,
            changed=changed,
            requires_replace=replace,
        )
