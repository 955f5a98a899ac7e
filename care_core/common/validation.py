# care_core/common/validation.py
"""
Declarative field constraints for wire forms.

Each form declares a table of `Constraint(field, kind, params)` rows.
All rows are evaluated and every violation is reported together, keyed by field.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from numbers import Number
from typing import Any, Dict, Iterable, List, Mapping

from rest_framework import serializers


class Kind(str, enum.Enum):
    REQUIRED = "required"
    MAX_LENGTH = "max_length"
    RANGE = "range"
    CHOICE = "choice"
    PATTERN = "pattern"


@dataclass(frozen=True)
class Constraint:
    field: str
    kind: Kind
    params: Mapping[str, Any] = field(default_factory=dict)


def required(name: str) -> Constraint:
    return Constraint(name, Kind.REQUIRED)


def max_length(name: str, limit: int) -> Constraint:
    return Constraint(name, Kind.MAX_LENGTH, {"max": limit})


def in_range(name: str, low=None, high=None, *, low_inclusive: bool = True, high_inclusive: bool = True) -> Constraint:
    return Constraint(
        name,
        Kind.RANGE,
        {"min": low, "max": high, "min_inclusive": low_inclusive, "max_inclusive": high_inclusive},
    )


def one_of(name: str, choices: Iterable[str]) -> Constraint:
    return Constraint(name, Kind.CHOICE, {"choices": tuple(choices)})


def matches(name: str, pattern: str, hint: str) -> Constraint:
    return Constraint(name, Kind.PATTERN, {"pattern": pattern, "hint": hint})


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _range_message(params: Mapping[str, Any]) -> str:
    low, high = params.get("min"), params.get("max")
    lo_word = "" if params.get("min_inclusive", True) else "above "
    hi_word = "" if params.get("max_inclusive", True) else "below "
    if low is not None and high is not None:
        if params.get("min_inclusive", True) and params.get("max_inclusive", True):
            return f"Must be between {low} and {high} inclusive."
        return f"Must be {lo_word}{low} and {hi_word}{high}."
    if low is not None:
        return f"Must be at least {low}." if params.get("min_inclusive", True) else f"Must be greater than {low}."
    return f"Must be at most {high}." if params.get("max_inclusive", True) else f"Must be less than {high}."


def _check_range(value: Any, params: Mapping[str, Any]) -> str | None:
    if isinstance(value, bool) or not isinstance(value, Number):
        return "A number is required."

    low, high = params.get("min"), params.get("max")
    if low is not None:
        too_low = value < low if params.get("min_inclusive", True) else value <= low
        if too_low:
            return _range_message(params)
    if high is not None:
        too_high = value > high if params.get("max_inclusive", True) else value >= high
        if too_high:
            return _range_message(params)
    return None


def _check(constraint: Constraint, value: Any) -> str | None:
    kind, params = constraint.kind, constraint.params

    if kind is Kind.REQUIRED:
        return "This field is required." if is_empty(value) else None

    # optional fields: absence is not a violation for any other kind
    if is_empty(value):
        return None

    if kind is Kind.MAX_LENGTH:
        limit = params["max"]
        if len(str(value)) > limit:
            return f"Ensure this field has no more than {limit} characters."
        return None

    if kind is Kind.RANGE:
        return _check_range(value, params)

    if kind is Kind.CHOICE:
        choices = params["choices"]
        if str(value) not in choices:
            return f'"{value}" is not a valid choice.'
        return None

    if kind is Kind.PATTERN:
        if not re.fullmatch(params["pattern"], str(value)):
            return params.get("hint") or "Invalid format."
        return None

    raise ValueError(f"Unknown constraint kind: {kind}")


def violations(data: Mapping[str, Any], table: Iterable[Constraint]) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for constraint in table:
        message = _check(constraint, data.get(constraint.field))
        if message:
            errors.setdefault(constraint.field, []).append(message)
    return errors


def check_constraints(data: Mapping[str, Any], table: Iterable[Constraint]) -> None:
    errors = violations(data, table)
    if errors:
        raise serializers.ValidationError(errors)


class ConstrainedForm(serializers.Serializer):
    """
    Base for wire forms.

    Serializer fields handle type coercion only (declare them required=False and
    allow_null/allow_blank); required-ness, lengths, ranges and enum membership live
    in `constraints`. Subclasses add cross-field rules in `validate_form`.
    """
    constraints: tuple = ()

    def validate(self, attrs):
        check_constraints(attrs, self.constraints)
        return self.validate_form(attrs)

    def validate_form(self, attrs):
        return attrs
