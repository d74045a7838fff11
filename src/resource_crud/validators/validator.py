"""
Pure validation of raw input against a field schema.

`validate()` never raises and never touches storage. It checks every declared
field in one pass, so the caller always sees every problem at once, and returns
a normalized record containing exactly the declared fields when all rules pass.
Keys in the input that the schema does not declare are ignored.
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..exceptions.base import FieldErrors, ValidationError
from .rules import MISSING, Rule


@dataclass(frozen=True)
class FieldSpec:
    name: str
    rules: tuple[Rule, ...]
    label: str | None = None

    @property
    def display_name(self) -> str:
        return self.label or self.name.replace("_", " ")


class FieldSchema:
    """Ordered collection of field specs. Field order is the order errors are reported in."""

    def __init__(self, fields: Mapping[str, list[Rule] | tuple[Rule, ...]], labels: Mapping[str, str] | None = None):
        labels = labels or {}
        self.fields: tuple[FieldSpec, ...] = tuple(
            FieldSpec(name=name, rules=tuple(rules), label=labels.get(name))
            for name, rules in fields.items()
        )

    @property
    def field_names(self) -> list[str]:
        return [spec.name for spec in self.fields]

    def __iter__(self):
        return iter(self.fields)

    def __repr__(self) -> str:
        return f"<FieldSchema(fields={self.field_names!r})>"


@dataclass(frozen=True)
class ValidationResult:
    value: dict[str, Any] | None = None
    errors: FieldErrors = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def unwrap(self) -> dict[str, Any]:
        """Return the normalized record or raise ValidationError with every field error."""
        if self.errors:
            raise ValidationError(self.errors)
        return dict(self.value or {})


def _normalize(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


def _check_field(spec: FieldSpec, value: Any) -> list[str]:
    messages = []
    for rule in spec.rules:
        if rule.passes(value):
            continue
        messages.append(rule.format_message(spec.display_name))
        if rule.bail:
            break
    return messages


def validate(raw_input: Any, schema: FieldSchema) -> ValidationResult:
    """
    Validate `raw_input` against `schema`.

    Returns:
        ValidationResult with `value` set to the normalized record on success,
        or `errors` mapping field name -> ordered messages on failure.
    """
    if not isinstance(raw_input, Mapping):
        # Nothing can be read from a non-mapping payload; every field is missing.
        raw_input = {}

    errors: FieldErrors = {}
    normalized: dict[str, Any] = {}

    for spec in schema:
        value = raw_input.get(spec.name, MISSING)
        messages = _check_field(spec, value)
        if messages:
            errors[spec.name] = messages
        else:
            normalized[spec.name] = _normalize(value)

    if errors:
        return ValidationResult(value=None, errors=errors)
    return ValidationResult(value=normalized)
