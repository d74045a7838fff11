"""
Field rules used by the validator.

A rule is a named check plus the message reported when the check fails. Rules
receive the raw value (or `MISSING` when the key is absent) and return a bool.
A rule with `bail=True` stops the remaining rules for that field when it fails,
because they cannot say anything meaningful about the value (e.g. a length
check on a value that is not a string).
"""
from dataclasses import dataclass
from typing import Any, Callable


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


# sentinel for "key not present in the input"
MISSING: Any = _Missing()


@dataclass(frozen=True)
class Rule:
    name: str
    check: Callable[[Any], bool]
    message: str
    bail: bool = False

    def passes(self, value: Any) -> bool:
        return self.check(value)

    def format_message(self, label: str) -> str:
        return self.message.format(label=label)


def required() -> Rule:
    return Rule(
        name="required",
        check=lambda v: v is not MISSING and v is not None,
        message="The {label} field is required.",
        bail=True,
    )


def string() -> Rule:
    return Rule(
        name="string",
        check=lambda v: isinstance(v, str),
        message="The {label} field must be a string.",
        bail=True,
    )


def non_empty() -> Rule:
    return Rule(
        name="non_empty",
        check=lambda v: isinstance(v, str) and v.strip() != "",
        message="The {label} field must not be empty.",
    )


def max_length(limit: int) -> Rule:
    return Rule(
        name="max_length",
        check=lambda v: isinstance(v, str) and len(v.strip()) <= limit,
        message=f"The {{label}} field must not be greater than {limit} characters.",
    )


__all__ = ["MISSING", "Rule", "required", "string", "non_empty", "max_length"]
