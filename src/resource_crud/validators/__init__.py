from .rules import MISSING, Rule, required, string, non_empty, max_length
from .validator import FieldSchema, FieldSpec, ValidationResult, validate

__all__ = [
    "MISSING",
    "Rule",
    "required",
    "string",
    "non_empty",
    "max_length",
    "FieldSchema",
    "FieldSpec",
    "ValidationResult",
    "validate",
]
