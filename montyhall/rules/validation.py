"""
Variant Validation - Checks on rule-sets and door counts.

Validates that:
1. Door bounds stay within the absolute 3-10 range
2. min_doors <= default_doors <= max_doors
3. A requested door count fits the variant
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .variants import VariantRules, MIN_DOORS, MAX_DOORS


class VariantValidationError(Exception):
    """Raised when a variant definition is invalid."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Variant validation failed with {len(errors)} error(s)")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def validate_variant(rules: VariantRules, raise_on_error: bool = False) -> ValidationResult:
    """
    Validate a variant definition.

    Returns ValidationResult with errors and warnings.
    Raises VariantValidationError if raise_on_error=True and errors exist.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not rules.name:
        errors.append("name is required")
    if rules.min_doors < MIN_DOORS:
        # N-2 reveals must stay >= 1
        errors.append(f"min_doors must be >= {MIN_DOORS}")
    if rules.max_doors > MAX_DOORS:
        errors.append(f"max_doors must be <= {MAX_DOORS}")
    if rules.max_doors < rules.min_doors:
        errors.append("max_doors must be >= min_doors")
    if not rules.allows(rules.default_doors):
        errors.append("default_doors must be within min_doors..max_doors")

    if not rules.description:
        warnings.append("description is empty")

    if errors and raise_on_error:
        raise VariantValidationError(errors)

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def check_door_count(rules: VariantRules, door_count) -> str | None:
    """
    Check a requested door count against a variant.

    Returns error message if invalid, None if valid.
    """
    # bool is an int subclass; True is not a door count
    if isinstance(door_count, bool) or not isinstance(door_count, int):
        return f"Door count must be a whole number, got {door_count!r}"
    if not rules.allows(door_count):
        return (
            f"Door count must be between {rules.min_doors} and {rules.max_doors}, "
            f"got {door_count}"
        )
    return None
