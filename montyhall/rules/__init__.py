"""
Rules - Variant rule-sets for the engine.

A variant bundles:
- Who opens the non-held doors (reveal policy)
- Which door counts are allowed
- The default door count offered at setup

The engine is parameterized by a variant rather than having one
code path per rule-set.
"""

from .variants import (
    RevealPolicy,
    VariantRules,
    HOST_AUTO,
    USER_MANUAL,
    USER_MANUAL_MANY,
    VARIANTS,
    DEFAULT_VARIANT,
    get_variant,
)
from .validation import (
    ValidationResult,
    VariantValidationError,
    validate_variant,
    check_door_count,
)

__all__ = [
    "RevealPolicy",
    "VariantRules",
    "HOST_AUTO",
    "USER_MANUAL",
    "USER_MANUAL_MANY",
    "VARIANTS",
    "DEFAULT_VARIANT",
    "get_variant",
    "ValidationResult",
    "VariantValidationError",
    "validate_variant",
    "check_door_count",
]
