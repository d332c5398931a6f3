"""
Validators package.

Provides validation functions for ledger input.
"""

from app.validators.unified import (
    require_amount,
    require_choice,
    require_id,
    require_text,
    validate_amount,
    validate_text,
)

__all__ = [
    "require_amount",
    "require_choice",
    "require_id",
    "require_text",
    "validate_amount",
    "validate_text",
]
