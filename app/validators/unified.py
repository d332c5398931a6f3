"""
Unified validators.

Each validate_* function returns a tuple of (is_valid, parsed_value,
error_message). The require_* helpers raise ValidationError instead and
are what services call.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, TypeVar

from app.utils.exceptions import ValidationError

MAX_DECIMAL_PLACES = 8

E = TypeVar("E", bound=Enum)


def validate_amount(
    amount: Any,
    min_val: Decimal = Decimal("0"),
    max_val: Decimal | None = None,
    allow_zero: bool = False,
) -> tuple[bool, Decimal | None, str | None]:
    """
    Single amount validator.

    Accepts Decimal, int, float or numeric string. Floats are converted
    through their string form so 0.1 stays 0.1.

    Args:
        amount: Amount to validate
        min_val: Minimum allowed value
        max_val: Maximum allowed value (optional)
        allow_zero: Accept exactly zero

    Returns:
        Tuple of (is_valid, parsed_value, error_message)

    Examples:
        >>> validate_amount("100.50")
        (True, Decimal('100.50'), None)
        >>> validate_amount("-10")
        (False, None, 'Amount must be positive')
    """
    if amount is None or isinstance(amount, bool):
        return False, None, "Amount is empty"

    if isinstance(amount, str):
        amount = amount.strip().replace(",", ".")
        if not amount:
            return False, None, "Amount is empty"

    if not isinstance(amount, (str, int, float, Decimal)):
        return False, None, "Invalid amount format"

    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except InvalidOperation:
        return False, None, "Invalid amount format"

    if not value.is_finite():
        return False, None, "Amount must be a finite number"

    if value < 0 or (value == 0 and not allow_zero):
        return False, None, "Amount must be positive"

    if value < min_val:
        return False, None, f"Amount must be >= {min_val}"

    if max_val is not None and value > max_val:
        return False, None, f"Amount must be <= {max_val}"

    if value.as_tuple().exponent < -MAX_DECIMAL_PLACES:
        return (
            False,
            None,
            f"Amount has too many decimal places (maximum {MAX_DECIMAL_PLACES})",
        )

    return True, value, None


def validate_text(
    value: Any, max_length: int = 500
) -> tuple[bool, str | None, str | None]:
    """
    Validate non-empty free text (payment details, proof references).

    Args:
        value: Text to validate
        max_length: Maximum length after stripping

    Returns:
        Tuple of (is_valid, stripped_text, error_message)
    """
    if not isinstance(value, str) or not value.strip():
        return False, None, "Value is empty"

    value = value.strip()
    if len(value) > max_length:
        return False, None, f"Value is too long (maximum {max_length} characters)"

    return True, value, None


def require_amount(
    amount: Any, field: str = "amount", min_val: Decimal = Decimal("0")
) -> Decimal:
    """
    Parse amount or raise.

    Raises:
        ValidationError: Amount is invalid
    """
    is_valid, value, error = validate_amount(amount, min_val=min_val)
    if not is_valid:
        raise ValidationError(f"{field}: {error}")
    return value


def require_text(value: Any, field: str, max_length: int = 500) -> str:
    """
    Parse free text or raise.

    Raises:
        ValidationError: Text is empty or too long
    """
    is_valid, text, error = validate_text(value, max_length=max_length)
    if not is_valid:
        raise ValidationError(f"{field}: {error}")
    return text


def require_id(value: Any, field: str) -> int:
    """
    Check entity identifier is a positive integer.

    Raises:
        ValidationError: Identifier is missing or malformed
    """
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field}: must be a positive integer")
    return value


def require_choice(value: Any, choices: type[E], field: str) -> E:
    """
    Parse enum member from member or raw value.

    Raises:
        ValidationError: Value is not one of the allowed choices
    """
    if isinstance(value, choices):
        return value
    try:
        return choices(value.strip().lower() if isinstance(value, str) else value)
    except ValueError:
        allowed = ", ".join(member.value for member in choices)
        raise ValidationError(
            f"{field}: must be one of {allowed}, got {value!r}"
        ) from None
