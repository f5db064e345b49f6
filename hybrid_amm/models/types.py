"""Shared type definitions for pool state models.

Amounts travel as decimal integer strings and rates as decimal strings so
no value ever passes through a float.
"""

from decimal import Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import BeforeValidator, Field


def validate_int_string(value: Any) -> str:
    """Validate that a value is a non-negative decimal integer string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid integer as decimal string

    Raises:
        ValueError: If value is not a non-negative integer
    """
    if isinstance(value, bool):
        raise ValueError("Amount must be string or int, got bool")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Amount cannot be negative: {value}")
        return str(value)

    if not isinstance(value, str):
        raise ValueError(f"Amount must be string or int, got {type(value).__name__}")

    try:
        int_value = int(value)
    except ValueError as err:
        raise ValueError(f"Amount must be a decimal integer string: '{value}'") from err

    if int_value < 0:
        raise ValueError(f"Amount cannot be negative: {value}")
    return value


def validate_dec_string(value: Any) -> str:
    """Validate that a value is a finite decimal string such as "0.003".

    Floats are rejected; pass rates as strings.

    Raises:
        ValueError: If value is not a finite decimal
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise ValueError(f"Rate must be a decimal string, got {type(value).__name__}")
    if isinstance(value, int):
        return str(value)
    if not isinstance(value, str):
        raise ValueError(f"Rate must be a decimal string, got {type(value).__name__}")

    try:
        parsed = Decimal(value)
    except InvalidOperation as err:
        raise ValueError(f"Rate must be a decimal string: '{value}'") from err
    if not parsed.is_finite():
        raise ValueError(f"Rate must be finite: '{value}'")
    return value


# Non-negative integer amount as decimal string
IntString = Annotated[
    str,
    BeforeValidator(validate_int_string),
    Field(description="Non-negative integer as decimal string"),
]

# Decimal rate or ratio as string
DecString = Annotated[
    str,
    BeforeValidator(validate_dec_string),
    Field(description="Decimal number as string"),
]

# Denomination: starts with a letter, then letters, digits and "/:._-"
Denom = Annotated[str, Field(pattern=r"^[a-zA-Z][a-zA-Z0-9/:._-]{1,127}$")]
