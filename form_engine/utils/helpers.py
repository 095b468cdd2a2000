"""
Utility helpers for the form engine

Small pure functions for IDs, integer parsing and value truthiness.
"""

import math
import re
import uuid

# Sentinel committed when an integer field's text cannot be parsed
NAN = float("nan")

_INT_PREFIX = re.compile(r"^\s*([+-]?[0-9]+)")


def generate_form_session_id(short=True):
    """
    Generate unique form session identifier

    Args:
        short (bool): If True, return 8-char hex. If False, return full UUID.

    Returns:
        str: Form session ID

    Examples:
        >>> generate_form_session_id()
        'a3f7e2b9'
    """
    full_id = uuid.uuid4().hex
    return full_id[:8] if short else full_id


def parse_int(raw):
    """
    Parse the leading integer of a text value.

    Leading whitespace and a sign are allowed; parsing stops at the first
    non-digit, so "3.9" gives 3 and "12abc" gives 12. Text with no leading
    digits (ASCII only), or too many digits to convert, gives the NaN
    sentinel instead of raising.

    Args:
        raw: Text typed into an integer field (None is treated as empty)

    Returns:
        int, or NAN when no integer prefix exists

    Examples:
        >>> parse_int(" 42")
        42
        >>> parse_int("abc")
        nan
    """
    if raw is None:
        return NAN
    match = _INT_PREFIX.match(str(raw))
    if not match:
        return NAN
    try:
        return int(match.group(1))
    except ValueError:
        # Past the interpreter's int conversion digit limit
        return NAN


def is_nan(value):
    """True only for the float NaN sentinel."""
    return isinstance(value, float) and math.isnan(value)


def is_truthy(value):
    """
    Truthiness used by required-field validation.

    Same as Python truthiness except that NaN counts as empty, so a
    failed integer parse never satisfies a required field.
    """
    if is_nan(value):
        return False
    return bool(value)
