"""
Field type enum for form descriptors.

Invariants:
- Exactly one FieldType per descriptor
- The set of types is closed; the renderer must cover every member
- Wire tags are the strings used in the form specification document

Design:
- FieldType is a string-based enum for JSON serialization
- Spec Loader validates tags against VALID_FIELD_TYPES
- Field Renderer owns the widget chosen for each type
"""

from enum import Enum


class FieldType(str, Enum):
    """
    Declared type of a form field, selecting its primary widget.

    TEXT:
        Free-form string input. Every keystroke commits the full string.

    INTEGER:
        Numeric input. Raw text is parsed to an int on change; parse
        failures commit the NaN sentinel.

    SELECT:
        Custom single-select dropdown built from the descriptor's options.
        Commits the option key, never the display label.

    DATETIME:
        Combined date and time picker. Commits an ISO-8601 UTC timestamp,
        or an empty string when cleared.

    PHOTO:
        Image file picker. Commits a file reference (filename only).
    """
    TEXT = "text"
    INTEGER = "numberInt"
    SELECT = "select"
    DATETIME = "datetime"
    PHOTO = "photo"


# Single source of truth for valid wire tags
VALID_FIELD_TYPES = {field_type.value for field_type in FieldType}
