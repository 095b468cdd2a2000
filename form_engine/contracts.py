"""
Semantic contracts for the form engine.

This module defines immutable data structures that serve as contracts
between modules. Descriptors are parsed from the form specification
document once, then passed around read-only.

Design principles:
- Frozen dataclasses (immutable after creation)
- Parsing from the wire format lives next to the contract it builds
- No dependencies on other engine modules (utils only)

Contents:
- FileReference: Opaque reference to a chosen photo (filename only)
- FieldValue: Union of the value kinds stored in aggregated state
- FieldDescriptor: One field of the form specification document

Usage:
    from form_engine.contracts import FieldDescriptor, FileReference
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from form_engine.utils.field_types import FieldType, VALID_FIELD_TYPES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileReference:
    """
    Reference to a file chosen in a photo widget.

    Only the name and declared content type are kept; binary content
    never enters aggregated state. JSON output renders the filename.

    Attributes:
        filename: Name of the chosen file (e.g., 'front_door.jpg')
        content_type: Declared mime type (e.g., 'image/jpeg')
    """
    filename: str
    content_type: str = "image/*"

    def __str__(self) -> str:
        return self.filename


# Values committed to aggregated state, by field type:
#   str           - text, select (option key), datetime (ISO or ""), comments
#   int / float   - integer (float only for the NaN sentinel)
#   FileReference - photo
FieldValue = Union[str, int, float, FileReference]


def parse_options(raw: Optional[str]) -> Dict[str, str]:
    """
    Parse a select field's serialized options into an ordered mapping.

    Malformed content degrades to an empty mapping with a warning; it
    must never abort rendering of the rest of the form.

    Args:
        raw: JSON object text mapping option key -> display label

    Returns:
        dict: option key -> label, in document order

    Example:
        >>> parse_options('{"r": "Red", "b": "Blue"}')
        {'r': 'Red', 'b': 'Blue'}
        >>> parse_options('{not json')
        {}
    """
    if not raw:
        return {}

    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Malformed options data, using empty option set: {e}")
        return {}

    if not isinstance(parsed, dict):
        logger.warning(
            f"Options data must be a JSON object, got {type(parsed).__name__}; "
            f"using empty option set"
        )
        return {}

    return {str(key): _display_label(label) for key, label in parsed.items()}


def _display_label(value: Any) -> str:
    """
    Label text for a decoded JSON value, written the way a browser
    would print it: true/false/null in lower case, 2.0 as "2", arrays
    comma-joined and objects as "[object Object]".
    """
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    if isinstance(value, list):
        return ",".join("" if item is None else _display_label(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def _flag(value: Any) -> bool:
    """Document flags are 0/1 integers; only 1 (or True) means set."""
    return value is True or value == 1


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Static description of one form field.

    Attributes:
        id: Unique identifier, stable across renders (e.g., 'f_001')
        name: Key under which the field's value is stored in state
        title: Human-readable label
        field_type: FieldType selecting the primary widget
        category: Grouping key; one visual section per category
        order: Sort key within the category (ascending, stable)
        help_text: Optional supplementary text, shown on demand
        default_value: Declared pre-fill. Kept on the descriptor but NOT
            applied to initial state (see DESIGN.md)
        options_raw: Serialized options for select fields (JSON object text)
        requires_photo: Render the photo picker in addition to the primary widget
        comment_enabled: Render an auxiliary comment text area
        comment_field_name: State key the comment text area writes to
        required: Field must hold a truthy value before submission succeeds

    Example:
        >>> d = FieldDescriptor.from_dict({
        ...     'fieldid': 'f1', 'fieldName': 'age', 'title': 'Age',
        ...     'fieldType': 'numberInt', 'category': 'Basic',
        ...     'fieldOrder': 1, 'inputReq': 1,
        ... })
        >>> d.field_type
        <FieldType.INTEGER: 'numberInt'>
        >>> d.required
        True
    """
    id: str
    name: str
    title: str
    field_type: FieldType
    category: str
    order: int = 0
    help_text: Optional[str] = None
    default_value: Optional[str] = None
    options_raw: Optional[str] = None
    requires_photo: bool = False
    comment_enabled: bool = False
    comment_field_name: Optional[str] = None
    required: bool = False

    @property
    def options(self) -> Dict[str, str]:
        """Parsed option mapping (empty for non-select or malformed data)."""
        return parse_options(self.options_raw)

    @property
    def shows_photo(self) -> bool:
        """Photo picker renders for photo fields OR when a photo is required."""
        return self.field_type == FieldType.PHOTO or self.requires_photo

    @staticmethod
    def from_dict(record: Dict[str, Any]) -> "FieldDescriptor":
        """
        Build a descriptor from one record of the specification document.

        Args:
            record: Dict using the document keys (fieldid, fieldName,
                fieldType, dropVals, fieldOrder, inputReq, ...)

        Returns:
            FieldDescriptor

        Raises:
            ValueError: If id or name is missing, or fieldType is unknown
        """
        if not isinstance(record, dict):
            raise ValueError(f"Field record must be dict, got {type(record).__name__}")

        field_id = str(record.get('fieldid') or '').strip()
        if not field_id:
            raise ValueError(f"Field record has no fieldid: {record}")

        name = str(record.get('fieldName') or '').strip()
        if not name:
            raise ValueError(f"Field '{field_id}' has no fieldName")

        tag = record.get('fieldType')
        if tag not in VALID_FIELD_TYPES:
            raise ValueError(
                f"Field '{field_id}' has unknown fieldType '{tag}' "
                f"(expected one of {sorted(VALID_FIELD_TYPES)})"
            )

        # 'defautVal' is the spelling used by existing documents
        default_value = record.get('defautVal', record.get('defaultVal'))

        return FieldDescriptor(
            id=field_id,
            name=name,
            title=str(record.get('title') or name),
            field_type=FieldType(tag),
            category=str(record.get('category') or ''),
            order=int(record.get('fieldOrder') or 0),
            help_text=record.get('helpText') or None,
            default_value=default_value,
            options_raw=record.get('dropVals'),
            requires_photo=_flag(record.get('requiresPhoto')),
            comment_enabled=_flag(record.get('commentField')),
            comment_field_name=record.get('commentFieldName') or None,
            required=_flag(record.get('inputReq')),
        )
