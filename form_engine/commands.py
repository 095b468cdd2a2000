"""
Event types for FormEngine control flow.

Events are the ONLY public interface to FormEngine.handle().
Each one is a discrete user interaction, processed synchronously.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union


@dataclass(frozen=True)
class EditText:
    """Keystroke in a text input. value is the full current string."""
    field_id: str
    value: str


@dataclass(frozen=True)
class EditInteger:
    """Change in a numeric input. raw is the unparsed text."""
    field_id: str
    raw: str


@dataclass(frozen=True)
class ToggleDropdown:
    """Click on a dropdown's button."""
    field_id: str


@dataclass(frozen=True)
class SelectOption:
    """Click on one option of an open dropdown."""
    field_id: str
    option_key: str


@dataclass(frozen=True)
class EditDateTime:
    """
    Date-time picker change.

    value is a datetime, an ISO-8601 string, or None/"" when cleared.
    """
    field_id: str
    value: Union[datetime, str, None]


@dataclass(frozen=True)
class ChoosePhoto:
    """File chosen in a photo picker. Only name and type travel."""
    field_id: str
    filename: str
    content_type: str


@dataclass(frozen=True)
class EditComment:
    """Change in a field's comment text area."""
    field_id: str
    text: str


@dataclass(frozen=True)
class ToggleHelp:
    """Pointer click on a help-text affordance."""
    field_id: str


@dataclass(frozen=True)
class HelpKeyPress:
    """Key pressed while a help-text affordance has focus."""
    field_id: str
    key: str


@dataclass(frozen=True)
class PointerDown:
    """
    Document-level pointer-down.

    inside_dropdown is the descriptor id of the dropdown container the
    pointer landed in, or None if it landed outside every dropdown.
    """
    inside_dropdown: Optional[str] = None


@dataclass(frozen=True)
class Submit:
    """Form submit."""
    pass


# Event union type for type hints
Event = (EditText | EditInteger | ToggleDropdown | SelectOption | EditDateTime
         | ChoosePhoto | EditComment | ToggleHelp | HelpKeyPress | PointerDown | Submit)


# Wire name -> (event class, payload keys it needs)
EVENT_TYPES = {
    'edit_text': (EditText, ('field_id', 'value')),
    'edit_integer': (EditInteger, ('field_id', 'raw')),
    'toggle_dropdown': (ToggleDropdown, ('field_id',)),
    'select_option': (SelectOption, ('field_id', 'option_key')),
    'edit_datetime': (EditDateTime, ('field_id', 'value')),
    'choose_photo': (ChoosePhoto, ('field_id', 'filename', 'content_type')),
    'edit_comment': (EditComment, ('field_id', 'text')),
    'toggle_help': (ToggleHelp, ('field_id',)),
    'help_key': (HelpKeyPress, ('field_id', 'key')),
    'pointer_down': (PointerDown, ()),
    'submit': (Submit, ()),
}


def event_from_json(payload: dict) -> Event:
    """
    Build an event from a browser payload.

    Args:
        payload: {'event': <wire name>, ...keys for that event}
            pointer_down takes an optional 'inside_dropdown'

    Returns:
        Event

    Raises:
        ValueError: If the payload isn't a dict, names an unknown event,
            or lacks a key the event needs

    Example:
        >>> event_from_json({'event': 'edit_text', 'field_id': 'f1', 'value': 'x'})
        EditText(field_id='f1', value='x')
    """
    if not isinstance(payload, dict):
        raise ValueError(f"Event payload must be dict, got {type(payload).__name__}")

    name = payload.get('event')
    if name not in EVENT_TYPES:
        raise ValueError(f"Unknown event: {name!r}")

    event_class, keys = EVENT_TYPES[name]
    missing = [key for key in keys if key not in payload]
    if missing:
        raise ValueError(f"Event '{name}' missing required keys: {missing}")

    if event_class is PointerDown:
        return PointerDown(inside_dropdown=payload.get('inside_dropdown') or None)

    return event_class(**{key: payload[key] for key in keys})
