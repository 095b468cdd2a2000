"""
Field Renderer - maps descriptors to widgets and edits to state commits

Responsibilities:
- Build one view model per descriptor: a primary widget chosen by
  field type, plus optional photo, comment and help-text auxiliaries
- Translate each widget edit into exactly one (key, value) commit

Design principles:
- View models are frozen dataclasses; templates only read them
- Widget choice is a single table keyed by FieldType. The table is
  checked against the enum at import time, so a new field type without
  a builder fails on startup instead of rendering nothing
- Commit functions never touch state; the engine applies what they return
- Photo widget predicate is (type == photo OR requires_photo), evaluated
  once per descriptor, guarding a single widget instance
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple, Union

from form_engine.contracts import FieldDescriptor, FieldValue, FileReference
from form_engine.core.state_manager import AggregatedState
from form_engine.core.ui_state import UIState
from form_engine.utils.field_types import FieldType
from form_engine.utils.helpers import is_nan, parse_int

logger = logging.getLogger(__name__)

SELECT_PLACEHOLDER = "Select an option"
DATETIME_PLACEHOLDER = "Select date & time"
COMMENT_PLACEHOLDER = "Comment..."
DATETIME_DISPLAY_FORMAT = "%Y-%m-%d %H:%M"
PHOTO_ACCEPT = "image/*"

Commit = Tuple[str, FieldValue]


# ========================
# Widget view models
# ========================

@dataclass(frozen=True)
class TextWidget:
    name: str
    value: str = ""
    kind: str = "text"


@dataclass(frozen=True)
class IntegerWidget:
    name: str
    value: str = ""  # text shown in the input; empty for unset or NaN
    kind: str = "integer"


@dataclass(frozen=True)
class SelectWidget:
    """
    Custom dropdown (not a native select).

    Attributes:
        options: (key, label) pairs in document order
        selected: Committed option key, or None
        display: Selected option's label, or the placeholder
        is_open: Whether this dropdown is the form's open one
    """
    name: str
    options: Tuple[Tuple[str, str], ...]
    selected: Optional[str]
    display: str
    is_open: bool
    kind: str = "select"


@dataclass(frozen=True)
class DateTimeWidget:
    name: str
    value: str = ""            # committed ISO timestamp, or ""
    display: str = ""          # YYYY-MM-DD HH:MM, or ""
    input_value: str = ""      # YYYY-MM-DDTHH:MM for datetime-local inputs
    placeholder: str = DATETIME_PLACEHOLDER
    kind: str = "datetime"


@dataclass(frozen=True)
class PhotoWidget:
    name: str
    filename: str = ""
    accept: str = PHOTO_ACCEPT
    kind: str = "photo"


@dataclass(frozen=True)
class CommentWidget:
    target: Optional[str]      # None disables the write
    value: str = ""
    placeholder: str = COMMENT_PLACEHOLDER


@dataclass(frozen=True)
class HelpAffordance:
    text: str
    visible: bool
    aria_label: str


PrimaryWidget = Union[TextWidget, IntegerWidget, SelectWidget, DateTimeWidget]


@dataclass(frozen=True)
class FieldView:
    """
    Everything a template needs to draw one field.

    primary is None for photo-type fields, whose only widget is `photo`.
    """
    descriptor: FieldDescriptor
    required: bool
    primary: Optional[PrimaryWidget]
    photo: Optional[PhotoWidget]
    comment: Optional[CommentWidget]
    help: Optional[HelpAffordance]


@dataclass(frozen=True)
class SectionView:
    category: str
    fields: Tuple[FieldView, ...]


# ========================
# Primary widget builders
# ========================

def _build_text(descriptor: FieldDescriptor, state: AggregatedState, ui: UIState) -> TextWidget:
    value = state.get(descriptor.name, "")
    return TextWidget(name=descriptor.name, value=str(value))


def _build_integer(descriptor: FieldDescriptor, state: AggregatedState, ui: UIState) -> IntegerWidget:
    value = state.get(descriptor.name)
    shown = "" if value is None or is_nan(value) else str(value)
    return IntegerWidget(name=descriptor.name, value=shown)


def _build_select(descriptor: FieldDescriptor, state: AggregatedState, ui: UIState) -> SelectWidget:
    options = descriptor.options
    value = state.get(descriptor.name)
    selected = str(value) if value else None
    if selected:
        # Unknown keys display as empty rather than failing the render
        display = options.get(selected, "")
    else:
        display = SELECT_PLACEHOLDER
    return SelectWidget(
        name=descriptor.name,
        options=tuple(options.items()),
        selected=selected,
        display=display,
        is_open=ui.open_dropdown == descriptor.id,
    )


def _build_datetime(descriptor: FieldDescriptor, state: AggregatedState, ui: UIState) -> DateTimeWidget:
    value = state.get(descriptor.name) or ""
    if not isinstance(value, str) or not value:
        # A photo on a requires_photo datetime shares the key; show no date
        return DateTimeWidget(name=descriptor.name)
    try:
        moment = _parse_iso(value)
    except ValueError:
        return DateTimeWidget(name=descriptor.name)
    return DateTimeWidget(
        name=descriptor.name,
        value=value,
        display=moment.strftime(DATETIME_DISPLAY_FORMAT),
        input_value=moment.strftime("%Y-%m-%dT%H:%M"),
    )


def _build_photo_only(descriptor: FieldDescriptor, state: AggregatedState, ui: UIState) -> None:
    # Photo-type fields draw only the photo picker (see _build_photo)
    return None


PRIMARY_BUILDERS: Dict[FieldType, Callable[[FieldDescriptor, AggregatedState, UIState], Optional[PrimaryWidget]]] = {
    FieldType.TEXT: _build_text,
    FieldType.INTEGER: _build_integer,
    FieldType.SELECT: _build_select,
    FieldType.DATETIME: _build_datetime,
    FieldType.PHOTO: _build_photo_only,
}


def _check_builders_complete() -> None:
    missing = set(FieldType) - set(PRIMARY_BUILDERS)
    if missing:
        raise RuntimeError(
            f"No widget builder for field type(s): {sorted(t.value for t in missing)}"
        )


_check_builders_complete()


# ========================
# Auxiliary builders
# ========================

def _build_photo(descriptor: FieldDescriptor, state: AggregatedState) -> Optional[PhotoWidget]:
    if not descriptor.shows_photo:
        return None
    value = state.get(descriptor.name)
    filename = value.filename if isinstance(value, FileReference) else ""
    return PhotoWidget(name=descriptor.name, filename=filename)


def _build_comment(descriptor: FieldDescriptor, state: AggregatedState) -> Optional[CommentWidget]:
    if not descriptor.comment_enabled:
        return None
    target = descriptor.comment_field_name
    value = state.get(target, "") if target else ""
    return CommentWidget(target=target, value=str(value))


def _build_help(descriptor: FieldDescriptor, ui: UIState) -> Optional[HelpAffordance]:
    if not descriptor.help_text:
        return None
    return HelpAffordance(
        text=descriptor.help_text,
        visible=ui.is_help_visible(descriptor.id),
        aria_label=f"Help for {descriptor.title}",
    )


# ========================
# Public render API
# ========================

def build_field_view(descriptor: FieldDescriptor, state: AggregatedState, ui: UIState) -> FieldView:
    """
    Build the view model for one descriptor.

    Args:
        descriptor: Field to render
        state: Current aggregated state (source of widget values)
        ui: Current transient UI state (open dropdown, visible help)

    Returns:
        FieldView
    """
    primary = PRIMARY_BUILDERS[descriptor.field_type](descriptor, state, ui)
    return FieldView(
        descriptor=descriptor,
        required=descriptor.required,
        primary=primary,
        photo=_build_photo(descriptor, state),
        comment=_build_comment(descriptor, state),
        help=_build_help(descriptor, ui),
    )


def build_form_view(groups: Dict[str, List[FieldDescriptor]], state: AggregatedState,
                    ui: UIState) -> Tuple[SectionView, ...]:
    """Build every section, in group order, from group_by_category() output."""
    return tuple(
        SectionView(
            category=category,
            fields=tuple(build_field_view(d, state, ui) for d in descriptors),
        )
        for category, descriptors in groups.items()
    )


# ========================
# Edit -> commit translation
# ========================

def _require_type(descriptor: FieldDescriptor, expected: FieldType) -> None:
    if descriptor.field_type != expected:
        raise ValueError(
            f"Field '{descriptor.id}' is {descriptor.field_type.value}, "
            f"not {expected.value}"
        )


def commit_text(descriptor: FieldDescriptor, value: str) -> Commit:
    """Text input: the full current string."""
    _require_type(descriptor, FieldType.TEXT)
    return descriptor.name, "" if value is None else str(value)


def commit_integer(descriptor: FieldDescriptor, raw: str) -> Commit:
    """
    Integer input: leading-integer parse of the raw text.

    Unparseable text commits the NaN sentinel; it is logged, not raised.
    """
    _require_type(descriptor, FieldType.INTEGER)
    value = parse_int(raw)
    if is_nan(value):
        logger.warning(f"Field '{descriptor.name}': could not parse integer from {raw!r}")
    return descriptor.name, value


def commit_option(descriptor: FieldDescriptor, option_key: str) -> Commit:
    """
    Dropdown option chosen: commits the key, never the label.

    Raises:
        ValueError: If option_key is not one of the field's options
    """
    _require_type(descriptor, FieldType.SELECT)
    if option_key not in descriptor.options:
        raise ValueError(f"Field '{descriptor.id}' has no option '{option_key}'")
    return descriptor.name, option_key


def _parse_iso(value: str) -> datetime:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def to_iso_timestamp(moment: datetime) -> str:
    """
    UTC ISO-8601 with milliseconds and Z suffix, e.g. 2025-01-31T09:30:00.000Z.

    Naive datetimes are taken as UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def commit_datetime(descriptor: FieldDescriptor, value: Union[datetime, str, None]) -> Commit:
    """
    Date-time picker change.

    Clearing (None or "") commits "" rather than removing the key.

    Raises:
        ValueError: If a string value is not an ISO-8601 date-time
    """
    _require_type(descriptor, FieldType.DATETIME)
    if value is None or value == "":
        return descriptor.name, ""
    if isinstance(value, str):
        try:
            value = _parse_iso(value)
        except ValueError as e:
            raise ValueError(f"Field '{descriptor.id}': invalid date-time {value!r}") from e
    return descriptor.name, to_iso_timestamp(value)


def commit_photo(descriptor: FieldDescriptor, filename: str, content_type: str) -> Commit:
    """
    Photo chosen: commits a reference carrying the filename only.

    Raises:
        ValueError: If the field shows no photo picker, the filename is
            empty, or the content type is not an image type
    """
    if not descriptor.shows_photo:
        raise ValueError(f"Field '{descriptor.id}' has no photo input")
    if not filename:
        raise ValueError(f"Field '{descriptor.id}': photo filename is empty")
    if not (content_type or "").startswith("image/"):
        raise ValueError(
            f"Field '{descriptor.id}': '{content_type}' is not an image type"
        )
    return descriptor.name, FileReference(filename=filename, content_type=content_type)


def commit_comment(descriptor: FieldDescriptor, text: str) -> Optional[Commit]:
    """
    Comment text area change.

    Returns None (no write) when the descriptor names no comment field.

    Raises:
        ValueError: If the descriptor has no comment widget
    """
    if not descriptor.comment_enabled:
        raise ValueError(f"Field '{descriptor.id}' has no comment input")
    if not descriptor.comment_field_name:
        return None
    return descriptor.comment_field_name, "" if text is None else str(text)
