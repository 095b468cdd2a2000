"""
Form Engine - owns one mounted form and processes its events

Responsibilities:
- Hold the descriptors, their category groups and the current snapshot
- Route each event to the renderer (edits), UI state (dropdown, help)
  or the validator (submit)
- Own the document-level pointer-down subscription for its lifetime

Design principles:
- Every handler runs synchronously and replaces the snapshot wholesale
- State and UI state are immutable; a snapshot is never mutated
- The pointer-down listener is registered on mount and removed on
  unmount; mounted_form() guarantees removal on every exit path
"""

import logging
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from form_engine.commands import (
    ChoosePhoto, EditComment, EditDateTime, EditInteger, EditText, Event,
    HelpKeyPress, PointerDown, SelectOption, Submit, ToggleDropdown, ToggleHelp,
)
from form_engine.contracts import FieldDescriptor
from form_engine.core import field_renderer
from form_engine.core.grouping import group_by_category
from form_engine.core.json_formatter import JSONFormatter
from form_engine.core.state_manager import AggregatedState
from form_engine.core.ui_state import UIState
from form_engine.core.validator import submit
from form_engine.results import FormSnapshot
from form_engine.utils.field_types import FieldType
from form_engine.utils.helpers import generate_form_session_id

logger = logging.getLogger(__name__)

PointerListener = Callable[[PointerDown], None]


class PointerEventHub:
    """
    Document-level pointer-down listener registry.

    Stands in for the page's global event target: every mounted form
    adds one listener and must remove it when it goes away.
    """

    def __init__(self):
        self._listeners: List[PointerListener] = []

    def add_listener(self, listener: PointerListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: PointerListener) -> None:
        """Remove a listener; removing one that isn't registered is a no-op."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def dispatch(self, event: PointerDown) -> None:
        # Copy: a listener may unmount its form while we iterate
        for listener in list(self._listeners):
            listener(event)

    def listener_count(self) -> int:
        return len(self._listeners)


class FormEngine:
    """
    Processes the events of one form instance

    Lifecycle:
        engine = FormEngine(descriptors, hub)
        engine.mount()
        snapshot = engine.handle(EditText('f1', 'hello'))
        ...
        engine.unmount()

    Prefer mounted_form(), which unmounts on every exit path.
    """

    def __init__(self, descriptors: Sequence[FieldDescriptor], hub: Optional[PointerEventHub] = None,
                 formatter: Optional[JSONFormatter] = None):
        """
        Args:
            descriptors: Form specification, in document order
            hub: Pointer-down registry to subscribe to (a private one if None)
            formatter: JSON formatter used on submit
        """
        self.descriptors: Tuple[FieldDescriptor, ...] = tuple(descriptors)
        self.groups: Dict[str, List[FieldDescriptor]] = group_by_category(self.descriptors)
        self.hub = hub or PointerEventHub()
        self.formatter = formatter or JSONFormatter()
        self.session_id = generate_form_session_id()

        self._by_id: Dict[str, FieldDescriptor] = {d.id: d for d in self.descriptors}
        self._dropdown_ids = frozenset(
            d.id for d in self.descriptors if d.field_type == FieldType.SELECT
        )
        self._snapshot = FormSnapshot(state=AggregatedState(), ui=UIState())
        self._mounted = False

        logger.info(
            f"Form {self.session_id} created: {len(self.descriptors)} fields, "
            f"{len(self.groups)} sections"
        )

    # ========================
    # Lifecycle
    # ========================

    @property
    def mounted(self) -> bool:
        return self._mounted

    def mount(self) -> None:
        """Start with empty state and subscribe to document pointer-downs."""
        if self._mounted:
            raise RuntimeError(f"Form {self.session_id} is already mounted")
        self._snapshot = FormSnapshot(state=AggregatedState(), ui=UIState())
        self.hub.add_listener(self._on_pointer_down)
        self._mounted = True
        logger.info(f"Form {self.session_id} mounted")

    def unmount(self) -> None:
        """Unsubscribe and drop all state. Safe to call more than once."""
        if not self._mounted:
            return
        self.hub.remove_listener(self._on_pointer_down)
        self._mounted = False
        self._snapshot = FormSnapshot(state=AggregatedState(), ui=UIState())
        logger.info(f"Form {self.session_id} unmounted")

    def _on_pointer_down(self, event: PointerDown) -> None:
        self.handle(event)

    # ========================
    # Read access
    # ========================

    @property
    def snapshot(self) -> FormSnapshot:
        return self._snapshot

    @property
    def state(self) -> AggregatedState:
        return self._snapshot.state

    @property
    def ui(self) -> UIState:
        return self._snapshot.ui

    def descriptor(self, field_id: str) -> FieldDescriptor:
        """
        Raises:
            KeyError: If no descriptor has this id
        """
        try:
            return self._by_id[field_id]
        except KeyError:
            raise KeyError(f"Unknown field id: '{field_id}'") from None

    def render(self) -> Tuple[field_renderer.SectionView, ...]:
        """View models for every section of the current snapshot."""
        return field_renderer.build_form_view(self.groups, self.state, self.ui)

    def result_document(self) -> Optional[str]:
        """
        JSON document for the result panel, or None while it is hidden.

        Formatted from the current state, so edits made after an accepted
        submit show up in the panel.
        """
        if not self.ui.show_result:
            return None
        return self.formatter.format_state(self.state)

    # ========================
    # Event handling
    # ========================

    def handle(self, event: Event) -> FormSnapshot:
        """
        Process one event and return the new snapshot.

        Args:
            event: One of the types in form_engine.commands

        Returns:
            FormSnapshot (submit_result set only for Submit)

        Raises:
            RuntimeError: If the form is not mounted
            KeyError: If the event names an unknown field id
            ValueError: If the edit doesn't fit the field (wrong widget,
                unknown option, non-image photo, bad date-time)
            TypeError: If event is not a known event type
        """
        if not self._mounted:
            raise RuntimeError(f"Form {self.session_id} is not mounted")

        state, ui = self.state, self.ui
        submit_result = None

        if isinstance(event, Submit):
            ui, submit_result = submit(self.descriptors, state, ui, self.formatter)

        elif isinstance(event, PointerDown):
            ui = ui.pointer_down(event.inside_dropdown, self._dropdown_ids)

        elif isinstance(event, ToggleDropdown):
            descriptor = self.descriptor(event.field_id)
            if descriptor.field_type != FieldType.SELECT:
                raise ValueError(f"Field '{descriptor.id}' has no dropdown")
            ui = ui.toggle_dropdown(descriptor.id)

        elif isinstance(event, ToggleHelp):
            ui = ui.toggle_help(self.descriptor(event.field_id).id)

        elif isinstance(event, HelpKeyPress):
            ui = ui.help_key_press(self.descriptor(event.field_id).id, event.key)

        elif isinstance(event, SelectOption):
            descriptor = self.descriptor(event.field_id)
            state = state.set(*field_renderer.commit_option(descriptor, event.option_key))
            ui = ui.close_dropdown()

        else:
            commit = self._commit_for_edit(event)
            if commit is not None:
                state = state.set(*commit)

        self._snapshot = FormSnapshot(state=state, ui=ui, submit_result=submit_result)
        return self._snapshot

    def _commit_for_edit(self, event: Event) -> Optional[field_renderer.Commit]:
        if isinstance(event, EditText):
            return field_renderer.commit_text(self.descriptor(event.field_id), event.value)
        if isinstance(event, EditInteger):
            return field_renderer.commit_integer(self.descriptor(event.field_id), event.raw)
        if isinstance(event, EditDateTime):
            return field_renderer.commit_datetime(self.descriptor(event.field_id), event.value)
        if isinstance(event, ChoosePhoto):
            return field_renderer.commit_photo(
                self.descriptor(event.field_id), event.filename, event.content_type
            )
        if isinstance(event, EditComment):
            return field_renderer.commit_comment(self.descriptor(event.field_id), event.text)
        raise TypeError(f"Unknown event type: {type(event).__name__}")


@contextmanager
def mounted_form(descriptors: Sequence[FieldDescriptor],
                 hub: Optional[PointerEventHub] = None) -> Iterator[FormEngine]:
    """
    Mount a form for the duration of a with-block.

    The pointer-down listener is removed when the block exits, whether
    it finishes normally or raises.

    Example:
        with mounted_form(descriptors, hub) as form:
            form.handle(EditText('f1', 'hello'))
        # hub.listener_count() is back to what it was
    """
    engine = FormEngine(descriptors, hub)
    engine.mount()
    try:
        yield engine
    finally:
        engine.unmount()
