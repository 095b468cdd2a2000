"""
UI State - transient widget state owned by one form

Not business data, never exported. Tracks:
- which single dropdown is open (descriptor id or None)
- which help-text bubbles are visible (set of descriptor ids)
- the current validation error message
- whether an accepted submit has revealed the result panel

Every transition returns a new UIState.
"""

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Optional, Iterable

# Keys that activate a help-text affordance from the keyboard
HELP_ACTIVATION_KEYS = frozenset({"Enter", " "})


@dataclass(frozen=True)
class UIState:
    """
    Snapshot of transient form UI flags.

    Attributes:
        open_dropdown: Descriptor id of the open dropdown, or None
        visible_help: Descriptor ids whose help text is showing
        form_error: Current validation error message, or None
        show_result: True once a submit is accepted; the panel then tracks
            the live state until a rejected submit hides it
    """
    open_dropdown: Optional[str] = None
    visible_help: FrozenSet[str] = field(default_factory=frozenset)
    form_error: Optional[str] = None
    show_result: bool = False

    # ========================
    # Dropdowns
    # ========================

    def toggle_dropdown(self, descriptor_id: str) -> "UIState":
        """Open descriptor_id's dropdown (closing any other), or close it if open."""
        if self.open_dropdown == descriptor_id:
            return replace(self, open_dropdown=None)
        return replace(self, open_dropdown=descriptor_id)

    def close_dropdown(self) -> "UIState":
        if self.open_dropdown is None:
            return self
        return replace(self, open_dropdown=None)

    def pointer_down(self, target_id: Optional[str], dropdown_ids: Iterable[str]) -> "UIState":
        """
        Handle a document-level pointer-down.

        Closes the open dropdown unless the pointer landed inside one of
        the rendered dropdown containers.

        Args:
            target_id: Descriptor id of the dropdown container the pointer
                landed in, or None when it landed elsewhere
            dropdown_ids: Descriptor ids of every rendered dropdown container
        """
        if target_id is not None and target_id in set(dropdown_ids):
            return self
        return self.close_dropdown()

    # ========================
    # Help text
    # ========================

    def is_help_visible(self, descriptor_id: str) -> bool:
        return descriptor_id in self.visible_help

    def toggle_help(self, descriptor_id: str) -> "UIState":
        """Flip one descriptor's help visibility; all others are untouched."""
        if descriptor_id in self.visible_help:
            return replace(self, visible_help=self.visible_help - {descriptor_id})
        return replace(self, visible_help=self.visible_help | {descriptor_id})

    def help_key_press(self, descriptor_id: str, key: str) -> "UIState":
        """Keyboard activation: Enter or Space toggles, other keys are ignored."""
        if key in HELP_ACTIVATION_KEYS:
            return self.toggle_help(descriptor_id)
        return self

    # ========================
    # Submission outcome
    # ========================

    def with_error(self, message: str) -> "UIState":
        """Show an error and suppress any previously shown result."""
        return replace(self, form_error=message, show_result=False)

    def with_result(self) -> "UIState":
        """Show the result panel and clear any previous error."""
        return replace(self, form_error=None, show_result=True)
