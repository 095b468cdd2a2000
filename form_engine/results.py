"""
Result types returned by FormEngine.handle()

These are the ONLY return types from the event handler.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from form_engine.core.state_manager import AggregatedState
from form_engine.core.ui_state import UIState


@dataclass(frozen=True)
class SubmitResult:
    """
    Outcome of one submit.

    Exactly one of error / json_output is set.

    Attributes:
        error: "Please fill in the required field(s): ..." message, or None
        json_output: Pretty-printed JSON of the state, or None
        missing_fields: Titles of missing required fields, in descriptor order
    """
    error: Optional[str] = None
    json_output: Optional[str] = None
    missing_fields: Tuple[str, ...] = ()

    @property
    def accepted(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class FormSnapshot:
    """
    Form state after one event.

    Attributes:
        state: Aggregated field values
        ui: Transient UI flags (open dropdown, visible help, error, result)
        submit_result: Set only when the event was a Submit
    """
    state: AggregatedState
    ui: UIState
    submit_result: Optional[SubmitResult] = None
