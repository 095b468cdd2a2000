"""
Validator/Submitter - required-field check and submission

Submission is terminal at display: a successful submit produces the JSON
document, nothing is sent anywhere. Missing required fields are a normal
outcome (a SubmitResult with an error), not an exception, so the user
can correct and resubmit any number of times.
"""

import logging
from typing import Iterable, List, Tuple

from form_engine.contracts import FieldDescriptor
from form_engine.core.json_formatter import JSONFormatter
from form_engine.core.state_manager import AggregatedState
from form_engine.core.ui_state import UIState
from form_engine.results import SubmitResult
from form_engine.utils.helpers import is_truthy

logger = logging.getLogger(__name__)

MISSING_FIELDS_PREFIX = "Please fill in the required field(s): "


def find_missing_required(descriptors: Iterable[FieldDescriptor], state: AggregatedState) -> List[str]:
    """
    Titles of required fields with no truthy value, in descriptor order.

    Absent keys, "", 0, None and the NaN sentinel all count as missing.
    """
    return [
        d.title
        for d in descriptors
        if d.required and not is_truthy(state.get(d.name))
    ]


def missing_fields_message(titles: List[str]) -> str:
    return MISSING_FIELDS_PREFIX + ", ".join(titles)


def submit(descriptors: Iterable[FieldDescriptor], state: AggregatedState, ui: UIState,
           formatter: JSONFormatter = None) -> Tuple[UIState, SubmitResult]:
    """
    Validate required fields and serialize the state.

    Recomputed from scratch on every call: the same state always gives
    the same outcome.

    Args:
        descriptors: Every descriptor of the form, in document order
        state: Current aggregated state
        ui: Current UI state
        formatter: JSON formatter (default: 2-space JSONFormatter)

    Returns:
        (new UIState, SubmitResult). On failure the UI shows the error and
        hides any previous result; on success it shows the result panel
        and clears any previous error.
    """
    formatter = formatter or JSONFormatter()
    missing = find_missing_required(descriptors, state)

    if missing:
        message = missing_fields_message(missing)
        logger.info(f"Submit rejected: {len(missing)} required field(s) missing")
        return ui.with_error(message), SubmitResult(error=message, missing_fields=tuple(missing))

    document = formatter.format_state(state)
    logger.info(f"Submit accepted:\n{document}")
    return ui.with_result(), SubmitResult(json_output=document)
