"""
JSON Formatter - serializes aggregated state for display

Responsibilities:
- Render AggregatedState as a pretty-printed JSON document
- Log the submitted record

Design principles:
- Pure serialization (no validation of field values)
- No metadata wrapper: keys are exactly the state's field names
- Output is always valid JSON (no NaN literals) and parses back to
  state.export_for_json()
"""

import json
import logging

from form_engine.core.state_manager import AggregatedState

logger = logging.getLogger(__name__)


class JSONFormatter:
    """
    Serialization layer for submitted form state
    """

    def __init__(self, indent: int = 2):
        """
        Initialize JSON Formatter

        Args:
            indent: Indentation width of the output document (default: 2)
        """
        self.indent = indent

    def format_state(self, state: AggregatedState) -> str:
        """
        Render state as a JSON document.

        Args:
            state: Aggregated form state

        Returns:
            str: Pretty-printed JSON object, keys in insertion order

        Raises:
            TypeError: If state is not an AggregatedState

        Example:
            >>> formatter = JSONFormatter()
            >>> print(formatter.format_state(AggregatedState({'age': 30})))
            {
              "age": 30
            }
        """
        if not isinstance(state, AggregatedState):
            raise TypeError(f"state must be AggregatedState, got {type(state).__name__}")

        data = state.export_for_json()
        document = json.dumps(data, indent=self.indent, ensure_ascii=False, allow_nan=False)

        logger.info(f"Formatted form state: {len(data)} fields")
        logger.debug(f"Submitted record: {data}")

        return document
