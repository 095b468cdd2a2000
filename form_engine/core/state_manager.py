"""
State Manager - Aggregated form state

Responsibilities:
- Hold the single mapping of field name -> current value
- Apply one-key updates as new states (never mutate in place)
- Export a JSON-ready view for the formatter

Design principles:
- AggregatedState is a value object: set() returns a new instance
- No validation of keys or values (State Manager is a dumb container)
- No implicit clearing: clearing a field writes an empty value
- Key order is insertion order, but callers must not rely on it
"""

import logging
from typing import Any, Dict, Iterator, Mapping, Optional

from form_engine.contracts import FieldValue, FileReference
from form_engine.utils.helpers import is_nan

logger = logging.getLogger(__name__)


class AggregatedState(Mapping[str, FieldValue]):
    """Immutable mapping of field name to committed value"""

    __slots__ = ('_values',)

    def __init__(self, values: Optional[Mapping[str, FieldValue]] = None):
        """
        Create a state, copying the given values.

        Args:
            values: Initial mapping (None for the empty state a form mounts with)
        """
        self._values: Dict[str, FieldValue] = dict(values or {})

    # ========================
    # Mapping protocol
    # ========================

    def __getitem__(self, key: str) -> FieldValue:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"AggregatedState({self._values!r})"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, AggregatedState):
            return self._values == other._values
        if isinstance(other, Mapping):
            return self._values == dict(other)
        return NotImplemented

    __hash__ = None

    # ========================
    # Updates
    # ========================

    def set(self, key: str, value: FieldValue) -> "AggregatedState":
        """
        Return a new state with key mapped to value.

        All other keys are carried over unchanged. The receiver is left
        untouched, so a stale reference can never clobber a newer edit
        of a different key.

        Args:
            key: Field name (descriptor name or comment field name)
            value: Committed value

        Returns:
            AggregatedState: New state

        Example:
            s1 = AggregatedState()
            s2 = s1.set('age', 30)
            # len(s1) == 0, s2['age'] == 30
        """
        updated = dict(self._values)
        updated[key] = value
        logger.debug(f"State: {key} = {value!r}")
        return AggregatedState(updated)

    # ========================
    # Export
    # ========================

    def to_dict(self) -> Dict[str, FieldValue]:
        """Shallow copy of the raw values (FieldValues are immutable)."""
        return dict(self._values)

    def export_for_json(self) -> Dict[str, Any]:
        """
        JSON-ready view of the state.

        FileReference values become their filename and the NaN sentinel
        becomes None (null), so the result always serializes as valid JSON.

        Returns:
            dict: field name -> str | int | float | None
        """
        exported = {}
        for key, value in self._values.items():
            if isinstance(value, FileReference):
                exported[key] = value.filename
            elif is_nan(value):
                exported[key] = None
            else:
                exported[key] = value
        return exported
