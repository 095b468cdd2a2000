"""
Spec Loader - reads the static form specification document

The document is a JSON list of field records (see FieldDescriptor.from_dict
for the record keys). It is treated as externally supplied input: the
loader checks structural invariants (ids present and unique, known field
types) and otherwise trusts it. Malformed select options are tolerated
later, at render time.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

from form_engine.contracts import FieldDescriptor

logger = logging.getLogger(__name__)

DEFAULT_FORM_SPEC_PATH = "data/form_spec.json"


def parse_form_spec(records: List[Dict[str, Any]]) -> Tuple[FieldDescriptor, ...]:
    """
    Build descriptors from an already-parsed document, in document order.

    Args:
        records: List of field record dicts

    Returns:
        tuple of FieldDescriptor

    Raises:
        ValueError: If the document is not a list, a record is invalid,
            or two records share an id
    """
    if not isinstance(records, list):
        raise ValueError(f"Form spec must be a list of fields, got {type(records).__name__}")

    descriptors = []
    seen_ids = set()

    for record in records:
        descriptor = FieldDescriptor.from_dict(record)
        if descriptor.id in seen_ids:
            raise ValueError(f"Duplicate field id in form spec: '{descriptor.id}'")
        seen_ids.add(descriptor.id)
        descriptors.append(descriptor)

    return tuple(descriptors)


def load_form_spec(path: str = DEFAULT_FORM_SPEC_PATH) -> Tuple[FieldDescriptor, ...]:
    """
    Load and parse the form specification document.

    Args:
        path: Path to the JSON document

    Returns:
        tuple of FieldDescriptor, in document order

    Raises:
        FileNotFoundError: If the document doesn't exist
        ValueError: If the document is not valid JSON or fails parse_form_spec
    """
    spec_file = Path(path)
    if not spec_file.exists():
        raise FileNotFoundError(f"Form spec not found: {path}")

    with open(spec_file, 'r', encoding='utf-8') as f:
        try:
            records = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Form spec is not valid JSON: {path}: {e}") from e

    descriptors = parse_form_spec(records)
    logger.info(f"Loaded form spec {path}: {len(descriptors)} fields")
    return descriptors
