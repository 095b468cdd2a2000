"""
Shared fixtures for form engine tests
"""

import pytest

from form_engine.contracts import FieldDescriptor


def make_field(field_id, field_type="text", **overrides):
    """Build a descriptor from document-style keys with sensible defaults"""
    record = {
        'fieldid': field_id,
        'fieldName': field_id,
        'title': field_id,
        'fieldType': field_type,
        'category': 'Basic',
        'fieldOrder': 1,
    }
    record.update(overrides)
    return FieldDescriptor.from_dict(record)


@pytest.fixture
def example_descriptors():
    """The age/color form: age is required, color is an optional dropdown"""
    return (
        make_field('age', 'numberInt', fieldOrder=1, inputReq=1),
        make_field('color', 'select', fieldOrder=2, dropVals='{"r": "Red", "b": "Blue"}'),
    )


@pytest.fixture
def mixed_descriptors():
    """One field of every type, over two categories"""
    return (
        make_field('name', 'text', title='Name', fieldOrder=1, inputReq=1,
                   helpText='Your full name'),
        make_field('when', 'datetime', title='When', fieldOrder=2),
        make_field('site', 'select', title='Site', category='Site', fieldOrder=1,
                   dropVals='{"res": "Residential", "com": "Commercial"}',
                   commentField=1, commentFieldName='site_comment'),
        make_field('count', 'numberInt', title='Count', category='Site', fieldOrder=2,
                   helpText='How many'),
        make_field('front', 'photo', title='Front', category='Site', fieldOrder=3),
        make_field('kind', 'select', title='Kind', fieldOrder=3,
                   dropVals='{"a": "Alpha", "b": "Beta"}'),
    )
