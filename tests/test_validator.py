"""
Test Validator/Submitter and JSON Formatter
"""

import json

import pytest

from form_engine.contracts import FileReference
from form_engine.core.json_formatter import JSONFormatter
from form_engine.core.state_manager import AggregatedState
from form_engine.core.ui_state import UIState
from form_engine.core.validator import find_missing_required, submit
from form_engine.utils.helpers import NAN

from tests.conftest import make_field


@pytest.fixture
def required_pair():
    return (
        make_field('a', title='A', inputReq=1),
        make_field('b', title='B', inputReq=1),
        make_field('c', title='C'),
    )


class TestFindMissingRequired:

    def test_absent_keys_in_descriptor_order(self, required_pair):
        assert find_missing_required(required_pair, AggregatedState()) == ['A', 'B']

    def test_falsy_values_count_as_missing(self):
        descriptors = [make_field(name, title=name, inputReq=1) for name in ('s', 'z', 'n')]
        state = AggregatedState({'s': '', 'z': 0, 'n': NAN})
        assert find_missing_required(descriptors, state) == ['s', 'z', 'n']

    def test_truthy_values_satisfy(self):
        descriptors = [make_field(name, title=name, inputReq=1) for name in ('s', 'i', 'p')]
        state = AggregatedState({'s': 'x', 'i': -1, 'p': FileReference('a.png', 'image/png')})
        assert find_missing_required(descriptors, state) == []

    def test_optional_fields_ignored(self, required_pair):
        state = AggregatedState({'a': 'x', 'b': 'y'})
        assert find_missing_required(required_pair, state) == []


class TestSubmit:

    def test_missing_fields_message(self, required_pair):
        ui, result = submit(required_pair, AggregatedState(), UIState())

        assert result.error == "Please fill in the required field(s): A, B"
        assert result.missing_fields == ('A', 'B')
        assert result.json_output is None
        assert result.accepted is False
        assert ui.form_error == result.error
        assert ui.show_result is False

    def test_error_suppresses_previous_result(self, required_pair):
        ui = UIState().with_result()
        ui, _ = submit(required_pair, AggregatedState(), ui)
        assert ui.show_result is False

    def test_success_clears_error_and_shows_json(self, required_pair):
        state = AggregatedState({'a': 'x', 'b': 'y'})
        ui = UIState().with_error("Please fill in the required field(s): A")

        ui, result = submit(required_pair, state, ui)

        assert result.accepted is True
        assert ui.form_error is None
        assert ui.show_result is True
        assert json.loads(result.json_output) == state.to_dict()

    def test_same_state_same_outcome(self, required_pair):
        state = AggregatedState({'a': 'x'})
        first = submit(required_pair, state, UIState())
        second = submit(required_pair, state, first[0])
        assert first == second


class TestJSONFormatter:

    def test_two_space_indent(self):
        output = JSONFormatter().format_state(AggregatedState({'age': 30, 'color': 'r'}))
        assert output == '{\n  "age": 30,\n  "color": "r"\n}'

    def test_round_trips_to_json_view(self):
        state = AggregatedState({
            'name': 'Zoë',
            'photo': FileReference('door.jpg', 'image/jpeg'),
            'count': NAN,
        })
        output = JSONFormatter().format_state(state)

        assert json.loads(output) == {'name': 'Zoë', 'photo': 'door.jpg', 'count': None}
        assert 'NaN' not in output

    def test_rejects_plain_dict(self):
        with pytest.raises(TypeError, match="must be AggregatedState"):
            JSONFormatter().format_state({'a': 1})
