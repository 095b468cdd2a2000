"""
Test Field Renderer - widget view models and edit commits
"""

import math
from datetime import datetime, timedelta, timezone

import pytest

from form_engine.contracts import FileReference
from form_engine.core import field_renderer
from form_engine.core.field_renderer import (
    CommentWidget, DateTimeWidget, IntegerWidget, PhotoWidget, SelectWidget, TextWidget,
    build_field_view, build_form_view, commit_comment, commit_datetime, commit_integer,
    commit_option, commit_photo, commit_text, to_iso_timestamp,
)
from form_engine.core.grouping import group_by_category
from form_engine.core.state_manager import AggregatedState
from form_engine.core.ui_state import UIState
from form_engine.utils.field_types import FieldType

from tests.conftest import make_field

EMPTY = AggregatedState()
UI = UIState()


def test_every_field_type_has_a_builder():
    assert set(field_renderer.PRIMARY_BUILDERS) == set(FieldType)


class TestPrimaryWidgets:

    def test_text(self):
        view = build_field_view(make_field('name'), EMPTY.set('name', 'Ann'), UI)
        assert view.primary == TextWidget(name='name', value='Ann')

    def test_integer_shows_blank_for_nan(self):
        d = make_field('n', 'numberInt')
        assert build_field_view(d, EMPTY.set('n', 12), UI).primary == IntegerWidget(name='n', value='12')
        assert build_field_view(d, EMPTY.set('n', float('nan')), UI).primary.value == ''

    def test_select_placeholder_until_chosen(self):
        d = make_field('color', 'select', dropVals='{"r": "Red", "b": "Blue"}')
        widget = build_field_view(d, EMPTY, UI).primary

        assert isinstance(widget, SelectWidget)
        assert widget.display == "Select an option"
        assert widget.selected is None
        assert widget.options == (('r', 'Red'), ('b', 'Blue'))
        assert widget.is_open is False

    def test_select_shows_label_of_committed_key(self):
        d = make_field('color', 'select', dropVals='{"r": "Red", "b": "Blue"}')
        widget = build_field_view(d, EMPTY.set('color', 'b'), UI).primary
        assert widget.display == 'Blue'
        assert widget.selected == 'b'

    def test_select_open_flag_follows_ui(self):
        d = make_field('color', 'select', dropVals='{"r": "Red"}')
        widget = build_field_view(d, EMPTY, UI.toggle_dropdown('color')).primary
        assert widget.is_open is True

    def test_select_with_malformed_options_still_renders(self):
        d = make_field('color', 'select', dropVals='{broken')
        widget = build_field_view(d, EMPTY, UI).primary
        assert widget.options == ()
        assert widget.display == "Select an option"

    def test_datetime_display(self):
        d = make_field('when', 'datetime')
        widget = build_field_view(d, EMPTY.set('when', '2025-01-31T09:30:00.000Z'), UI).primary

        assert isinstance(widget, DateTimeWidget)
        assert widget.display == '2025-01-31 09:30'
        assert widget.input_value == '2025-01-31T09:30'

    def test_datetime_empty(self):
        widget = build_field_view(make_field('when', 'datetime'), EMPTY.set('when', ''), UI).primary
        assert widget.value == ''
        assert widget.display == ''
        assert widget.placeholder == "Select date & time"

    def test_photo_type_has_no_primary(self):
        view = build_field_view(make_field('front', 'photo'), EMPTY, UI)
        assert view.primary is None
        assert view.photo == PhotoWidget(name='front')


class TestAuxiliaries:

    def test_photo_renders_once_for_type_or_flag(self):
        plain = build_field_view(make_field('a', 'text'), EMPTY, UI)
        flagged = build_field_view(make_field('b', 'text', requiresPhoto=1), EMPTY, UI)
        both = build_field_view(make_field('c', 'photo', requiresPhoto=1), EMPTY, UI)

        assert plain.photo is None
        assert flagged.photo == PhotoWidget(name='b')
        assert both.photo == PhotoWidget(name='c')
        assert both.primary is None

    def test_photo_shows_chosen_filename(self):
        state = EMPTY.set('front', FileReference('door.jpg', 'image/jpeg'))
        assert build_field_view(make_field('front', 'photo'), state, UI).photo.filename == 'door.jpg'

    def test_comment_reads_its_own_key(self):
        d = make_field('site', commentField=1, commentFieldName='site_comment')
        view = build_field_view(d, EMPTY.set('site_comment', 'muddy').set('site', 'x'), UI)
        assert view.comment == CommentWidget(target='site_comment', value='muddy')

    def test_comment_without_target(self):
        view = build_field_view(make_field('site', commentField=1), EMPTY, UI)
        assert view.comment == CommentWidget(target=None, value='')

    def test_no_comment_unless_enabled(self):
        d = make_field('site', commentField=0, commentFieldName='site_comment')
        assert build_field_view(d, EMPTY, UI).comment is None

    def test_help_only_with_text(self):
        assert build_field_view(make_field('a'), EMPTY, UI).help is None

        d = make_field('a', title='Age', helpText='In years')
        hidden = build_field_view(d, EMPTY, UI).help
        shown = build_field_view(d, EMPTY, UI.toggle_help('a')).help

        assert hidden.visible is False
        assert shown.visible is True
        assert shown.aria_label == "Help for Age"
        assert shown.text == 'In years'

    def test_required_marker(self):
        assert build_field_view(make_field('a', inputReq=1), EMPTY, UI).required is True
        assert build_field_view(make_field('a'), EMPTY, UI).required is False


def test_form_view_follows_groups(mixed_descriptors):
    sections = build_form_view(group_by_category(mixed_descriptors), EMPTY, UI)

    assert [s.category for s in sections] == ['Basic', 'Site']
    assert [v.descriptor.id for v in sections[0].fields] == ['name', 'when', 'kind']
    assert [v.descriptor.id for v in sections[1].fields] == ['site', 'count', 'front']


class TestCommits:

    def test_text(self):
        assert commit_text(make_field('name'), 'Ann') == ('name', 'Ann')

    def test_integer_parses_leading_digits(self):
        d = make_field('n', 'numberInt')
        assert commit_integer(d, '30') == ('n', 30)
        assert commit_integer(d, ' -7') == ('n', -7)
        assert commit_integer(d, '3.9') == ('n', 3)
        assert commit_integer(d, '12abc') == ('n', 12)

    def test_integer_failure_is_nan_not_error(self):
        key, value = commit_integer(make_field('n', 'numberInt'), 'abc')
        assert key == 'n'
        assert math.isnan(value)

        _, empty = commit_integer(make_field('n', 'numberInt'), '')
        assert math.isnan(empty)

    def test_integer_with_huge_digit_run_is_nan(self):
        _, value = commit_integer(make_field('n', 'numberInt'), '9' * 5000)
        assert math.isnan(value)

    def test_integer_ignores_non_ascii_digits(self):
        d = make_field('n', 'numberInt')
        assert math.isnan(commit_integer(d, '٣')[1])
        assert math.isnan(commit_integer(d, '７')[1])
        assert commit_integer(d, '4٣') == ('n', 4)

    def test_option_commits_key_not_label(self):
        d = make_field('color', 'select', dropVals='{"r": "Red"}')
        assert commit_option(d, 'r') == ('color', 'r')

    def test_unknown_option_rejected(self):
        d = make_field('color', 'select', dropVals='{"r": "Red"}')
        with pytest.raises(ValueError, match="no option 'Red'"):
            commit_option(d, 'Red')

    def test_wrong_widget_rejected(self):
        with pytest.raises(ValueError, match="is numberInt, not text"):
            commit_text(make_field('n', 'numberInt'), 'x')

    def test_datetime_iso_utc(self):
        d = make_field('when', 'datetime')
        assert commit_datetime(d, datetime(2025, 1, 31, 9, 30)) == ('when', '2025-01-31T09:30:00.000Z')

        plus_two = timezone(timedelta(hours=2))
        aware = datetime(2025, 1, 31, 11, 30, 15, 250000, tzinfo=plus_two)
        assert commit_datetime(d, aware) == ('when', '2025-01-31T09:30:15.250Z')

    def test_datetime_from_browser_string(self):
        d = make_field('when', 'datetime')
        assert commit_datetime(d, '2025-01-31T09:30') == ('when', '2025-01-31T09:30:00.000Z')
        assert commit_datetime(d, '2025-01-31T09:30:00.000Z') == ('when', '2025-01-31T09:30:00.000Z')

    def test_datetime_clear_writes_empty_string(self):
        d = make_field('when', 'datetime')
        assert commit_datetime(d, None) == ('when', '')
        assert commit_datetime(d, '') == ('when', '')

    def test_datetime_rejects_garbage(self):
        with pytest.raises(ValueError, match="invalid date-time"):
            commit_datetime(make_field('when', 'datetime'), 'next tuesday')

    def test_photo_commits_reference(self):
        key, value = commit_photo(make_field('front', 'photo'), 'door.jpg', 'image/jpeg')
        assert key == 'front'
        assert value == FileReference('door.jpg', 'image/jpeg')

    def test_photo_on_flagged_field_uses_same_name(self):
        d = make_field('hazards', 'text', requiresPhoto=1)
        assert commit_photo(d, 'leak.png', 'image/png')[0] == 'hazards'

    def test_photo_rejects_non_images(self):
        with pytest.raises(ValueError, match="not an image type"):
            commit_photo(make_field('front', 'photo'), 'notes.pdf', 'application/pdf')

    def test_photo_rejected_without_picker(self):
        with pytest.raises(ValueError, match="no photo input"):
            commit_photo(make_field('name'), 'door.jpg', 'image/jpeg')

    def test_comment_targets_comment_key(self):
        d = make_field('site', commentField=1, commentFieldName='site_comment')
        assert commit_comment(d, 'muddy') == ('site_comment', 'muddy')

    def test_comment_without_target_is_skipped(self):
        assert commit_comment(make_field('site', commentField=1), 'muddy') is None


def test_to_iso_timestamp_truncates_to_milliseconds():
    moment = datetime(2025, 6, 1, 0, 0, 0, 999999, tzinfo=timezone.utc)
    assert to_iso_timestamp(moment) == '2025-06-01T00:00:00.999Z'
