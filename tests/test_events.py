import dataclasses

import pytest

from Backtracker.errors import MalformedEventError
from Backtracker.events import (
    Backtrack,
    BacktrackRow,
    EventKind,
    Place,
    Reject,
    Try,
    describe_event,
    event_from_dict,
    event_to_dict,
    events_from_dicts,
    events_to_dicts,
)


def test_flags_per_kind():
    assert Try(0, 0, 0, 1, True).is_valid
    assert not Try(0, 0, 0, 1, False).is_valid
    assert Place(0, 0, 0, 1).is_valid
    assert not Reject(0, 0, 0, 1).is_valid
    assert Backtrack(0, 0, 0, 1).is_backtracking
    assert BacktrackRow(0, 3, 0, 1).is_backtracking
    assert not Place(0, 0, 0, 1).is_backtracking


def test_backtrack_row_has_no_value():
    event = BacktrackRow(2, 3, 1, 2)
    assert event.value is None
    assert event.backtracked_depth == 2
    assert Backtrack(1, 2, 1, 1).backtracked_depth == 1


def test_events_are_frozen():
    event = Place(0, 0, 0, 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        event.value = 2


def test_tagged_records():
    assert event_to_dict(Try(0, 1, 2, 5, True)) == {
        'kind': 'try', 'row': 0, 'col': 1, 'depth': 2, 'value': 5, 'is_valid': True,
    }
    assert event_to_dict(BacktrackRow(2, 3, 1, 2)) == {
        'kind': 'backtrack_row', 'row': 2, 'col': 3, 'depth': 1, 'exhausted_depth': 2,
    }


def test_records_decode_to_equal_events():
    events = [Try(0, 0, 0, 1, False), Reject(0, 0, 0, 1), Try(0, 1, 0, 1, True),
              Place(0, 1, 0, 1), BacktrackRow(1, 3, 0, 1), Backtrack(0, 1, 0, 1)]
    assert events_from_dicts(events_to_dicts(events)) == events


def test_decode_errors():
    with pytest.raises(MalformedEventError):
        event_from_dict({'row': 0, 'col': 0, 'depth': 0})
    with pytest.raises(MalformedEventError):
        event_from_dict({'kind': 'jump', 'row': 0, 'col': 0, 'depth': 0})
    with pytest.raises(MalformedEventError):
        event_from_dict({'kind': 'try', 'row': 0, 'col': 0, 'depth': 0, 'value': 1})
    with pytest.raises(MalformedEventError):
        event_from_dict({'kind': 'reject', 'row': 0, 'col': 0, 'depth': 0, 'value': 1,
                         'exhausted_depth': 1})


def test_kind_is_class_level():
    assert Place(0, 0, 0, 1).kind == EventKind.PLACE
    assert 'kind' not in [f.name for f in dataclasses.fields(Place)]


def test_describe_event():
    assert describe_event(Place(1, 2, 1, 1)) == "[d1] place 1 at (1,2)"
    assert "conflict" in describe_event(Try(1, 0, 1, 1, False))
    assert "exhausted" in describe_event(BacktrackRow(2, 3, 1, 2))
