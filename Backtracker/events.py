"""
Search events: one record per decision taken by the backtracking engine.

The event log is a flat, append-only list of these records. Each kind is
its own frozen dataclass so kind-specific fields are required rather than
optional (a BacktrackRow always knows which depth ran out of candidates, a
Try never does).
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Type, Union

from .board import Position
from .errors import MalformedEventError


class EventKind(str, Enum):
    TRY = "try"
    PLACE = "place"
    REJECT = "reject"
    BACKTRACK = "backtrack"
    BACKTRACK_ROW = "backtrack_row"


@dataclass(frozen=True)
class _EventBase:
    row: int
    col: int
    depth: int

    kind: ClassVar[EventKind]

    @property
    def position(self) -> Position:
        return (self.row, self.col)


@dataclass(frozen=True)
class Try(_EventBase):
    """A candidate value is checked against the constraints"""
    value: Optional[int]
    is_valid: bool

    kind: ClassVar[EventKind] = EventKind.TRY
    is_backtracking: ClassVar[bool] = False


@dataclass(frozen=True)
class Place(_EventBase):
    """A legal candidate is written to the board"""
    value: Optional[int]

    kind: ClassVar[EventKind] = EventKind.PLACE
    is_valid: ClassVar[bool] = True
    is_backtracking: ClassVar[bool] = False


@dataclass(frozen=True)
class Reject(_EventBase):
    """A candidate failed its check and is skipped"""
    value: Optional[int]

    kind: ClassVar[EventKind] = EventKind.REJECT
    is_valid: ClassVar[bool] = False
    is_backtracking: ClassVar[bool] = False


@dataclass(frozen=True)
class Backtrack(_EventBase):
    """A placement is undone after its subtree failed; ``value`` is the value removed"""
    value: Optional[int]

    kind: ClassVar[EventKind] = EventKind.BACKTRACK
    is_valid: ClassVar[bool] = False
    is_backtracking: ClassVar[bool] = True

    @property
    def backtracked_depth(self) -> int:
        return self.depth


@dataclass(frozen=True)
class BacktrackRow(_EventBase):
    """
    Every candidate at ``exhausted_depth`` failed. Emitted at the caller's
    depth so the caller continues with its own next candidate.
    """
    exhausted_depth: int

    kind: ClassVar[EventKind] = EventKind.BACKTRACK_ROW
    value: ClassVar[Optional[int]] = None
    is_valid: ClassVar[bool] = False
    is_backtracking: ClassVar[bool] = True

    @property
    def backtracked_depth(self) -> int:
        return self.exhausted_depth


Event = Union[Try, Place, Reject, Backtrack, BacktrackRow]

EVENT_TYPES: Dict[EventKind, Type[_EventBase]] = {
    EventKind.TRY: Try,
    EventKind.PLACE: Place,
    EventKind.REJECT: Reject,
    EventKind.BACKTRACK: Backtrack,
    EventKind.BACKTRACK_ROW: BacktrackRow,
}


# -----------------------------------------------------------------------------
# Serialization (tagged records)
# -----------------------------------------------------------------------------
def event_to_dict(event: Event) -> Dict[str, Any]:
    record: Dict[str, Any] = {"kind": event.kind.value}
    for f in fields(event):
        record[f.name] = getattr(event, f.name)
    return record


def event_from_dict(record: Dict[str, Any]) -> Event:
    try:
        kind = EventKind(record["kind"])
    except (KeyError, ValueError):
        raise MalformedEventError(f"Event record has no valid kind: {record!r}") from None

    cls = EVENT_TYPES[kind]
    names = [f.name for f in fields(cls)]
    missing = [n for n in names if n not in record]
    if missing:
        raise MalformedEventError(f"{kind.value} event is missing {missing}: {record!r}")

    unexpected = set(record) - set(names) - {"kind"}
    if unexpected:
        raise MalformedEventError(f"{kind.value} event has unexpected fields {sorted(unexpected)}")

    return cls(**{n: record[n] for n in names})


def events_to_dicts(events: List[Event]) -> List[Dict[str, Any]]:
    return [event_to_dict(e) for e in events]


def events_from_dicts(records: List[Dict[str, Any]]) -> List[Event]:
    return [event_from_dict(r) for r in records]


def describe_event(event: Event) -> str:
    """One-line human readable description, used by playback printing"""
    where = f"({event.row},{event.col})"
    if isinstance(event, Try):
        verdict = "ok" if event.is_valid else "conflict"
        return f"[d{event.depth}] try {event.value} at {where}: {verdict}"
    if isinstance(event, Place):
        return f"[d{event.depth}] place {event.value} at {where}"
    if isinstance(event, Reject):
        return f"[d{event.depth}] reject {event.value} at {where}"
    if isinstance(event, Backtrack):
        return f"[d{event.depth}] backtrack {event.value} from {where}"
    return f"[d{event.depth}] depth {event.exhausted_depth} exhausted, back to caller"
