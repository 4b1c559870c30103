# climb_mate/timeline.py
from __future__ import annotations

from typing import Iterable, Iterator, Optional, Tuple

from .domain import NoteMarker, marker_ids


# -----------------------------
# Time formatting
# -----------------------------

def seconds_to_time_str(sec: int) -> str:
    if sec is None:
        sec = 0
    s = max(0, int(sec))
    m = s // 60
    s = s % 60
    return f"{m:02d}:{s:02d}"


# -----------------------------
# Marker timeline
# -----------------------------

class NoteTimeline:
    """
    Markers of one video, sorted ascending by at_second.

    The sort is stable: markers sharing a second keep their input order.
    Navigation uses strict inequality, so a marker sitting exactly on the
    query second is neither "next" nor "previous".
    """

    __slots__ = ("_markers",)

    def __init__(self, markers: Iterable[NoteMarker] = ()):
        self._markers: Tuple[NoteMarker, ...] = tuple(
            sorted(markers or (), key=lambda m: m.at_second)
        )

    @property
    def markers(self) -> Tuple[NoteMarker, ...]:
        return self._markers

    def __len__(self) -> int:
        return len(self._markers)

    def __iter__(self) -> Iterator[NoteMarker]:
        return iter(self._markers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NoteTimeline):
            return NotImplemented
        return self._markers == other._markers

    def __hash__(self) -> int:
        return hash(self._markers)

    def __repr__(self) -> str:
        return f"NoteTimeline({list(self._markers)!r})"

    def marker_ids(self) -> Tuple[str, ...]:
        return marker_ids(self._markers)

    def next_marker(self, after: int) -> Optional[NoteMarker]:
        for m in self._markers:
            if m.at_second > after:
                return m
        return None

    def previous_marker(self, before: int) -> Optional[NoteMarker]:
        for m in reversed(self._markers):
            if m.at_second < before:
                return m
        return None

    def first_marker_in_range(
        self,
        lo: int,
        hi: int,
        excluding_id: Optional[str] = None,
    ) -> Optional[NoteMarker]:
        """First marker with lo <= at_second <= hi whose id is not excluding_id."""
        for m in self._markers:
            if lo <= m.at_second <= hi and m.id != excluding_id:
                return m
        return None
