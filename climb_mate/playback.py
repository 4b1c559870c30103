# climb_mate/playback.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional, Set

from loguru import logger

from .timeline import NoteTimeline


class PlaybackMode(str, Enum):
    LINEAR = "linear"
    PAUSE_ON_MARKER = "pause_on_marker"


class PlaybackState(str, Enum):
    PLAYING = "playing"
    PAUSED_AT_MARKER = "paused_at_marker"


@dataclass(frozen=True)
class PlaybackTick:
    current_second: int
    state: PlaybackState
    marker_id: Optional[str] = None

    @property
    def is_paused(self) -> bool:
        return self.state is PlaybackState.PAUSED_AT_MARKER


class PlaybackController:
    """
    Logical playback over one marker timeline.

    The controller only tracks which markers have already been stopped at and
    resumed past ("consumed"). That set lives as long as the controller; build a
    new controller to start over. One owner per instance: there is no locking.

    In PAUSE_ON_MARKER mode, advancing over a range that holds an unconsumed
    marker snaps the position to that marker and reports a pause. LINEAR mode
    never pauses. No operation raises.
    """

    def __init__(self, mode: PlaybackMode, timeline: NoteTimeline):
        self._mode = PlaybackMode(mode)
        self._timeline = timeline
        self._consumed: Set[str] = set()

    @property
    def mode(self) -> PlaybackMode:
        return self._mode

    @property
    def timeline(self) -> NoteTimeline:
        return self._timeline

    @property
    def consumed_marker_ids(self) -> FrozenSet[str]:
        return frozenset(self._consumed)

    def advance(self, start: int, end: int) -> PlaybackTick:
        """Move from start to end (either direction); pause at the first unconsumed marker in between."""
        lo, hi = min(start, end), max(start, end)

        if self._mode is not PlaybackMode.PAUSE_ON_MARKER:
            return PlaybackTick(current_second=end, state=PlaybackState.PLAYING)

        marker = self._timeline.first_marker_in_range(lo, hi, excluding_id=None)
        if marker is None or marker.id in self._consumed:
            return PlaybackTick(current_second=end, state=PlaybackState.PLAYING)

        logger.debug("Paused at marker {} ({}s) advancing {}..{}", marker.id, marker.at_second, start, end)
        return PlaybackTick(
            current_second=marker.at_second,
            state=PlaybackState.PAUSED_AT_MARKER,
            marker_id=marker.id,
        )

    def resume(self, after_marker_id: str, start: int, end: int) -> PlaybackTick:
        self._consumed.add(after_marker_id)
        return self.advance(start, end)

    def seek(self, second: int) -> PlaybackTick:
        return PlaybackTick(current_second=max(0, second), state=PlaybackState.PLAYING)
