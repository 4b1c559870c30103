import pytest

from climb_mate.domain import NoteMarker
from climb_mate.playback import PlaybackController, PlaybackMode, PlaybackState, PlaybackTick
from climb_mate.timeline import NoteTimeline


def _single_marker_timeline():
    return NoteTimeline([NoteMarker(id="m1", at_second=15, text="crux")])


def _two_marker_timeline():
    return NoteTimeline([
        NoteMarker(id="m2", at_second=18, text="clip"),
        NoteMarker(id="m1", at_second=15, text="crux"),
    ])


def test_pause_on_marker_stops_until_resumed():
    controller = PlaybackController(PlaybackMode.PAUSE_ON_MARKER, _single_marker_timeline())

    tick = controller.advance(12, 20)
    assert tick == PlaybackTick(current_second=15, state=PlaybackState.PAUSED_AT_MARKER, marker_id="m1")
    assert tick.is_paused

    resumed = controller.resume("m1", 15, 20)
    assert resumed == PlaybackTick(current_second=20, state=PlaybackState.PLAYING, marker_id=None)


def test_advance_without_marker_in_range_plays_to_end():
    controller = PlaybackController(PlaybackMode.PAUSE_ON_MARKER, _single_marker_timeline())
    assert controller.advance(0, 14) == PlaybackTick(14, PlaybackState.PLAYING)
    assert controller.advance(16, 40) == PlaybackTick(40, PlaybackState.PLAYING)


def test_range_is_inclusive_and_order_independent():
    controller = PlaybackController(PlaybackMode.PAUSE_ON_MARKER, _single_marker_timeline())

    backwards = controller.advance(20, 12)
    assert backwards.state is PlaybackState.PAUSED_AT_MARKER
    assert backwards.current_second == 15

    assert controller.advance(15, 15).marker_id == "m1"
    assert controller.advance(10, 15).marker_id == "m1"


def test_linear_mode_never_pauses():
    controller = PlaybackController(PlaybackMode.LINEAR, _two_marker_timeline())
    for start, end in [(0, 100), (15, 15), (20, 10), (18, 18)]:
        tick = controller.advance(start, end)
        assert tick.state is PlaybackState.PLAYING
        assert tick.current_second == end
        assert tick.marker_id is None


def test_consumed_marker_does_not_pause_again():
    controller = PlaybackController(PlaybackMode.PAUSE_ON_MARKER, _single_marker_timeline())
    controller.resume("m1", 15, 16)

    for _ in range(2):
        assert controller.advance(12, 20).state is PlaybackState.PLAYING


def test_consumed_first_marker_shadows_later_one_in_same_range():
    controller = PlaybackController(PlaybackMode.PAUSE_ON_MARKER, _two_marker_timeline())

    first = controller.advance(10, 25)
    assert first.marker_id == "m1"

    # The range query only looks at the first marker in range; once that one
    # is consumed the range plays through even though m2 sits inside it.
    through = controller.resume("m1", 10, 25)
    assert through.state is PlaybackState.PLAYING

    second = controller.advance(16, 25)
    assert second == PlaybackTick(18, PlaybackState.PAUSED_AT_MARKER, "m2")


def test_resume_is_idempotent():
    controller = PlaybackController(PlaybackMode.PAUSE_ON_MARKER, _single_marker_timeline())
    controller.resume("m1", 15, 16)
    controller.resume("m1", 15, 16)
    assert controller.consumed_marker_ids == frozenset({"m1"})


def test_resume_with_unknown_id_still_advances():
    controller = PlaybackController(PlaybackMode.PAUSE_ON_MARKER, _single_marker_timeline())
    tick = controller.resume("nope", 12, 20)
    assert tick.marker_id == "m1"


@pytest.mark.parametrize("mode", list(PlaybackMode))
def test_seek_clamps_and_always_plays(mode):
    controller = PlaybackController(mode, _single_marker_timeline())
    assert controller.seek(-5) == PlaybackTick(0, PlaybackState.PLAYING, None)
    assert controller.seek(100) == PlaybackTick(100, PlaybackState.PLAYING, None)
    assert controller.seek(15) == PlaybackTick(15, PlaybackState.PLAYING, None)


def test_seek_does_not_touch_consumed_set():
    controller = PlaybackController(PlaybackMode.PAUSE_ON_MARKER, _single_marker_timeline())
    controller.resume("m1", 15, 16)
    controller.seek(0)
    assert controller.consumed_marker_ids == frozenset({"m1"})
    assert controller.advance(0, 20).state is PlaybackState.PLAYING


def test_consumed_set_is_per_controller():
    timeline = _single_marker_timeline()
    first = PlaybackController(PlaybackMode.PAUSE_ON_MARKER, timeline)
    first.resume("m1", 15, 16)

    second = PlaybackController(PlaybackMode.PAUSE_ON_MARKER, timeline)
    assert second.advance(12, 20).state is PlaybackState.PAUSED_AT_MARKER


def test_empty_timeline_plays():
    controller = PlaybackController(PlaybackMode.PAUSE_ON_MARKER, NoteTimeline())
    assert controller.advance(0, 10) == PlaybackTick(10, PlaybackState.PLAYING)


def test_different_unconsumed_marker_first_in_range_pauses():
    controller = PlaybackController(PlaybackMode.PAUSE_ON_MARKER, _two_marker_timeline())
    controller.resume("m2", 0, 1)

    tick = controller.advance(10, 25)
    assert tick == PlaybackTick(15, PlaybackState.PAUSED_AT_MARKER, "m1")
