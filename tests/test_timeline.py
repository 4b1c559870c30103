import itertools

from climb_mate.domain import NoteMarker
from climb_mate.timeline import NoteTimeline, seconds_to_time_str


def _markers():
    return [
        NoteMarker(id="m2", at_second=30, text="top hold"),
        NoteMarker(id="m1", at_second=10, text="start foot", image_path="a.png"),
        NoteMarker(id="m3", at_second=45, text="dyno"),
    ]


def test_markers_are_sorted_and_navigable():
    timeline = NoteTimeline(_markers())

    assert timeline.marker_ids() == ("m1", "m2", "m3")
    assert timeline.next_marker(after=10).id == "m2"
    assert timeline.previous_marker(before=30).id == "m1"


def test_sorted_for_every_permutation():
    for perm in itertools.permutations(_markers()):
        seconds = [m.at_second for m in NoteTimeline(perm).markers]
        assert seconds == sorted(seconds)


def test_sort_is_stable_for_equal_seconds():
    markers = [
        NoteMarker(id="b", at_second=5),
        NoteMarker(id="a", at_second=5),
        NoteMarker(id="c", at_second=1),
        NoteMarker(id="d", at_second=5),
    ]
    assert NoteTimeline(markers).marker_ids() == ("c", "b", "a", "d")


def test_navigation_is_strict():
    timeline = NoteTimeline([NoteMarker(id="only", at_second=20)])

    assert timeline.next_marker(after=20) is None
    assert timeline.previous_marker(before=20) is None
    assert timeline.next_marker(after=19).id == "only"
    assert timeline.previous_marker(before=21).id == "only"


def test_navigation_past_the_ends():
    timeline = NoteTimeline(_markers())
    assert timeline.next_marker(after=45) is None
    assert timeline.previous_marker(before=10) is None
    assert NoteTimeline().next_marker(after=0) is None


def test_first_marker_in_range_is_inclusive():
    timeline = NoteTimeline(_markers())

    assert timeline.first_marker_in_range(10, 10).id == "m1"
    assert timeline.first_marker_in_range(11, 30).id == "m2"
    assert timeline.first_marker_in_range(46, 100) is None
    assert timeline.first_marker_in_range(0, 100).id == "m1"


def test_first_marker_in_range_can_exclude_one_id():
    timeline = NoteTimeline(_markers())

    assert timeline.first_marker_in_range(0, 100, excluding_id="m1").id == "m2"
    assert timeline.first_marker_in_range(10, 10, excluding_id="m1") is None


def test_timeline_value_semantics():
    assert NoteTimeline(_markers()) == NoteTimeline(list(reversed(_markers())))
    assert len(NoteTimeline(_markers())) == 3


def test_seconds_to_time_str():
    assert seconds_to_time_str(0) == "00:00"
    assert seconds_to_time_str(75) == "01:15"
    assert seconds_to_time_str(-3) == "00:00"
