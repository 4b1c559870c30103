import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
pytest.importorskip("PyQt5.QtWidgets")

from PyQt5.QtWidgets import QApplication  # noqa: E402

from climb_mate.config import AppConfig  # noqa: E402
from climb_mate.main_window import MainWindow  # noqa: E402
from climb_mate.playback import PlaybackMode  # noqa: E402
from climb_mate.widgets.marker_slider import CONSUMED_COLOR, MARKER_COLOR  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    return QApplication.instance() or QApplication([])


@pytest.fixture
def window(qapp, sample_store):
    win = MainWindow(AppConfig(data_file=sample_store))
    yield win
    win.close()


def test_lists_all_videos_and_selects_first(window):
    assert window.visible_video_ids() == ["clip-001", "clip-002"]
    assert window.video_list.currentRow() == 0
    assert [t.marker_id for t in window.slider.ticks()] == ["m1"]
    assert window.slider.maximum() == 60


def test_filter_by_tag(window):
    window.combo_route.setCurrentText("bouldering")
    window.combo_grade.setCurrentText("V4")
    window.apply_filter()
    assert window.visible_video_ids() == ["clip-002"]


def test_filter_by_date(window):
    window.edit_from.setText("2026-01-10")
    window.apply_filter()
    assert window.visible_video_ids() == ["clip-001"]


def test_bad_date_keeps_current_list(window, monkeypatch):
    shown = []
    monkeypatch.setattr("climb_mate.main_window.QMessageBox.warning", lambda *a: shown.append(a[2]))
    window.edit_to.setText("tomorrow")
    window.apply_filter()
    assert shown == ["Dates must use YYYY-MM-DD."]
    assert window.visible_video_ids() == ["clip-001", "clip-002"]


def test_steps_pause_on_marker_then_resume(window):
    ticks = [window.step() for _ in range(15)]

    assert not any(t.is_paused for t in ticks[:-1])
    assert ticks[-1].is_paused and ticks[-1].marker_id == "m1"
    assert ticks[-1].current_second == 15
    assert window.btn_resume.isEnabled()
    assert not window.btn_play.isEnabled()

    tick = window.resume()
    assert not tick.is_paused
    assert tick.current_second == 16
    assert window.is_playing()
    assert window.slider.ticks()[0].color_hex == CONSUMED_COLOR

    window.pause()
    assert not window.is_playing()


def test_linear_mode_never_pauses(window):
    window.combo_mode.setCurrentIndex(window.combo_mode.findData(PlaybackMode.LINEAR.value))
    ticks = [window.step() for _ in range(20)]
    assert not any(t.is_paused for t in ticks)
    assert ticks[-1].current_second == 20


def test_changing_mode_resets_consumed_markers(window):
    for _ in range(15):
        window.step()
    window.resume()
    window.combo_mode.setCurrentIndex(window.combo_mode.findData(PlaybackMode.LINEAR.value))
    window.combo_mode.setCurrentIndex(window.combo_mode.findData(PlaybackMode.PAUSE_ON_MARKER.value))
    assert window.slider.ticks()[0].color_hex == MARKER_COLOR
    assert window.slider.value() == 0


def test_step_stops_at_end(window):
    window.video_list.setCurrentRow(1)
    for _ in range(60):
        window.step()
    window.play()
    assert window.step() is None
    assert not window.is_playing()


def test_load_failure_shows_empty_list(qapp, tmp_path, monkeypatch):
    shown = []
    monkeypatch.setattr("climb_mate.main_window.QMessageBox.warning", lambda *a: shown.append(a[1]))
    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    win = MainWindow(AppConfig(data_file=str(bad)))
    try:
        assert shown == ["Load failed"]
        assert win.visible_video_ids() == []
        assert win.step() is None
    finally:
        win.close()
