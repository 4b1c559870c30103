# climb_mate/main_window.py
from __future__ import annotations

from typing import List, Optional

from loguru import logger
from PyQt5.QtCore import Qt, QTimer
from PyQt5.QtWidgets import (
    QComboBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from .config import AppConfig
from .domain import RouteType, VideoAsset, VideoFilterQuery, VideoTag
from .errors import ClimbMateError
from .manager import VideoManager
from .persistence import list_assets, load_records, parse_day
from .playback import PlaybackController, PlaybackMode, PlaybackTick
from .timeline import seconds_to_time_str
from .widgets.marker_slider import MarkerSlider


ANY_ROUTE = "(any)"
ANY_GRADE = "(any)"

# Logical length shown past the last marker (there is no real media duration).
TAIL_SECONDS = 30
MIN_DURATION_SECONDS = 60


class MainWindow(QMainWindow):
    def __init__(self, cfg: AppConfig):
        super().__init__()
        self.setWindowTitle("ClimbMate")
        self.resize(1100, 640)

        self.cfg = cfg
        self.manager = VideoManager(cfg.profile())

        self._assets: List[VideoAsset] = []
        self._visible: List[VideoAsset] = []

        # Playback session for the selected video
        self._video: Optional[VideoAsset] = None
        self._controller: Optional[PlaybackController] = None
        self._position: int = 0
        self._paused_marker_id: Optional[str] = None

        # Slider update guard
        self._ignore_slider_updates = False

        self._timer = QTimer(self)
        self._timer.setInterval(1000)
        self._timer.timeout.connect(self.step)

        self._build_ui()
        self.load_library()

    # ---------------- UI ----------------

    def _build_ui(self):
        central = QWidget()
        self.setCentralWidget(central)

        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(6, 6, 6, 6)
        main_layout.setSpacing(6)

        # ===== Top: data file =====
        file_box = QGroupBox("Data File")
        file_lay = QHBoxLayout(file_box)
        file_lay.setContentsMargins(6, 6, 6, 6)
        self.file_label = QLabel(self.cfg.data_file)
        self.file_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        self.btn_reload = QPushButton("Reload")
        self.btn_reload.clicked.connect(self.load_library)
        file_lay.addWidget(self.file_label, stretch=1)
        file_lay.addWidget(self.btn_reload)
        main_layout.addWidget(file_box)

        # ===== Filter row =====
        filter_box = QGroupBox("Filter")
        filter_lay = QHBoxLayout(filter_box)
        filter_lay.setContentsMargins(6, 6, 6, 6)

        self.combo_route = QComboBox()
        self.combo_route.addItems([ANY_ROUTE] + [r.value for r in RouteType])
        self.combo_route.currentTextChanged.connect(self._on_route_changed)
        self.combo_grade = QComboBox()
        self.combo_grade.addItem(ANY_GRADE)

        self.edit_from = QLineEdit()
        self.edit_from.setPlaceholderText("YYYY-MM-DD")
        self.edit_to = QLineEdit()
        self.edit_to.setPlaceholderText("YYYY-MM-DD")

        self.btn_apply = QPushButton("Apply")
        self.btn_apply.clicked.connect(self.apply_filter)

        filter_lay.addWidget(QLabel("Route:"))
        filter_lay.addWidget(self.combo_route)
        filter_lay.addWidget(QLabel("Grade:"))
        filter_lay.addWidget(self.combo_grade)
        filter_lay.addSpacing(12)
        filter_lay.addWidget(QLabel("From:"))
        filter_lay.addWidget(self.edit_from)
        filter_lay.addWidget(QLabel("To:"))
        filter_lay.addWidget(self.edit_to)
        filter_lay.addStretch()
        filter_lay.addWidget(self.btn_apply)
        main_layout.addWidget(filter_box)

        # ===== Middle: library (left) + playback (right) =====
        split = QSplitter(Qt.Horizontal)
        main_layout.addWidget(split, stretch=1)

        self.video_list = QListWidget()
        self.video_list.currentRowChanged.connect(self._on_video_selected)
        split.addWidget(self.video_list)

        play_panel = QWidget()
        play_lay = QVBoxLayout(play_panel)
        play_lay.setContentsMargins(0, 0, 0, 0)

        mode_bar = QHBoxLayout()
        self.combo_mode = QComboBox()
        for mode in PlaybackMode:
            self.combo_mode.addItem(mode.value, mode.value)
        self.combo_mode.setCurrentIndex(self.combo_mode.findData(PlaybackMode(self.cfg.playback_mode).value))
        self.combo_mode.currentIndexChanged.connect(self._on_mode_changed)
        mode_bar.addWidget(QLabel("Mode:"))
        mode_bar.addWidget(self.combo_mode)
        mode_bar.addStretch()
        play_lay.addLayout(mode_bar)

        self.slider = MarkerSlider()
        self.slider.setRange(0, MIN_DURATION_SECONDS)
        self.slider.sliderMoved.connect(self._on_slider_moved)
        play_lay.addWidget(self.slider)

        btn_bar = QHBoxLayout()
        self.btn_play = QPushButton("Play")
        self.btn_pause = QPushButton("Pause")
        self.btn_resume = QPushButton("Resume")
        self.btn_play.clicked.connect(self.play)
        self.btn_pause.clicked.connect(self.pause)
        self.btn_resume.clicked.connect(self.resume)
        self.time_label = QLabel("00:00")
        btn_bar.addWidget(self.btn_play)
        btn_bar.addWidget(self.btn_pause)
        btn_bar.addWidget(self.btn_resume)
        btn_bar.addSpacing(12)
        btn_bar.addWidget(self.time_label)
        btn_bar.addStretch()
        play_lay.addLayout(btn_bar)

        self.status_label = QLabel("Select a video.")
        self.status_label.setWordWrap(True)
        play_lay.addWidget(self.status_label)
        play_lay.addStretch()

        split.addWidget(play_panel)
        split.setStretchFactor(1, 2)

        self._update_enabled_state()

    # ---------------- Library ----------------

    def load_library(self) -> None:
        try:
            self._assets = list_assets(load_records(self.cfg.data_file))
        except ClimbMateError as e:
            logger.warning("Failed loading {}: {}", self.cfg.data_file, e)
            QMessageBox.warning(self, "Load failed", str(e))
            self._assets = []
        self.apply_filter()

    def _on_route_changed(self, route: str) -> None:
        self.combo_grade.clear()
        self.combo_grade.addItem(ANY_GRADE)
        if route and route != ANY_ROUTE:
            self.combo_grade.addItems(list(RouteType(route).grade_options))

    def _build_query(self) -> VideoFilterQuery:
        tags = set()
        route = self.combo_route.currentText()
        grade = self.combo_grade.currentText()
        if route != ANY_ROUTE and grade and grade != ANY_GRADE:
            tags.add(VideoTag(route_type=RouteType(route), grade=grade))

        start = end = None
        try:
            if self.edit_from.text().strip():
                start = parse_day(self.edit_from.text())
            if self.edit_to.text().strip():
                end = parse_day(self.edit_to.text())
        except ValueError:
            raise ClimbMateError("Dates must use YYYY-MM-DD.")
        return VideoFilterQuery(tags=frozenset(tags), start_date=start, end_date=end)

    def apply_filter(self) -> None:
        try:
            query = self._build_query()
        except ClimbMateError as e:
            QMessageBox.warning(self, "Invalid filter", str(e))
            return

        self._visible = self.manager.filtered_videos(self._assets, query)
        self.video_list.blockSignals(True)
        self.video_list.clear()
        for asset in self._visible:
            tag = next(iter(asset.tags), None)
            label = f"{asset.id} | {asset.container_format.value}"
            if tag:
                label += f" | {tag.route_type.value} {tag.grade}"
            it = QListWidgetItem(label)
            it.setData(Qt.UserRole, asset.id)
            self.video_list.addItem(it)
        self.video_list.blockSignals(False)

        if self._visible:
            self.video_list.setCurrentRow(0)
            self._on_video_selected(0)
        else:
            self._open_video(None)

    def visible_video_ids(self) -> List[str]:
        return [v.id for v in self._visible]

    def _on_video_selected(self, row: int) -> None:
        if 0 <= row < len(self._visible):
            self._open_video(self._visible[row])
        else:
            self._open_video(None)

    # ---------------- Playback ----------------

    def _current_mode(self) -> PlaybackMode:
        return PlaybackMode(self.combo_mode.currentData() or self.cfg.playback_mode)

    def _open_video(self, video: Optional[VideoAsset]) -> None:
        self._timer.stop()
        self._video = video
        self._paused_marker_id = None
        self._position = 0
        if video is None:
            self._controller = None
            self.slider.set_markers([])
            self.status_label.setText("Select a video.")
        else:
            self._controller = self.manager.make_playback_controller(video, self._current_mode())
            markers = self._controller.timeline.markers
            last = markers[-1].at_second if markers else 0
            self._set_slider_range(max(MIN_DURATION_SECONDS, last + TAIL_SECONDS))
            self._refresh_markers()
            self.status_label.setText(f"{video.id}: {len(markers)} markers")
        self._show_position()
        self._update_enabled_state()

    def _on_mode_changed(self, _index: int) -> None:
        # A new controller starts with no consumed markers.
        self._open_video(self._video)

    def play(self) -> None:
        if self._controller is None or self._paused_marker_id:
            return
        self._timer.start()
        self._update_enabled_state()

    def pause(self) -> None:
        self._timer.stop()
        self._update_enabled_state()

    def is_playing(self) -> bool:
        return self._timer.isActive()

    def step(self) -> Optional[PlaybackTick]:
        """One timer tick: advance the logical position by one second."""
        if self._controller is None:
            return None
        if self._position >= self.slider.maximum():
            self.pause()
            return None
        tick = self._controller.advance(self._position, self._position + 1)
        self._apply_tick(tick)
        return tick

    def resume(self) -> Optional[PlaybackTick]:
        if self._controller is None or not self._paused_marker_id:
            return None
        tick = self._controller.resume(self._paused_marker_id, self._position, self._position + 1)
        self._paused_marker_id = None
        self._apply_tick(tick)
        self._refresh_markers()
        if not tick.is_paused:
            self.play()
        return tick

    def _on_slider_moved(self, value: int) -> None:
        if self._ignore_slider_updates or self._controller is None:
            return
        self._paused_marker_id = None
        self._apply_tick(self._controller.seek(int(value)))

    def _apply_tick(self, tick: PlaybackTick) -> None:
        self._position = tick.current_second
        if tick.is_paused:
            self._timer.stop()
            self._paused_marker_id = tick.marker_id
            marker = next((m for m in self._controller.timeline if m.id == tick.marker_id), None)
            text = marker.text if marker else ""
            self.status_label.setText(f"Paused at {tick.marker_id} ({seconds_to_time_str(tick.current_second)}): {text}")
            self.slider.set_highlight(tick.marker_id)
        else:
            self.slider.set_highlight(None)
            if self._video is not None:
                self.status_label.setText(f"{self._video.id}: {tick.state.value}")
        self._show_position()
        self._update_enabled_state()

    def _refresh_markers(self) -> None:
        if self._controller is None:
            return
        self.slider.set_markers(self._controller.timeline.markers, self._controller.consumed_marker_ids)

    def _show_position(self) -> None:
        self._ignore_slider_updates = True
        try:
            self.slider.setValue(max(0, int(self._position)))
        finally:
            self._ignore_slider_updates = False
        self.time_label.setText(
            f"{seconds_to_time_str(self._position)} / {seconds_to_time_str(self.slider.maximum())}"
        )

    def _set_slider_range(self, duration: int) -> None:
        self._ignore_slider_updates = True
        try:
            self.slider.setRange(0, max(0, int(duration)))
        finally:
            self._ignore_slider_updates = False

    def _update_enabled_state(self) -> None:
        has_video = self._controller is not None
        paused_at_marker = bool(self._paused_marker_id)
        self.btn_play.setEnabled(has_video and not self.is_playing() and not paused_at_marker)
        self.btn_pause.setEnabled(has_video and self.is_playing())
        self.btn_resume.setEnabled(has_video and paused_at_marker)
        self.slider.setEnabled(has_video)

    def closeEvent(self, event):
        self._timer.stop()
        super().closeEvent(event)
