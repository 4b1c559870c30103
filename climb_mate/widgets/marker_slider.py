# climb_mate/widgets/marker_slider.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from PyQt5.QtCore import Qt, QRect
from PyQt5.QtGui import QColor, QPainter
from PyQt5.QtWidgets import QSlider, QStyle, QStyleOptionSlider

from ..domain import NoteMarker


MARKER_COLOR = "#E6194B"
CONSUMED_COLOR = "#808080"


@dataclass
class MarkerTick:
    """A marker drawn on the slider groove, in slider value units (seconds)."""
    marker_id: str
    second: int
    color_hex: str = MARKER_COLOR


class MarkerSlider(QSlider):
    """
    A horizontal QSlider that paints a tick for each note marker.

    Consumed markers (already resumed past) are drawn gray.
    Ignores the mouse wheel so the time cursor only moves on purpose.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(Qt.Horizontal, *args, **kwargs)
        self._ticks: List[MarkerTick] = []
        self._highlight_id: Optional[str] = None

    # -------------
    # Marker API
    # -------------

    def set_markers(self, markers: Iterable[NoteMarker], consumed: Iterable[str] = ()) -> None:
        consumed_ids = set(consumed or ())
        self._ticks = [
            MarkerTick(
                marker_id=m.id,
                second=m.at_second,
                color_hex=CONSUMED_COLOR if m.id in consumed_ids else MARKER_COLOR,
            )
            for m in markers
        ]
        self.update()

    def ticks(self) -> List[MarkerTick]:
        return list(self._ticks)

    def set_highlight(self, marker_id: Optional[str]) -> None:
        self._highlight_id = marker_id
        self.update()

    def wheelEvent(self, event):
        event.ignore()

    # -------------
    # Painting
    # -------------

    def _value_to_pixel(self, value: int, groove: QRect) -> int:
        if self.maximum() <= self.minimum():
            return groove.x()
        v = max(self.minimum(), min(int(value), self.maximum()))
        span = max(1, groove.width())
        return groove.x() + QStyle.sliderPositionFromValue(self.minimum(), self.maximum(), v, span)

    def paintEvent(self, event):
        super().paintEvent(event)
        if not self._ticks or self.maximum() <= self.minimum():
            return

        opt = QStyleOptionSlider()
        self.initStyleOption(opt)
        groove = self.style().subControlRect(QStyle.CC_Slider, opt, QStyle.SC_SliderGroove, self)
        if groove.isNull():
            return

        painter = QPainter(self)
        h = max(8, groove.height() + 6)
        y = groove.center().y() - (h // 2)
        for tick in self._ticks:
            x = self._value_to_pixel(tick.second, groove)
            width = 5 if tick.marker_id == self._highlight_id else 3
            painter.fillRect(QRect(x - width // 2, y, width, h), QColor(tick.color_hex))
        painter.end()
