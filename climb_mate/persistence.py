# climb_mate/persistence.py
from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from loguru import logger

from .domain import (
    ContainerFormat,
    NoteMarker,
    PlatformProfile,
    RouteType,
    VideoAsset,
    VideoFilterQuery,
    VideoTag,
    WINDOWS_PROFILE,
    make_tag,
)
from .errors import InvalidGradeForRouteType, InvalidRecord, RecordNotFound, StoreFormatError
from .manager import VideoManager


DEFAULT_STORE_FILENAME = "videos.json"


# -----------------------------
# Atomic file helpers
# -----------------------------

def _atomic_write_text(path: str, text: str, encoding: str = "utf-8") -> None:
    d = os.path.dirname(os.path.abspath(path))
    os.makedirs(d, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=".tmp_", dir=d)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    finally:
        try:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
        except OSError:
            pass


def _atomic_write_json(path: str, payload) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False, sort_keys=True)
    _atomic_write_text(path, text + "\n")


def _read_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


# -----------------------------
# Timestamps (ISO-8601, UTC)
# -----------------------------

def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(raw: str) -> datetime:
    s = str(raw).strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    value = datetime.fromisoformat(s)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# -----------------------------
# Stored record
# -----------------------------

@dataclass(frozen=True)
class VideoRecord:
    """
    The persisted form of a video asset.

    route_type/grade are kept raw here; the grade is only checked when the
    record is turned into an asset (to_asset), so a bad grade is reported
    instead of being dropped.
    """
    id: str
    created_at: datetime
    container_format: ContainerFormat
    route_type: RouteType
    grade: str
    markers: Tuple[NoteMarker, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "markers", tuple(self.markers or ()))

    def to_asset(self) -> VideoAsset:
        try:
            tag = make_tag(self.route_type, self.grade)
        except InvalidGradeForRouteType as e:
            raise InvalidRecord(self.id, str(e)) from e
        return VideoAsset(
            id=self.id,
            created_at=self.created_at,
            container_format=self.container_format,
            tags=frozenset({tag}),
            markers=self.markers,
        )

    @staticmethod
    def from_asset(asset: VideoAsset) -> "VideoRecord":
        if len(asset.tags) != 1:
            raise InvalidRecord(asset.id, f"expected exactly one tag, found {len(asset.tags)}")
        (tag,) = tuple(asset.tags)
        return VideoRecord(
            id=asset.id,
            created_at=asset.created_at,
            container_format=asset.container_format,
            route_type=tag.route_type,
            grade=tag.grade,
            markers=asset.markers,
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "createdAt": format_timestamp(self.created_at),
            "containerFormat": self.container_format.value,
            "routeType": self.route_type.value,
            "grade": self.grade,
            "markers": [m.to_dict() for m in self.markers],
        }

    @staticmethod
    def from_dict(d: Dict) -> "VideoRecord":
        return VideoRecord(
            id=str(d["id"]),
            created_at=parse_timestamp(d["createdAt"]),
            container_format=ContainerFormat(d["containerFormat"]),
            route_type=RouteType(d["routeType"]),
            grade=str(d["grade"]),
            markers=tuple(NoteMarker.from_dict(m) for m in (d.get("markers") or [])),
        )


# -----------------------------
# Load / save
# -----------------------------

def load_records(path: str) -> List[VideoRecord]:
    """
    Loads the record list from a JSON file.

    A missing file is an empty library. Anything unreadable raises
    StoreFormatError.
    """
    if not os.path.exists(path):
        logger.debug("Store {} does not exist; starting empty", path)
        return []
    try:
        data = _read_json(path)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise StoreFormatError(f"Store file is not valid JSON: {path}", details=str(e)) from e
    except OSError as e:
        raise StoreFormatError(f"Store file cannot be read: {path}", details=str(e)) from e

    if not isinstance(data, list):
        raise StoreFormatError(f"Store file must contain a JSON array: {path}")

    out: List[VideoRecord] = []
    for i, raw in enumerate(data):
        try:
            out.append(VideoRecord.from_dict(raw))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StoreFormatError(f"Malformed record #{i} in {path}", details=repr(e)) from e
    logger.debug("Loaded {} records from {}", len(out), path)
    return out


def save_records(records: Iterable[VideoRecord], path: str) -> None:
    payload = [r.to_dict() for r in records]
    _atomic_write_json(path, payload)
    logger.debug("Saved {} records to {}", len(payload), path)


# -----------------------------
# Record service
# -----------------------------

def list_assets(records: Iterable[VideoRecord]) -> List[VideoAsset]:
    """Converts every record; the first invalid one fails the whole list."""
    return [r.to_asset() for r in records]


def filter_assets(
    records: Iterable[VideoRecord],
    route_type: Optional[RouteType] = None,
    grade: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    profile: PlatformProfile = WINDOWS_PROFILE,
) -> List[VideoAsset]:
    """
    Compatibility filter, then tag/date filter.

    A tag is only used when both route_type and grade are given.
    """
    tags = set()
    if route_type is not None and grade is not None:
        tags.add(VideoTag(route_type=route_type, grade=grade))
    query = VideoFilterQuery(tags=frozenset(tags), start_date=start_date, end_date=end_date)
    return VideoManager(profile).filtered_videos(list_assets(records), query)


def find_record(records: Iterable[VideoRecord], video_id: str) -> VideoRecord:
    for r in records:
        if r.id == video_id:
            return r
    raise RecordNotFound(video_id)


def add_marker_to_record(
    records: Iterable[VideoRecord],
    video_id: str,
    marker: NoteMarker,
    manager: Optional[VideoManager] = None,
) -> List[VideoRecord]:
    """Returns a new record list with marker appended to the named video."""
    records = list(records)
    target = find_record(records, video_id)
    updated = (manager or VideoManager()).add_marker(marker, target.to_asset())
    out: List[VideoRecord] = []
    for r in records:
        # identity, not id: a duplicate id keeps its own markers
        out.append(replace(r, markers=updated.markers) if r is target else r)
    return out


def sample_records(now: Optional[datetime] = None) -> List[VideoRecord]:
    if now is None:
        now = datetime.now(timezone.utc)
    return [
        VideoRecord(
            id="clip-001",
            created_at=now,
            container_format=ContainerFormat.MP4,
            route_type=RouteType.SPORT,
            grade="5.10a",
            markers=(NoteMarker(id="m1", at_second=15, text="crux clip"),),
        ),
        VideoRecord(
            id="clip-002",
            created_at=now - timedelta(days=1),
            container_format=ContainerFormat.MOV,
            route_type=RouteType.BOULDERING,
            grade="V4",
        ),
    ]


def parse_day(raw: str) -> datetime:
    """YYYY-MM-DD -> 00:00 UTC of that day. Raises ValueError."""
    return datetime.strptime(str(raw).strip(), "%Y-%m-%d").replace(tzinfo=timezone.utc)
