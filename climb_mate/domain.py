# climb_mate/domain.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from .errors import InvalidGradeForRouteType


# -----------------------------
# Route types / grades
# -----------------------------

SPORT_GRADES: Tuple[str, ...] = ("5.8", "5.9") + tuple(
    f"5.{number}{letter}" for number in range(10, 15) for letter in "abcd"
)
BOULDERING_GRADES: Tuple[str, ...] = tuple(f"V{n}" for n in range(0, 17))


class RouteType(str, Enum):
    SPORT = "sport"
    BOULDERING = "bouldering"

    @property
    def grade_options(self) -> Tuple[str, ...]:
        return _GRADE_OPTIONS[self]


_GRADE_OPTIONS: Dict[RouteType, Tuple[str, ...]] = {
    RouteType.SPORT: SPORT_GRADES,
    RouteType.BOULDERING: BOULDERING_GRADES,
}


# -----------------------------
# Container formats / platforms
# -----------------------------

class ContainerFormat(str, Enum):
    MOV = "mov"
    MP4 = "mp4"


class AppPlatform(str, Enum):
    IOS = "ios"
    WINDOWS = "windows"


@dataclass(frozen=True)
class PlatformProfile:
    """
    Which container formats a platform build can play.

    default_import_container is informational; it never affects filtering.
    """
    platform: AppPlatform
    supported_containers: FrozenSet[ContainerFormat]
    default_import_container: ContainerFormat

    def __post_init__(self) -> None:
        object.__setattr__(self, "supported_containers", frozenset(self.supported_containers))

    def supports(self, fmt: ContainerFormat) -> bool:
        return fmt in self.supported_containers


IOS_PROFILE = PlatformProfile(
    platform=AppPlatform.IOS,
    supported_containers=frozenset({ContainerFormat.MOV, ContainerFormat.MP4}),
    default_import_container=ContainerFormat.MOV,
)

WINDOWS_PROFILE = PlatformProfile(
    platform=AppPlatform.WINDOWS,
    supported_containers=frozenset({ContainerFormat.MOV, ContainerFormat.MP4}),
    default_import_container=ContainerFormat.MP4,
)

_CANONICAL_PROFILES: Dict[AppPlatform, PlatformProfile] = {
    AppPlatform.IOS: IOS_PROFILE,
    AppPlatform.WINDOWS: WINDOWS_PROFILE,
}


def profile_for_platform(platform: AppPlatform) -> PlatformProfile:
    return _CANONICAL_PROFILES[AppPlatform(platform)]


# -----------------------------
# Core Dataclasses
# -----------------------------

@dataclass(frozen=True)
class VideoTag:
    """A (route type, grade) pair. The grade must belong to the route type."""
    route_type: RouteType
    grade: str

    def __post_init__(self) -> None:
        route_type = RouteType(self.route_type)
        if self.grade not in route_type.grade_options:
            raise InvalidGradeForRouteType(route_type, self.grade)
        object.__setattr__(self, "route_type", route_type)


def make_tag(route_type: RouteType, grade: str) -> VideoTag:
    return VideoTag(route_type=route_type, grade=grade)


@dataclass(frozen=True)
class NoteMarker:
    """
    A timestamped note on a video.

    at_second is whole seconds from the start; negative values clamp to 0.
    image_path optionally points at a still that goes with the note.
    """
    id: str
    at_second: int
    text: str = ""
    image_path: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "at_second", max(0, int(self.at_second)))

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "atSecond": int(self.at_second),
            "text": self.text,
            "imagePath": self.image_path,
        }

    @staticmethod
    def from_dict(d: Dict) -> "NoteMarker":
        image_path = d.get("imagePath")
        at_second = d["atSecond"]
        if isinstance(at_second, bool) or not isinstance(at_second, int):
            raise TypeError(f"atSecond must be an integer, got {at_second!r}")
        return NoteMarker(
            id=str(d["id"]),
            at_second=at_second,
            text=str(d.get("text", "")),
            image_path=None if image_path is None else str(image_path),
        )


@dataclass(frozen=True)
class VideoAsset:
    """
    A single cataloged video.

    tags and markers are stored as immutable copies, so assets never share
    mutable state with the collections they were built from.
    """
    id: str
    created_at: datetime
    container_format: ContainerFormat = ContainerFormat.MOV
    tags: FrozenSet[VideoTag] = field(default_factory=frozenset)
    markers: Tuple[NoteMarker, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "container_format", ContainerFormat(self.container_format))
        object.__setattr__(self, "tags", frozenset(self.tags or ()))
        object.__setattr__(self, "markers", tuple(self.markers or ()))


@dataclass(frozen=True)
class VideoFilterQuery:
    """Tags must all be present on a video; both date bounds are inclusive."""
    tags: FrozenSet[VideoTag] = field(default_factory=frozenset)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", frozenset(self.tags or ()))


def marker_ids(markers: Iterable[NoteMarker]) -> Tuple[str, ...]:
    return tuple(m.id for m in markers)
