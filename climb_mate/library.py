# climb_mate/library.py
from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from loguru import logger

from .domain import PlatformProfile, VideoAsset, VideoFilterQuery


def date_in_range(
    value: datetime,
    start_date: Optional[datetime],
    end_date: Optional[datetime],
) -> bool:
    if start_date is not None and value < start_date:
        return False
    if end_date is not None and value > end_date:
        return False
    return True


class VideoLibrary:
    """
    A read-only collection of video assets.

    Both filters keep the input order of the videos.
    """

    def __init__(self, videos: Iterable[VideoAsset] = ()):
        self.videos: Tuple[VideoAsset, ...] = tuple(videos or ())

    def __len__(self) -> int:
        return len(self.videos)

    def filter(self, query: VideoFilterQuery) -> List[VideoAsset]:
        out: List[VideoAsset] = []
        for video in self.videos:
            tag_match = not query.tags or query.tags <= video.tags
            if tag_match and date_in_range(video.created_at, query.start_date, query.end_date):
                out.append(video)
        logger.debug(
            "Tag/date filter kept {}/{} videos (tags={}, start={}, end={})",
            len(out), len(self.videos), len(query.tags), query.start_date, query.end_date,
        )
        return out

    def compatible_with(self, profile: PlatformProfile) -> List[VideoAsset]:
        out = [v for v in self.videos if profile.supports(v.container_format)]
        logger.debug(
            "Compatibility filter for {} kept {}/{} videos",
            profile.platform.value, len(out), len(self.videos),
        )
        return out
