# climb_mate/manager.py
from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List

from .domain import NoteMarker, PlatformProfile, VideoAsset, VideoFilterQuery, WINDOWS_PROFILE
from .library import VideoLibrary
from .playback import PlaybackController, PlaybackMode
from .timeline import NoteTimeline


class VideoManager:
    """
    Shared application service for the CLI and desktop layers.

    Bound to one platform profile; compatibility filtering always runs before
    tag/date filtering.
    """

    def __init__(self, profile: PlatformProfile = WINDOWS_PROFILE):
        self.profile = profile

    def compatible_videos(self, videos: Iterable[VideoAsset]) -> List[VideoAsset]:
        return VideoLibrary(videos).compatible_with(self.profile)

    def filtered_videos(self, videos: Iterable[VideoAsset], query: VideoFilterQuery) -> List[VideoAsset]:
        compatible = self.compatible_videos(videos)
        return VideoLibrary(compatible).filter(query)

    def add_marker(self, marker: NoteMarker, video: VideoAsset) -> VideoAsset:
        # Appended as-is; NoteTimeline sorts when playback starts.
        return replace(video, markers=video.markers + (marker,))

    def make_playback_controller(self, video: VideoAsset, mode: PlaybackMode) -> PlaybackController:
        return PlaybackController(mode=mode, timeline=NoteTimeline(video.markers))
