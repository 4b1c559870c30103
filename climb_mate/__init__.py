# climb_mate/__init__.py
'''
climb_mate/
    __init__.py
    __main__.py

    domain.py              # route types/grades, tags, markers, assets, platform profiles
    errors.py              # ClimbMateError hierarchy
    timeline.py            # NoteTimeline (sorted markers + navigation), time formatting
    library.py             # VideoLibrary: tag/date filter, platform compatibility filter
    playback.py            # PlaybackController state machine + ticks
    manager.py             # VideoManager facade used by CLI and window
    persistence.py         # JSON record store, record <-> asset, sample data
    config.py              # AppConfig load/save (config.json + env overrides)
    logging_config.py      # loguru setup for entry points
    cli.py                 # argparse commands + interactive playback shell

    app.py                 # QApplication boot
    main_window.py         # library browser + marker playback panel
    widgets/
      marker_slider.py     # slider that paints marker ticks on the groove
'''

from __future__ import annotations

from loguru import logger

__all__ = [
    "__version__",
    "AppPlatform",
    "ContainerFormat",
    "IOS_PROFILE",
    "WINDOWS_PROFILE",
    "NoteMarker",
    "NoteTimeline",
    "PlatformProfile",
    "PlaybackController",
    "PlaybackMode",
    "PlaybackState",
    "PlaybackTick",
    "RouteType",
    "VideoAsset",
    "VideoFilterQuery",
    "VideoLibrary",
    "VideoManager",
    "VideoTag",
    "make_tag",
]

__version__ = "0.1.0"

from .domain import (
    IOS_PROFILE,
    WINDOWS_PROFILE,
    AppPlatform,
    ContainerFormat,
    NoteMarker,
    PlatformProfile,
    RouteType,
    VideoAsset,
    VideoFilterQuery,
    VideoTag,
    make_tag,
)
from .library import VideoLibrary
from .manager import VideoManager
from .playback import PlaybackController, PlaybackMode, PlaybackState, PlaybackTick
from .timeline import NoteTimeline

# Silent when used as a library; entry points call logging_config.setup_logging().
logger.disable("climb_mate")
