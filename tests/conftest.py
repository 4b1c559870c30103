"""Pytest fixtures for the climb_mate tests."""

from datetime import datetime, timezone

import pytest
from loguru import logger

from climb_mate.domain import ContainerFormat, NoteMarker, RouteType, VideoAsset, make_tag
from climb_mate.persistence import sample_records, save_records


def utc(year, month, day, hour=0):
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


@pytest.fixture
def sport_tag():
    return make_tag(RouteType.SPORT, "5.11a")


@pytest.fixture
def boulder_tag():
    return make_tag(RouteType.BOULDERING, "V6")


@pytest.fixture
def january_videos(sport_tag, boulder_tag):
    """Jan 1 (sport), Jan 10 (sport + boulder), Jan 20 (boulder)."""
    return [
        VideoAsset(id="a", created_at=utc(2026, 1, 1), tags={sport_tag}),
        VideoAsset(id="b", created_at=utc(2026, 1, 10), tags={sport_tag, boulder_tag}),
        VideoAsset(id="c", created_at=utc(2026, 1, 20), tags={boulder_tag}),
    ]


@pytest.fixture
def crux_video(sport_tag):
    return VideoAsset(
        id="crux",
        created_at=utc(2026, 2, 1),
        container_format=ContainerFormat.MP4,
        tags={sport_tag},
        markers=[
            NoteMarker(id="m2", at_second=30, text="top hold"),
            NoteMarker(id="m1", at_second=15, text="crux"),
        ],
    )


@pytest.fixture
def store_path(tmp_path):
    return str(tmp_path / "data" / "videos.json")


@pytest.fixture
def sample_store(store_path):
    save_records(sample_records(now=utc(2026, 1, 10, 12)), store_path)
    return store_path


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the real ~/.climb_mate."""
    monkeypatch.setenv("CLIMB_MATE_CONFIG", str(tmp_path / "no-config.json"))
    monkeypatch.delenv("CLIMB_MATE_DATA_FILE", raising=False)
    yield
    # entry points enable package logging; put the library back to silent
    logger.disable("climb_mate")
