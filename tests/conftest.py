"""Test configuration and fixtures"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from autoyt.core.config import Config, PathsConfig
from autoyt.core.database import Collections
from autoyt.core.logger import shutdown_logging
from autoyt.core.models import Artist, Artwork, ItemState, Track, Video


FIXED_NOW = datetime(2024, 5, 1, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging during a test"""
    yield
    shutdown_logging()


@pytest.fixture
def config(temp_dir):
    """Default configuration with every path inside temp_dir"""
    return Config(
        paths=PathsConfig(
            root=temp_dir / "root",
            data=temp_dir / "data",
            collections=temp_dir / "root" / "collections.json",
            client_secret=temp_dir / "root" / "client_secret.json",
        )
    )


@pytest.fixture
def fixed_clock():
    """Clock always returning FIXED_NOW"""
    return lambda: FIXED_NOW


class FakeRenderer:
    """Renderer writing an empty file instead of running ffmpeg"""

    def __init__(self, fail_on: str | None = None):
        self.rendered: list[Video] = []
        self.fail_on = fail_on

    def render(self, video: Video) -> None:
        from autoyt.core.exceptions import RenderError

        if video.title == self.fail_on:
            raise RenderError(f"Failed to render '{video.title}'")
        Path(video.path).write_bytes(b"")
        self.rendered.append(video)


@pytest.fixture
def renderer():
    return FakeRenderer()


@pytest.fixture
def sample_collections():
    """Two buffered tracks, three buffered artwork and their artists"""
    return Collections(
        tracks=[
            Track(title="First", by="A", artists=["A"], path="/music/A - First.mp3"),
            Track(title="Second", by="B", artists=["B"], path="/music/B - Second.mp3"),
        ],
        artwork=[
            Artwork(artist="Painter", path="/art/one.png"),
            Artwork(artist="Painter", path="/art/two.png"),
            Artwork(artist="Painter", path="/art/three.png"),
        ],
        artists=[
            Artist(name="A", links=["a.com"]),
            Artist(name="B"),
            Artist(name="Painter", links=["painter.com"]),
        ],
    )


def scheduled_video(title: str, publish_at: datetime | None, state: ItemState = ItemState.SCHEDULED) -> Video:
    return Video(
        title=title,
        description="",
        path=f"/schedule/{title}.mp4",
        state=state,
        publish_at=publish_at,
        audio=f"/music/{title}.mp3",
        image=f"/art/{title}.png",
    )


@pytest.fixture
def make_video():
    """Factory for schedule entries"""
    return scheduled_video


@pytest.fixture
def make_renderer():
    """Factory for renderers failing on a given title"""
    return FakeRenderer
