"""
Data models for the autoyt collections.

Four entity kinds share one identifier namespace:

    Track    - an audio file waiting to be paired (id: storage path)
    Artwork  - an image file waiting to be paired (id: storage path)
    Video    - a rendered pairing of one track and one artwork (id: output path)
    Artist   - credits and links for a name (id: lowercased name)

Track, Artwork and Video move through the lifecycle described by ItemState.
Entities are mutable dataclasses because the collections update their state
in place as they are scheduled and published.

Serialization:
    Every entity converts to and from a plain dict (to_dict/from_dict) so the
    collections file is ordinary JSON. Datetimes are stored as ISO 8601
    strings with offset and states as integers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Union


class ItemState(IntEnum):
    """
    Lifecycle state of a track, artwork or video.

    BUFFERED -> SCHEDULED -> PUBLISHED is the normal progression.
    REMOVED is a tombstone that allows re-adding an item at the same path.
    """
    BUFFERED = 0
    SCHEDULED = 1
    PUBLISHED = 2
    REMOVED = 3


def _parse_datetime(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(value)


@dataclass
class Track:
    """
    A music file in the library.

    Attributes:
        title: Track title, e.g. "Song" for "A - Song.mp3".
        by: Primary artist display name used in the video title.
        artists: Artist ids credited in the description, in order.
        description: Free text copied verbatim into the video description.
        path: Storage path inside the data directory; doubles as unique id.
        state: Lifecycle state.
    """
    title: str = ""
    by: str = ""
    artists: list[str] = field(default_factory=list)
    description: str = ""
    path: str = ""
    state: ItemState = ItemState.BUFFERED

    @property
    def unique_id(self) -> str:
        return self.path

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "by": self.by,
            "artists": list(self.artists),
            "description": self.description,
            "path": self.path,
            "state": int(self.state),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Track":
        return cls(
            title=data.get("title", ""),
            by=data.get("by", ""),
            artists=list(data.get("artists") or []),
            description=data.get("description", ""),
            path=data.get("path", ""),
            state=ItemState(data.get("state", ItemState.BUFFERED)),
        )


@dataclass
class Artwork:
    """
    An image file in the library.

    Attributes:
        artist: Artist id credited for the artwork.
        path: Storage path inside the data directory; doubles as unique id.
        state: Lifecycle state.
    """
    artist: str = ""
    path: str = ""
    state: ItemState = ItemState.BUFFERED

    @property
    def unique_id(self) -> str:
        return self.path

    def to_dict(self) -> dict[str, Any]:
        return {"artist": self.artist, "path": self.path, "state": int(self.state)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Artwork":
        return cls(
            artist=data.get("artist", ""),
            path=data.get("path", ""),
            state=ItemState(data.get("state", ItemState.BUFFERED)),
        )


@dataclass
class Video:
    """
    A rendered (or about to be rendered) music video.

    Attributes:
        title: Video title built from the title template.
        description: Video description built from the description templates.
        path: Output file path; doubles as unique id.
        state: Lifecycle state.
        publish_at: Scheduled publish time (aware, UTC). None means the
                    video is published as soon as it is uploaded.
        upload_id: Remote YouTube video id. None until uploaded.
        audio: Unique id of the track the video was made from.
        image: Unique id of the artwork the video was made from.
    """
    title: str = ""
    description: str = ""
    path: str = ""
    state: ItemState = ItemState.BUFFERED
    publish_at: datetime | None = None
    upload_id: str | None = None
    audio: str = ""
    image: str = ""

    @property
    def unique_id(self) -> str:
        return self.path

    def __str__(self) -> str:
        if self.publish_at is None:
            return self.title
        timestamp = self.publish_at.strftime("%Y-%m-%d %H:%M")
        text = f"{self.title} @({timestamp})"
        if self.upload_id is None:
            return text
        return f"{text} (video id: {self.upload_id})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "path": self.path,
            "state": int(self.state),
            "publish_at": self.publish_at.isoformat() if self.publish_at else None,
            "upload_id": self.upload_id,
            "audio": self.audio,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Video":
        return cls(
            title=data.get("title", ""),
            description=data.get("description", ""),
            path=data.get("path", ""),
            state=ItemState(data.get("state", ItemState.BUFFERED)),
            publish_at=_parse_datetime(data.get("publish_at")),
            upload_id=data.get("upload_id"),
            audio=data.get("audio", ""),
            image=data.get("image", ""),
        )


@dataclass
class Artist:
    """
    Credits for an artist name.

    Names are unique regardless of case: "Snatti89" and "snatti89" are the
    same artist. Links keep insertion order and never repeat.
    """
    name: str = ""
    links: list[str] = field(default_factory=list)

    @property
    def unique_id(self) -> str:
        return self.name.lower()

    def add_links(self, links: list[str]) -> None:
        for link in links:
            if link not in self.links:
                self.links.append(link)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "links": list(self.links)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Artist":
        return cls(name=data.get("name", ""), links=list(data.get("links") or []))


Entity = Union[Track, Artwork, Video, Artist]


def sort_videos(videos: list[Video]) -> list[Video]:
    """
    Return videos ordered by publish time, immediate publishes first.

    The input list is left untouched.
    """
    return sorted(
        videos,
        key=lambda v: (v.publish_at is not None, v.publish_at.timestamp() if v.publish_at else 0.0)
    )
