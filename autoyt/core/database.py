"""
JSON-backed collections store for autoyt.

The whole library is one document holding four ordered lists:

    tracks:    Track entities, oldest first
    artwork:   Artwork entities, oldest first
    schedule:  Video entities, oldest first
    artists:   Artist entities, in order of first appearance

An in-memory index maps every unique id to its entity. The index is never
persisted: it is rebuilt whenever the total size of the four lists no longer
matches it, which is how truncating a list (undo) stays consistent without
an explicit removal API.

Usage:
    collections = Collections.load(config.paths.collections)

    collections.add_track(track)
    artist = collections.find_artist("Snatti89")

    collections.save(config.paths.collections)
"""

import json
from pathlib import Path
from typing import Any

from autoyt.core.exceptions import DatabaseError, ImmutableResourceError
from autoyt.core.logger import get_logger
from autoyt.core.models import Artist, Artwork, Entity, ItemState, Track, Video

logger = get_logger(__name__)


class Collections:
    """
    Owner of all tracks, artwork, scheduled videos and artists.

    Only one command mutates a Collections instance per process, so no
    locking is done.
    """

    def __init__(
        self,
        tracks: list[Track] | None = None,
        artwork: list[Artwork] | None = None,
        schedule: list[Video] | None = None,
        artists: list[Artist] | None = None,
    ) -> None:
        self.tracks: list[Track] = tracks if tracks is not None else []
        self.artwork: list[Artwork] = artwork if artwork is not None else []
        self.schedule: list[Video] = schedule if schedule is not None else []
        self.artists: list[Artist] = artists if artists is not None else []
        self._index: dict[str, Entity] = {}
        self.rebuild_index()

    # =========================================================================
    # Index
    # =========================================================================

    def __len__(self) -> int:
        return len(self.tracks) + len(self.artwork) + len(self.schedule) + len(self.artists)

    def rebuild_index(self) -> None:
        """Clear the index and repopulate it from the four collections."""
        self._index.clear()
        for entities in (self.tracks, self.artwork, self.schedule, self.artists):
            for entity in entities:
                self._index[entity.unique_id] = entity

    def find(self, unique_id: str) -> Entity | None:
        """
        Look up any entity by unique id.

        Rebuilds the index first if it is out of sync with the collections.
        """
        if len(self) != len(self._index):
            logger.debug(f"Rebuilding index ({len(self._index)} entries, {len(self)} entities)")
            self.rebuild_index()
        return self._index.get(unique_id)

    def find_track(self, unique_id: str) -> Track | None:
        entity = self.find(unique_id)
        return entity if isinstance(entity, Track) else None

    def find_artwork(self, unique_id: str) -> Artwork | None:
        entity = self.find(unique_id)
        return entity if isinstance(entity, Artwork) else None

    def find_artist(self, name: str) -> Artist | None:
        """Find an artist by name, ignoring case."""
        entity = self.find(name.lower())
        return entity if isinstance(entity, Artist) else None

    # =========================================================================
    # Insertion
    # =========================================================================

    def add_track(self, track: Track) -> None:
        """
        Insert a track, or replace the track stored at the same path.

        Replacing is allowed only while both tracks share a state, or when
        the stored track is REMOVED.

        Raises:
            ImmutableResourceError: If the stored track was scheduled or
                                    published. Nothing is modified.
        """
        slot = self._replaceable_slot(self.tracks, track.unique_id, track.state, "music")
        self.ensure_artists(*track.artists)
        if slot is None:
            self.tracks.append(track)
        else:
            self.tracks[slot] = track
            self._index[track.unique_id] = track

    def add_artwork(self, artwork: Artwork) -> None:
        """
        Insert artwork, or replace the artwork stored at the same path.

        Raises:
            ImmutableResourceError: If the stored artwork was scheduled or
                                    published. Nothing is modified.
        """
        slot = self._replaceable_slot(self.artwork, artwork.unique_id, artwork.state, "art")
        self.ensure_artists(artwork.artist)
        if slot is None:
            self.artwork.append(artwork)
        else:
            self.artwork[slot] = artwork
            self._index[artwork.unique_id] = artwork

    def check_replaceable(
        self,
        collection_name: str,
        unique_id: str,
        state: ItemState = ItemState.BUFFERED
    ) -> None:
        """
        Check that an item in state may be stored under unique_id.

        Lets callers refuse an add before the file at unique_id is written.

        Args:
            collection_name: "music" for tracks, "art" for artwork.

        Raises:
            ImmutableResourceError: If the stored item was scheduled or
                                    published.
        """
        entities = self.tracks if collection_name == "music" else self.artwork
        self._replaceable_slot(entities, unique_id, state, collection_name)

    def _replaceable_slot(
        self,
        entities: list[Track] | list[Artwork],
        unique_id: str,
        state: ItemState,
        collection_name: str
    ) -> int | None:
        for i, existing in enumerate(entities):
            if existing.unique_id != unique_id:
                continue
            if existing.state != state and existing.state != ItemState.REMOVED:
                raise ImmutableResourceError(collection_name, unique_id)
            return i
        return None

    def ensure_artists(self, *names: str) -> None:
        """Create an artist without links for every name not yet known."""
        for name in names:
            if self.find_artist(name) is not None:
                continue
            logger.debug(f"New artist: {name}")
            self.artists.append(Artist(name=name))

    def update_artist_links(self, name: str, links: list[str]) -> Artist:
        """
        Append links to an artist, creating the artist if needed.

        Links already registered for the artist are skipped.
        """
        artist = self.find_artist(name)
        if artist is None:
            artist = Artist(name=name)
            self.artists.append(artist)
        artist.add_links(links)
        return artist

    # =========================================================================
    # Statistics
    # =========================================================================

    def video_status(self) -> str:
        scheduled = sum(1 for v in self.schedule if v.state == ItemState.SCHEDULED)
        published = sum(1 for v in self.schedule if v.state == ItemState.PUBLISHED)
        return f"scheduled: {scheduled}, published: {published}"

    # =========================================================================
    # Persistence
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        return {
            "tracks": [t.to_dict() for t in self.tracks],
            "artwork": [a.to_dict() for a in self.artwork],
            "schedule": [v.to_dict() for v in self.schedule],
            "artists": [a.to_dict() for a in self.artists],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Collections":
        return cls(
            tracks=[Track.from_dict(t) for t in data.get("tracks") or []],
            artwork=[Artwork.from_dict(a) for a in data.get("artwork") or []],
            schedule=[Video.from_dict(v) for v in data.get("schedule") or []],
            artists=[Artist.from_dict(a) for a in data.get("artists") or []],
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=4, ensure_ascii=False)

    @classmethod
    def load(cls, path: Path) -> "Collections":
        """
        Load collections from a JSON file.

        A missing file yields empty collections.

        Raises:
            DatabaseError: If the file cannot be read or is not a valid
                           collections document.
        """
        if not path.exists():
            logger.debug(f"No collections at {path}, starting empty")
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DatabaseError(
                f"Failed to read collections file: {e}",
                details={"path": str(path), "original_error": str(e)}
            ) from e

        if not isinstance(data, dict):
            raise DatabaseError(
                "Collections file must contain a JSON object",
                details={"path": str(path)}
            )

        try:
            return cls.from_dict(data)
        except (AttributeError, TypeError, ValueError) as e:
            raise DatabaseError(
                f"Collections file is corrupted: {e}",
                details={"path": str(path), "original_error": str(e)}
            ) from e

    def save(self, path: Path) -> None:
        """
        Write collections to a JSON file, creating parent directories.

        Raises:
            DatabaseError: If the file cannot be written.
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(self.to_json())
        except OSError as e:
            raise DatabaseError(
                f"Failed to write collections file: {e}",
                details={"path": str(path), "original_error": str(e)}
            ) from e
        logger.debug(f"Saved {len(self)} entities to {path}")
