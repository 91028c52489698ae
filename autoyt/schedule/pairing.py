"""
Pairing of buffered tracks with buffered artwork.

Pairing is by recency only: the most recently added buffered track goes
with the most recently added buffered artwork, the second most recent with
the second most recent, and so on until the smaller buffer runs out.
Surplus items stay BUFFERED for a later schedule.
"""

from dataclasses import dataclass, field

from autoyt.core.database import Collections
from autoyt.core.exceptions import NoBufferedArtworkError, NoBufferedTrackError
from autoyt.core.models import Artwork, ItemState, Track


@dataclass
class Schedule:
    """
    Paired buffers, most recent pair first.

    tracks[i] and artwork[i] form the i-th pair.
    """
    tracks: list[Track] = field(default_factory=list)
    artwork: list[Artwork] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.tracks)


def new_schedule(collections: Collections) -> Schedule:
    """
    Pair the buffered tracks and artwork of collections.

    Returns:
        Schedule with min(buffered tracks, buffered artwork) pairs.

    Raises:
        NoBufferedTrackError: If no track is buffered.
        NoBufferedArtworkError: If no artwork is buffered.
    """
    tracks = [t for t in reversed(collections.tracks) if t.state == ItemState.BUFFERED]
    if not tracks:
        raise NoBufferedTrackError()

    artwork = [a for a in reversed(collections.artwork) if a.state == ItemState.BUFFERED]
    if not artwork:
        raise NoBufferedArtworkError()

    count = min(len(tracks), len(artwork))
    return Schedule(tracks=tracks[:count], artwork=artwork[:count])
