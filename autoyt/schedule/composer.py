"""
Video composition for autoyt.

A VideoBuilder merges one track, one artwork and the video_format templates
of config.yaml into a Video: title, description and output path.

Description layout (default templates):

    A - Song                    <- header, then a blank line

    Recorded live.              <- track description, then a blank line

    A                           <- track credits, one block per artist
    - a.com                     <- one link line per artist link
                                <- blank line after each artist block
    Artwork by B                <- artwork credits
    - b.com                     <- artwork artist links
                                <- footer, preceded by a newline

Templates use %(key) placeholders, see substitute().
"""

from pathlib import Path

from autoyt.core.config import VideoFormat
from autoyt.core.database import Collections
from autoyt.core.exceptions import CollectionsIntegrityError, TemplateError
from autoyt.core.models import Artwork, ItemState, Track, Video
from autoyt.schedule.pairing import new_schedule
from autoyt.utils import clamp, ensure_directory, sanitize_filename


SCHEDULE_DIRNAME = "schedule"


def substitute(template: str, values: dict[str, str]) -> str:
    """
    Replace %(key) placeholders in template.

    The key runs from "%(" to the next ")". Any other character, including
    a "%" not followed by "(", is copied unchanged.

    Examples:
        substitute("%(by) - %(title)", {"by": "A", "title": "Song"})  # "A - Song"
        substitute("%%(a)%", {"a": "X"})                             # "%X%"
        substitute("%(a)c)", {"a": "X"})                             # "Xc)"

    Raises:
        TemplateError: If a key has no value or a placeholder is never closed.
    """
    parts = []
    i = 0
    while i < len(template):
        if template.startswith("%(", i):
            start = i + 2
            end = template.find(")", start)
            if end == -1:
                raise TemplateError(template[start:], template, reason="unterminated key")
            key = template[start:end]
            if key not in values:
                raise TemplateError(key, template)
            parts.append(values[key])
            i = end + 1
            continue
        parts.append(template[i])
        i += 1
    return "".join(parts)


class VideoBuilder:
    """
    Builds the Video for a (track, artwork) pair.

    Attributes:
        track: The audio of the video.
        artwork: The still image of the video.
        video_format: Title and description templates.
        extension: Video file extension including the dot (".mp4").
    """

    def __init__(
        self,
        track: Track,
        artwork: Artwork,
        video_format: VideoFormat,
        extension: str,
    ) -> None:
        self.track = track
        self.artwork = artwork
        self.video_format = video_format
        self.extension = extension

    def _track_values(self) -> dict[str, str]:
        return {"by": self.track.by, "title": self.track.title}

    def title(self) -> str:
        return substitute(self.video_format.title, self._track_values())

    def description(self, collections: Collections) -> str:
        """
        Compose the video description.

        Raises:
            TemplateError: If a template cannot be resolved.
            CollectionsIntegrityError: If a credited artist is missing from
                                       the collections.
        """
        lines: list[str] = []

        if self.video_format.header:
            lines.append(substitute(self.video_format.header, self._track_values()))
            lines.append("\n\n")

        if self.track.description:
            lines.append(self.track.description)
            lines.append("\n\n")

        for artist in self.track.artists:
            lines.append(substitute(self.video_format.track_credits, {"artist": artist}))
            lines.append("\n")
            lines.extend(self._links(collections, artist))
            lines.append("\n")

        lines.append(substitute(self.video_format.artwork_credits, {"artist": self.artwork.artist}))
        lines.append("\n")
        lines.extend(self._links(collections, self.artwork.artist))

        if self.video_format.footer:
            lines.append("\n")
            lines.append(self.video_format.footer)

        return "".join(lines)

    def _links(self, collections: Collections, name: str) -> list[str]:
        artist = collections.find_artist(name)
        if artist is None:
            raise CollectionsIntegrityError(f"artist {name} not in collections")
        return [substitute(self.video_format.link, {"link": link}) + "\n" for link in artist.links]

    def build(self, collections: Collections, destination: Path | None = None) -> Video:
        """
        Create a BUFFERED Video without publish time or upload id.

        Args:
            collections: Source of the artist links.
            destination: Data directory. The video path is
                         <destination>/schedule/<title><ext> and the schedule
                         directory is created. None yields only the file name
                         and touches nothing on disk.
        """
        title = self.title()
        description = self.description(collections)

        filename = sanitize_filename(title) + self.extension
        if destination is not None:
            path = ensure_directory(destination / SCHEDULE_DIRNAME) / filename
        else:
            path = Path(filename)

        return Video(
            title=title,
            description=description,
            path=str(path),
            state=ItemState.BUFFERED,
            publish_at=None,
            upload_id=None,
            audio=self.track.unique_id,
            image=self.artwork.unique_id,
        )


def preview_videos(
    collections: Collections,
    video_format: VideoFormat,
    extension: str,
    n: int = 1,
    count: int = 1,
    show_all: bool = False,
    description_lines: list[str] | None = None,
) -> list[Video]:
    """
    Build the videos the next `schedule` would render, without rendering.

    Pairs are numbered from 1, most recent first.

    Args:
        n: First pair to show. Clamped to at least 1.
        count: Last pair to show. Clamped to [n, number of pairs].
        show_all: Show every pair from n on.
        description_lines: When given, the n-th track's description is
                           replaced by these lines joined with newlines.
                           The track itself is modified.

    Returns:
        The previewed videos; empty when n is beyond the number of pairs.

    Raises:
        NoBufferedTrackError, NoBufferedArtworkError: If nothing can be paired.
    """
    schedule = new_schedule(collections)

    n = max(n, 1)
    count = clamp(count, n, schedule.count)
    if n > schedule.count:
        return []

    if description_lines:
        schedule.tracks[n - 1].description = "\n".join(description_lines)

    if show_all:
        count = schedule.count

    videos = []
    for i in range(n - 1, count):
        builder = VideoBuilder(schedule.tracks[i], schedule.artwork[i], video_format, extension)
        videos.append(builder.build(collections, None))
    return videos
