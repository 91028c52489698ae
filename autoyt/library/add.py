"""
Adding music and artwork to the buffer.

Files are copied (or moved) into <data>/music and <data>/art and registered
in the collections as BUFFERED items. Track metadata is inferred from the
file name:

    "Artist1 & Artist2 - Song feat. Artist3.mp3"
        by      = "Artist1 & Artist2"
        title   = "Song feat. Artist3"
        artists = ["Artist1", "Artist2", "Artist3"]

Every inferred value can be overridden with AddOptions.
"""

from dataclasses import dataclass, replace
from pathlib import Path

from autoyt.core.database import Collections
from autoyt.core.exceptions import (
    CreateResourceError,
    EmptyCollectionError,
    ImmutableResourceError,
    SourceNotFoundError,
)
from autoyt.core.logger import get_logger
from autoyt.core.models import Artwork, ItemState, Track
from autoyt.library.download import ArtworkDownloader
from autoyt.utils import copy_or_move, ensure_directory, is_url

logger = get_logger(__name__)


MUSIC = "music"
ART = "art"
KINDS = (MUSIC, ART)

# Standalone tokens separating artists in the "by" part of a file name
ARTIST_SEPARATORS = ("&", "x", "X", "+")

# Standalone tokens introducing featured artists in a title
FEATURE_SEPARATORS = ("feat.", "Feat.", "ft.")


@dataclass
class AddOptions:
    """
    Overrides for `autoyt add`.

    Attributes:
        artist: Comma separated artist names. For music this replaces the
                inferred artists, for art it names the artwork's artist.
        by: Replaces the "by" part inferred from the file name.
        name: Replaces the title inferred from the file name.
        description: Free text added to the video description.
        move_file: Move the source file instead of copying it.
        extension: Extension for downloaded artwork without one.
    """
    artist: str = ""
    by: str = ""
    name: str = ""
    description: str = ""
    move_file: bool = False
    extension: str = ""


def list_file_paths(src: str) -> list[str]:
    """
    Expand a source argument to the paths it designates.

    A directory yields its files sorted by name, a URL or a file yields
    itself.

    Raises:
        SourceNotFoundError: If src is neither a URL nor an existing path.
    """
    if is_url(src):
        return [src]

    path = Path(src).expanduser()
    if path.is_dir():
        return [str(p) for p in sorted(path.iterdir()) if p.is_file()]
    if not path.exists():
        raise SourceNotFoundError(src)
    return [str(path)]


def track_info(filename: str) -> tuple[str, str]:
    """
    Infer (title, by) from a file name of the form "By - Title.ext".

    Missing parts are returned as empty strings.
    """
    stem = Path(filename).stem
    parts = stem.split("-")
    by = parts[0].strip() if len(parts) >= 1 else ""
    title = parts[1].strip() if len(parts) >= 2 else ""
    return title, by


def split_strings(value: str, separators: tuple[str, ...]) -> list[str]:
    """
    Split value on standalone separator tokens.

    Only whole space separated tokens count, so "&" splits "A & B" but
    not "A &B". Empty parts are dropped.

    Example:
        split_strings("A1 X1 X A2", ("x", "X"))  # ["A1 X1", "A2"]
    """
    result = []
    tokens = value.split(" ")
    start = 0

    for i, token in enumerate(tokens):
        if token not in separators:
            continue
        part = " ".join(tokens[start:i])
        if part == "":
            continue
        result.append(part)
        start = i + 1

    part = " ".join(tokens[start:])
    if part != "":
        result.append(part)
    return result


def infer_artists(title: str, by: str, artist_override: str = "") -> list[str]:
    """
    Determine the artists credited for a track.

    Args:
        title: Track title, searched for featured artists.
        by: The "by" part of the file name, split on ARTIST_SEPARATORS.
        artist_override: Comma separated names replacing the inference.

    Returns:
        Trimmed artist names in credit order.
    """
    if artist_override:
        artists = artist_override.split(",")
    else:
        artists = split_strings(by, ARTIST_SEPARATORS)
        features = split_strings(title, FEATURE_SEPARATORS)
        if len(features) > 1:
            artists.extend(features[1:])
    return [a.strip() for a in artists if a.strip()]


def _store_file(src: Path, dst_dir: Path, move: bool, collection: str) -> Path:
    dst = dst_dir / src.name
    try:
        copy_or_move(src, dst, move=move)
    except OSError as e:
        raise CreateResourceError(collection, str(src), reason=str(e)) from e
    return dst


def new_track(src: Path, dst_dir: Path, options: AddOptions) -> Track:
    """
    Copy or move src into dst_dir and describe it as a buffered Track.

    Raises:
        CreateResourceError: If the file cannot be copied or moved.
    """
    title, by = track_info(src.name)

    if options.name:
        title = options.name
    if options.by:
        by = options.by

    dst = _store_file(src, dst_dir, options.move_file, MUSIC)

    return Track(
        title=title,
        by=by,
        artists=infer_artists(title, by, options.artist),
        description=options.description,
        path=str(dst),
        state=ItemState.BUFFERED,
    )


def new_artwork(src: Path, dst_dir: Path, options: AddOptions) -> Artwork:
    """
    Copy or move src into dst_dir and describe it as buffered Artwork.

    Raises:
        CreateResourceError: If the file cannot be copied or moved.
    """
    dst = _store_file(src, dst_dir, options.move_file, ART)
    return Artwork(artist=options.artist.strip(), path=str(dst), state=ItemState.BUFFERED)


def add_files(
    collections: Collections,
    kind: str,
    src: str,
    data_dir: Path,
    options: AddOptions,
    downloader: ArtworkDownloader | None = None,
) -> list[Track] | list[Artwork]:
    """
    Add every file designated by src to the music or art buffer.

    Artwork URLs are downloaded to the cache first and then moved into
    <data>/art.

    Args:
        collections: Collections to add to.
        kind: "music" or "art".
        src: File, directory or (art only) URL.
        data_dir: autoyt data directory.
        options: Overrides applied to every added file.
        downloader: Used for artwork URLs. Created from data_dir and
                    options.extension when None.

    Returns:
        The added entities in order.

    Raises:
        ValueError: If kind is unknown.
        SourceNotFoundError: If src does not exist.
        ImmutableResourceError: If a file replaces a scheduled item. Checked
                                before the file is written.
        DownloadError: If an artwork URL cannot be downloaded.
    """
    if kind not in KINDS:
        raise ValueError(f"Unknown collection '{kind}', expected one of {KINDS}")

    paths = list_file_paths(src)
    dst_dir = ensure_directory(data_dir / kind)
    added = []

    for path in paths:
        if kind == MUSIC:
            collections.check_replaceable(MUSIC, str(dst_dir / Path(path).name))
            track = new_track(Path(path), dst_dir, options)
            collections.add_track(track)
            logger.info(f"add: {track.by} - {track.title}")
            added.append(track)
            continue

        file_options = options
        if is_url(path):
            if downloader is None:
                downloader = ArtworkDownloader(data_dir, extension=options.extension or None)
            collections.check_replaceable(ART, str(dst_dir / downloader.destination(path).name))
            path = str(downloader.fetch(path))
            file_options = replace(options, move_file=True)
        else:
            collections.check_replaceable(ART, str(dst_dir / Path(path).name))

        artwork = new_artwork(Path(path), dst_dir, file_options)
        collections.add_artwork(artwork)
        logger.info(f"add: {artwork.path}")
        added.append(artwork)

    return added


def undo_last(collections: Collections, kind: str) -> Track | Artwork:
    """
    Remove the most recently added track or artwork and delete its file.

    Only the last element is considered, even if an earlier add replaced
    an item in place.

    Raises:
        ValueError: If kind is unknown.
        EmptyCollectionError: If there is nothing to undo.
        ImmutableResourceError: If the last item is no longer buffered.
    """
    if kind not in KINDS:
        raise ValueError(f"Unknown collection '{kind}', expected one of {KINDS}")

    items = collections.tracks if kind == MUSIC else collections.artwork
    if not items:
        raise EmptyCollectionError(kind)

    last = items[-1]
    if last.state != ItemState.BUFFERED:
        raise ImmutableResourceError(kind, last.unique_id)

    items.pop()

    try:
        Path(last.path).unlink()
    except FileNotFoundError:
        logger.warning(f"File already gone: {last.path}")

    logger.info(f"undo: {last.path}")
    return last
