"""
Library module for autoyt.

Fills the music and art buffers:
    - add: Copy or move files into the data directory and register them
    - download: Fetch artwork from a URL into the data cache

Usage:
    from autoyt.library import AddOptions, add_files, undo_last

    add_files(collections, "music", "~/Music/new", config.paths.data, AddOptions())
"""

from autoyt.library.add import (
    ART,
    KINDS,
    MUSIC,
    AddOptions,
    add_files,
    infer_artists,
    list_file_paths,
    new_artwork,
    new_track,
    split_strings,
    track_info,
    undo_last,
)
from autoyt.library.download import IMAGE_EXTENSIONS, ArtworkDownloader

__all__ = [
    "ART",
    "KINDS",
    "MUSIC",
    "AddOptions",
    "add_files",
    "infer_artists",
    "list_file_paths",
    "new_artwork",
    "new_track",
    "split_strings",
    "track_info",
    "undo_last",
    "IMAGE_EXTENSIONS",
    "ArtworkDownloader",
]
