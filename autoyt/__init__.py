"""
autoyt: Turn music and artwork into scheduled YouTube music videos.

Tracks and artwork are collected in a buffer, paired most recent first,
rendered into still-image videos with ffmpeg, given staggered publish times
and uploaded to YouTube.

Workflow:
    add (library/): Buffer tracks and artwork
        - Copy or move files into the data directory
        - Infer title and artists from track file names
        - Download artwork from URLs

    schedule (schedule/): Render buffered pairs
        - Pair the most recent track with the most recent artwork
        - Compose title and description from templates
        - Render with ffmpeg
        - Assign publish times after the latest scheduled video

    upload (upload/): Publish on YouTube
        - Authorize through OAuth
        - Upload scheduled videos, private until their publish time

Modules:
    core/       - Configuration, collections, logging, exceptions, progress
    library/    - Adding music and artwork
    schedule/   - Pairing, composition, rendering and publish times
    upload/     - YouTube client and publishing
    utils/      - Filename and path helpers
    cli.py      - Command-line interface

Usage:
    Command Line:
        autoyt add music ~/Music/new
        autoyt add art "https://example.com/cover.png" -a "Artist"
        autoyt schedule
        autoyt upload

    Python API:
        from autoyt.core import Collections, load_config, setup_logging
        from autoyt.schedule import Scheduler

        config = load_config()
        setup_logging(config.paths.root)
        collections = Collections.load(config.paths.collections)

        Scheduler.from_config(collections, config).render_all()
        collections.save(config.paths.collections)
"""

__version__ = "0.3.0"
__author__ = "autoyt"
__license__ = "MIT"

# Convenience imports for common usage
from autoyt.core import (
    AutoYtError,
    Collections,
    Config,
    ConfigError,
    DatabaseError,
    ItemState,
    get_logger,
    load_config,
    setup_logging,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "Collections",
    "ItemState",
    "setup_logging",
    "get_logger",
    # Exceptions
    "AutoYtError",
    "ConfigError",
    "DatabaseError",
]
