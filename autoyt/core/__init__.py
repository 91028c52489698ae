"""
Core module for autoyt.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - models: Track, Artwork, Video and Artist entities
    - database: JSON-backed collections with a unique-id index
    - logger: Logging system with multiple outputs
    - progress: Spinner shown during blocking operations

Usage:
    from autoyt.core import (
        Config, load_config,
        Collections,
        setup_logging, get_logger,
        AutoYtError, ConfigError, DatabaseError
    )
"""

from autoyt.core.config import (
    Config,
    FfmpegConfig,
    PathsConfig,
    UploadConfig,
    VideoFormat,
    load_config,
)
from autoyt.core.database import Collections
from autoyt.core.exceptions import (
    AutoYtError,
    CollectionsIntegrityError,
    ConfigError,
    CreateResourceError,
    DatabaseError,
    DownloadError,
    EmptyCollectionError,
    EmptyScheduleError,
    ImmutableResourceError,
    InvalidUploadTimeError,
    NoBufferedArtworkError,
    NoBufferedTrackError,
    PublishedVideoError,
    RenderError,
    ScheduleError,
    SourceNotFoundError,
    TemplateError,
    UnknownExtensionError,
    UploadError,
)
from autoyt.core.logger import (
    get_logger,
    log_video_published,
    setup_logging,
    shutdown_logging,
)
from autoyt.core.models import Artist, Artwork, Entity, ItemState, Track, Video, sort_videos
from autoyt.core.progress import ActivitySpinner

__all__ = [
    # Config
    "Config",
    "PathsConfig",
    "FfmpegConfig",
    "VideoFormat",
    "UploadConfig",
    "load_config",
    # Collections
    "Collections",
    "Artist",
    "Artwork",
    "Entity",
    "ItemState",
    "Track",
    "Video",
    "sort_videos",
    # Exceptions
    "AutoYtError",
    "ConfigError",
    "DatabaseError",
    "SourceNotFoundError",
    "CreateResourceError",
    "EmptyCollectionError",
    "ImmutableResourceError",
    "TemplateError",
    "ScheduleError",
    "NoBufferedTrackError",
    "NoBufferedArtworkError",
    "EmptyScheduleError",
    "PublishedVideoError",
    "InvalidUploadTimeError",
    "DownloadError",
    "UnknownExtensionError",
    "RenderError",
    "UploadError",
    "CollectionsIntegrityError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_video_published",
    "shutdown_logging",
    # Progress
    "ActivitySpinner",
]
