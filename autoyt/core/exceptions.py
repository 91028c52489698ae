"""
Exception classes for autoyt.

This module defines all custom exceptions used throughout the application.
Each exception carries a message meant for the user and an optional
details dictionary meant for the log file.

Exception Hierarchy:
    AutoYtError (base)
        ConfigError - Configuration file issues
        DatabaseError - Collections file issues
        SourceNotFoundError - File or directory given to `add` is missing
        CreateResourceError - File could not be copied into the data directory
        EmptyCollectionError - `add ... undo` on an empty collection
        ImmutableResourceError - Attempt to replace a scheduled/published item
        TemplateError - Unresolved placeholder in a text template
        ScheduleError - Buffer/schedule state does not allow the command
            NoBufferedTrackError
            NoBufferedArtworkError
            EmptyScheduleError
            PublishedVideoError
            InvalidUploadTimeError
        DownloadError - Artwork download issues
            UnknownExtensionError
        RenderError - Encoder failures
        UploadError - YouTube upload failures

    CollectionsIntegrityError (RuntimeError)
        Not an AutoYtError: raised when the collections contradict their own
        invariants, which is a defect rather than a user mistake.
"""


class AutoYtError(Exception):
    """
    Base exception for all autoyt errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (paths, titles).
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigError(AutoYtError):
    """
    Raised when the configuration file cannot be read or holds invalid values.

    Example:
        raise ConfigError(
            "'upload.privacy' must be one of: private, public, unlisted",
            details={"field": "upload.privacy", "value": "secret"}
        )
    """
    pass


class DatabaseError(AutoYtError):
    """
    Raised when the collections file cannot be read, parsed or written.

    The collections file holds every track, artwork, video and artist, so a
    corrupted file stops the program before any command mutates state.
    """
    pass


class SourceNotFoundError(AutoYtError):
    """Raised when a path passed to `add` does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"File or directory '{path}' does not exist.",
            details={"path": path}
        )


class CreateResourceError(AutoYtError):
    """Raised when a file cannot be copied or moved into the data directory."""

    def __init__(self, collection: str, path: str, reason: str = "") -> None:
        super().__init__(
            f"Could not create {collection} from '{path}'." + (f" {reason}" if reason else ""),
            details={"collection": collection, "path": path}
        )
        self.collection = collection


class EmptyCollectionError(AutoYtError):
    """Raised when undoing an add on a collection that holds nothing."""

    def __init__(self, collection: str) -> None:
        super().__init__(
            f"Nothing to undo, {collection} is empty.",
            details={"collection": collection}
        )
        self.collection = collection


class ImmutableResourceError(AutoYtError):
    """
    Raised when replacing or removing an item that is already scheduled
    or published.

    Attributes:
        collection: Name of the collection ("music" or "art").
    """

    def __init__(self, collection: str, unique_id: str | None = None) -> None:
        super().__init__(
            f"Cannot update {collection} as it is already scheduled or published.",
            details={"collection": collection, "unique_id": unique_id}
        )
        self.collection = collection
        self.unique_id = unique_id


class TemplateError(AutoYtError):
    """
    Raised when a template references a key that has no value.

    Attributes:
        key: The placeholder key that could not be resolved.
        template: The complete template string.
    """

    def __init__(self, key: str, template: str, reason: str = "invalid key") -> None:
        super().__init__(
            f"{reason} '{key}' in '{template}'",
            details={"key": key, "template": template}
        )
        self.key = key
        self.template = template


class ScheduleError(AutoYtError):
    """Base class for errors caused by the state of the buffer or schedule."""
    pass


class NoBufferedTrackError(ScheduleError):
    def __init__(self) -> None:
        super().__init__("No new music to schedule.")


class NoBufferedArtworkError(ScheduleError):
    def __init__(self) -> None:
        super().__init__("No new artwork to schedule.")


class EmptyScheduleError(ScheduleError):
    def __init__(self) -> None:
        super().__init__("Empty schedule.")


class PublishedVideoError(ScheduleError):
    def __init__(self, title: str) -> None:
        super().__init__(
            "Cannot unschedule published video.",
            details={"title": title}
        )


class InvalidUploadTimeError(ScheduleError):
    def __init__(self, value: str) -> None:
        super().__init__(
            f"Upload time {value} is not valid (expected hh:mm:ss).",
            details={"value": value}
        )


class DownloadError(AutoYtError):
    """
    Raised when artwork cannot be downloaded or written to the cache.

    Example:
        raise DownloadError(
            "Failed to download 'https://example.com/a.png' (404 Not Found).",
            details={"url": "https://example.com/a.png", "status_code": 404}
        )
    """
    pass


class UnknownExtensionError(DownloadError):
    def __init__(self, url: str) -> None:
        super().__init__(
            "Cannot determine file extension, use --ext option.",
            details={"url": url}
        )


class RenderError(AutoYtError):
    """
    Raised when the encoder cannot be started or exits with an error.

    A render error is fatal for the whole batch: videos rendered before the
    failing one stay in memory but nothing is saved.
    """
    pass


class UploadError(AutoYtError):
    """
    Raised when authorization or the upload of a video fails.

    There is no retry; the command stops at the first failing video.
    """
    pass


class CollectionsIntegrityError(RuntimeError):
    """
    Raised when the collections break an invariant that the code guarantees,
    e.g. a track credits an artist missing from the Artists collection.
    """
    pass
