"""
Configuration management for autoyt.

This module handles loading, validating, and providing access to the
application configuration stored in config.yaml.

Configuration File Location:
    The first existing file of CONFIG_SEARCH_PATHS is used:
        ./config.yaml
        ~/.config/autoyt/config.yaml
        ~/.autoyt/config.yaml
    When none exists, the defaults are written to ~/.autoyt/config.yaml
    and used.

Example config.yaml:
    paths:
      root: "~/.autoyt"
      data: "~/.autoyt/data"
      collections: "~/.autoyt/collections.json"
      client_secret: "~/.autoyt/client_secret.json"

    ffmpeg:
      path: "ffmpeg"
      input_args: "-r 1 -loop 1"
      output_args: "-acodec copy -r 1 -shortest"
      file_format: ".mp4"

    video_format:
      title: "%(by) - %(title)"
      header: "%(by) - %(title)"
      track_credits: "%(artist)"
      artwork_credits: "Artwork by %(artist)"
      link: "- %(link)"
      footer: ""

    upload:
      tags: []
      privacy: "public"
      category_id: "10"
      frequency_days: 1
      time_utc: "12:00:00"

Every section and key is optional; missing values use the defaults above.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from autoyt.core.exceptions import ConfigError


CONFIG_FILENAME = "config.yaml"

DEFAULT_CONFIG_PATH = Path("~/.autoyt") / CONFIG_FILENAME

CONFIG_SEARCH_PATHS = [
    Path(CONFIG_FILENAME),
    Path("~/.config/autoyt") / CONFIG_FILENAME,
    DEFAULT_CONFIG_PATH,
]

PRIVACY_VALUES = ("private", "public", "unlisted")


@dataclass(frozen=True)
class PathsConfig:
    """
    File system locations.

    Attributes:
        root: Directory holding logs, credentials and the default config.
        data: Directory where music, art and rendered videos are stored.
        collections: JSON file holding the collections.
        client_secret: OAuth client secret downloaded from Google Cloud.
    """
    root: Path = Path("~/.autoyt").expanduser()
    data: Path = Path("~/.autoyt/data").expanduser()
    collections: Path = Path("~/.autoyt/collections.json").expanduser()
    client_secret: Path = Path("~/.autoyt/client_secret.json").expanduser()


@dataclass(frozen=True)
class FfmpegConfig:
    """
    Encoder invocation.

    The render command is:
        <path> <input_args> -i <image> -i <audio> <output_args> <output>

    Attributes:
        path: Encoder executable.
        input_args: Arguments placed before the inputs.
        output_args: Arguments placed before the output file.
        file_format: Extension of rendered videos, including the dot.
    """
    path: str = "ffmpeg"
    input_args: str = "-r 1 -loop 1"
    output_args: str = "-acodec copy -r 1 -shortest"
    file_format: str = ".mp4"


@dataclass(frozen=True)
class VideoFormat:
    """
    Templates used to compose video titles and descriptions.

    Placeholders use the %(key) syntax:
        title, header: %(by), %(title)
        track_credits, artwork_credits: %(artist)
        link: %(link)

    An empty header or footer is left out of the description.
    """
    title: str = "%(by) - %(title)"
    header: str = "%(by) - %(title)"
    track_credits: str = "%(artist)"
    artwork_credits: str = "Artwork by %(artist)"
    link: str = "- %(link)"
    footer: str = ""


@dataclass(frozen=True)
class UploadConfig:
    """
    YouTube upload metadata and publishing rhythm.

    Attributes:
        tags: Tags added to every video.
        privacy: Privacy status for videos published immediately.
                 Scheduled videos are always uploaded as private.
        category_id: YouTube category id ("10" is Music).
        frequency_days: Days between two scheduled videos.
        time_utc: Time of day (UTC, hh:mm:ss) videos are published at.
    """
    tags: tuple[str, ...] = field(default_factory=tuple)
    privacy: str = "public"
    category_id: str = "10"
    frequency_days: int = 1
    time_utc: str = "12:00:00"


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and passed explicitly to every command.

    Example:
        config = load_config()
        print(f"Videos are published every {config.upload.frequency_days} days")
    """
    paths: PathsConfig = field(default_factory=PathsConfig)
    ffmpeg: FfmpegConfig = field(default_factory=FfmpegConfig)
    video_format: VideoFormat = field(default_factory=VideoFormat)
    upload: UploadConfig = field(default_factory=UploadConfig)


def default_config_dict() -> dict[str, Any]:
    """Return the default configuration as written to a new config.yaml."""
    return {
        "paths": {
            "root": "~/.autoyt",
            "data": "~/.autoyt/data",
            "collections": "~/.autoyt/collections.json",
            "client_secret": "~/.autoyt/client_secret.json",
        },
        "ffmpeg": {f.name: f.default for f in fields(FfmpegConfig)},
        "video_format": {f.name: f.default for f in fields(VideoFormat)},
        "upload": {
            "tags": [],
            "privacy": "public",
            "category_id": "10",
            "frequency_days": 1,
            "time_utc": "12:00:00",
        },
    }


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to the config file. If None,
                     CONFIG_SEARCH_PATHS are tried in order.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is missing, the file has
                     invalid YAML syntax, or contains invalid values.

    Behavior:
        1. Locate config file (explicit path or first search path found)
        2. If none is found, write defaults to ~/.autoyt/config.yaml
        3. Read and parse YAML content
        4. Validate each section, applying defaults for missing keys
        5. Create and return frozen Config object
    """
    if config_path is None:
        config_path = _find_config_file()
        if config_path is None:
            return _write_default_config(DEFAULT_CONFIG_PATH.expanduser())
    elif not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file means "all defaults"
    if raw_config is None:
        raw_config = {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return parse_config(raw_config)


def parse_config(raw_config: dict[str, Any]) -> Config:
    """
    Build a Config from an already parsed dictionary.

    Raises:
        ConfigError: If a section is not a dictionary or a value is invalid.
    """
    return Config(
        paths=_parse_paths_config(_section(raw_config, "paths")),
        ffmpeg=_parse_ffmpeg_config(_section(raw_config, "ffmpeg")),
        video_format=_parse_video_format(_section(raw_config, "video_format")),
        upload=_parse_upload_config(_section(raw_config, "upload")),
    )


def _find_config_file() -> Path | None:
    for candidate in CONFIG_SEARCH_PATHS:
        path = candidate.expanduser()
        if path.exists():
            return path
    return None


def _write_default_config(path: Path) -> Config:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(default_config_dict(), f, sort_keys=False, allow_unicode=True)
    except OSError as e:
        raise ConfigError(
            f"Failed to write default configuration: {e}",
            details={"file_path": str(path), "original_error": str(e)}
        ) from e
    return parse_config(default_config_dict())


def _section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a dictionary",
            details={"section": name}
        )
    return section


def _string(section: dict[str, Any], section_name: str, key: str, default: str) -> str:
    value = section.get(key, default)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ConfigError(
            f"'{section_name}.{key}' must be a string",
            details={"field": f"{section_name}.{key}", "value": value}
        )
    return value


def _path(section: dict[str, Any], key: str, default: Path) -> Path:
    value = section.get(key)
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(
            f"'paths.{key}' must be a non-empty string",
            details={"field": f"paths.{key}"}
        )
    return Path(value.strip()).expanduser().resolve()


def _parse_paths_config(section: dict[str, Any]) -> PathsConfig:
    defaults = PathsConfig()
    return PathsConfig(
        root=_path(section, "root", defaults.root),
        data=_path(section, "data", defaults.data),
        collections=_path(section, "collections", defaults.collections),
        client_secret=_path(section, "client_secret", defaults.client_secret),
    )


def _parse_ffmpeg_config(section: dict[str, Any]) -> FfmpegConfig:
    defaults = FfmpegConfig()
    ffmpeg = FfmpegConfig(
        **{f.name: _string(section, "ffmpeg", f.name, getattr(defaults, f.name)) for f in fields(FfmpegConfig)}
    )
    if not ffmpeg.path.strip():
        raise ConfigError("'ffmpeg.path' must be a non-empty string", details={"field": "ffmpeg.path"})
    return ffmpeg


def _parse_video_format(section: dict[str, Any]) -> VideoFormat:
    defaults = VideoFormat()
    return VideoFormat(
        **{f.name: _string(section, "video_format", f.name, getattr(defaults, f.name)) for f in fields(VideoFormat)}
    )


def _parse_upload_config(section: dict[str, Any]) -> UploadConfig:
    defaults = UploadConfig()

    tags = section.get("tags")
    if tags is None:
        tags = []
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise ConfigError("'upload.tags' must be a list of strings", details={"field": "upload.tags"})

    privacy = _string(section, "upload", "privacy", defaults.privacy)
    if privacy not in PRIVACY_VALUES:
        raise ConfigError(
            f"'upload.privacy' must be one of: {', '.join(PRIVACY_VALUES)}",
            details={"field": "upload.privacy", "value": privacy}
        )

    # YAML reads an unquoted 10 as an integer
    category_id = section.get("category_id", defaults.category_id)
    if isinstance(category_id, int) and not isinstance(category_id, bool):
        category_id = str(category_id)
    if not isinstance(category_id, str) or not category_id.strip():
        raise ConfigError(
            "'upload.category_id' must be a non-empty string",
            details={"field": "upload.category_id"}
        )

    frequency_days = section.get("frequency_days", defaults.frequency_days)
    if not isinstance(frequency_days, int) or isinstance(frequency_days, bool) or frequency_days < 0:
        raise ConfigError(
            "'upload.frequency_days' must be a non-negative integer",
            details={"field": "upload.frequency_days", "value": frequency_days}
        )

    time_utc = _string(section, "upload", "time_utc", defaults.time_utc)
    try:
        datetime.strptime(time_utc, "%H:%M:%S")
    except ValueError:
        raise ConfigError(
            f"'upload.time_utc' must use the hh:mm:ss format, got '{time_utc}'",
            details={"field": "upload.time_utc", "value": time_utc}
        ) from None

    return UploadConfig(
        tags=tuple(tags),
        privacy=privacy,
        category_id=category_id.strip(),
        frequency_days=frequency_days,
        time_utc=time_utc,
    )
