"""
Utility functions for autoyt.

This module provides common utility functions used across the application:
    - Filename sanitization
    - Path manipulation helpers
    - URL detection for artwork sources

Usage:
    from autoyt.utils import (
        sanitize_filename,
        ensure_directory,
        copy_or_move
    )
"""

import re
import shutil
from pathlib import Path
from urllib.parse import urlparse

from autoyt.core.logger import get_logger

logger = get_logger(__name__)


# Characters that are invalid in filenames on at least one major OS
_INVALID_CHARS_PATTERN = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

_MAX_FILENAME_LENGTH = 200


def sanitize_filename(name: str) -> str:
    """
    Sanitize a string for use in a filename.

    Args:
        name: The string to sanitize (e.g., a video title).

    Returns:
        A sanitized string safe for use in filenames.

    Behavior:
        - Replaces invalid characters with underscores
        - Strips leading/trailing whitespace and dots
        - Truncates to maximum length
        - Returns "Unknown" if result is empty

    Examples:
        sanitize_filename("AC/DC - Thunder")  # "AC_DC - Thunder"
        sanitize_filename("What?")            # "What_"
    """
    if not name:
        return "Unknown"

    result = _INVALID_CHARS_PATTERN.sub("_", name)

    # Dots at start hide files on Unix
    result = result.strip(" .")

    if len(result) > _MAX_FILENAME_LENGTH:
        result = result[:_MAX_FILENAME_LENGTH].rstrip(" .")

    return result if result else "Unknown"


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Path to the directory.

    Returns:
        The same path (for chaining).

    Raises:
        OSError: If directory cannot be created (permissions, etc.)
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def is_url(value: str) -> bool:
    """Return True when value has both a scheme and a host."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def clamp(value: int, lower: int, upper: int) -> int:
    """
    Clamp value into [lower, upper].

    The lower bound wins when lower > upper.
    """
    return max(min(value, upper), lower)


def copy_or_move(src: Path, dst: Path, move: bool = False) -> Path:
    """
    Copy or move a file to dst.

    Nothing happens when src and dst are the same file.

    Raises:
        OSError: If the file cannot be copied or moved.
    """
    if src.resolve() == dst.resolve():
        return dst
    if move:
        logger.debug(f"Moving {src} -> {dst}")
        shutil.move(str(src), str(dst))
    else:
        logger.debug(f"Copying {src} -> {dst}")
        shutil.copy2(src, dst)
    return dst


__all__ = [
    "sanitize_filename",
    "ensure_directory",
    "is_url",
    "clamp",
    "copy_or_move",
]
