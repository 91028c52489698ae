"""
Artwork download for autoyt.

`autoyt add art <url>` accepts an image URL instead of a local file. The
image is downloaded to <data>/.cache and then moved into <data>/art like
any other artwork file.

The local file name is the last segment of the URL path. It must end in one
of IMAGE_EXTENSIONS unless an extension is given explicitly (--ext), since
image URLs often carry no extension at all.
"""

from pathlib import Path
from urllib.parse import unquote, urlparse

import requests

from autoyt.core.exceptions import DownloadError, UnknownExtensionError
from autoyt.core.logger import get_logger
from autoyt.core.progress import ActivitySpinner
from autoyt.utils import ensure_directory

logger = get_logger(__name__)


IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".bmp")

CACHE_DIRNAME = ".cache"

# Size of the chunks streamed to disk
CHUNK_SIZE = 64 * 1024


def has_image_extension(name: str) -> bool:
    return name.endswith(IMAGE_EXTENSIONS)


def url_file_name(url: str) -> str:
    """Return the last segment of the URL path ("" for a bare host)."""
    path = urlparse(url).path
    return unquote(path.rstrip("/").rsplit("/", 1)[-1])


class ArtworkDownloader:
    """
    Downloads artwork images into the data cache directory.

    Attributes:
        data_dir: autoyt data directory; files land in data_dir/.cache.
        extension: Extension appended to the downloaded file name, e.g.
                   ".png". None requires the URL to end in a known image
                   extension.
        session: requests.Session used for the transfer.

    Example:
        downloader = ArtworkDownloader(config.paths.data, extension=".jpg")
        path = downloader.fetch("https://example.com/images/1234")
        # <data>/.cache/1234.jpg
    """

    def __init__(
        self,
        data_dir: Path,
        extension: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.data_dir = data_dir
        self.extension = extension
        self.session = session or requests.Session()

    @property
    def cache_dir(self) -> Path:
        return self.data_dir / CACHE_DIRNAME

    def destination(self, url: str) -> Path:
        """
        Compute the local path for a URL without downloading anything.

        Raises:
            UnknownExtensionError: If no extension is configured and the URL
                                   does not end in a known image extension.
        """
        name = url_file_name(url)
        if self.extension:
            name += self.extension
        elif not has_image_extension(name):
            raise UnknownExtensionError(url)
        return self.cache_dir / name

    def fetch(self, url: str) -> Path:
        """
        Download url into the cache directory.

        No timeout is set: a stalled server stalls the command.

        Returns:
            Path of the downloaded file.

        Raises:
            UnknownExtensionError: If the file extension cannot be determined.
            DownloadError: On HTTP errors, network errors, or when the file
                           cannot be written.
        """
        dst = self.destination(url)
        ensure_directory(self.cache_dir)

        with ActivitySpinner("download", url):
            try:
                response = self.session.get(url, stream=True)
                response.raise_for_status()
                with open(dst, "wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
            except requests.exceptions.RequestException as e:
                raise DownloadError(
                    f"Failed to download '{url}' ({e}).",
                    details={"url": url, "original_error": str(e)}
                ) from e
            except OSError as e:
                raise DownloadError(
                    f"Failed to download '{url}' ({e}).",
                    details={"url": url, "path": str(dst), "original_error": str(e)}
                ) from e

        logger.debug(f"Downloaded {url} -> {dst}")
        return dst
