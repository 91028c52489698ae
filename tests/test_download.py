"""Test artwork download"""

from unittest.mock import Mock

import pytest
import requests

from autoyt.core.exceptions import DownloadError, UnknownExtensionError
from autoyt.library.download import ArtworkDownloader, has_image_extension, url_file_name


class TestUrlFileName:
    """Test local names derived from URLs"""

    @pytest.mark.parametrize("url,expected", [
        ("https://example.com/images/cover.png", "cover.png"),
        ("https://example.com/images/my%20cover.jpg?size=large", "my cover.jpg"),
        ("https://example.com/images/1234/", "1234"),
        ("https://example.com", ""),
    ])
    def test_url_file_name(self, url, expected):
        assert url_file_name(url) == expected

    def test_has_image_extension(self):
        assert has_image_extension("cover.jpeg")
        assert not has_image_extension("cover.webp")
        assert not has_image_extension("1234")


class TestArtworkDownloader:
    """Test downloading into the cache directory"""

    @pytest.fixture
    def session(self):
        response = Mock()
        response.iter_content.return_value = [b"abc", b"", b"def"]
        session = Mock()
        session.get.return_value = response
        return session

    def test_destination(self, temp_dir):
        downloader = ArtworkDownloader(temp_dir)

        assert downloader.destination("https://x.org/a.png") == temp_dir / ".cache" / "a.png"

    def test_destination_with_extension(self, temp_dir):
        downloader = ArtworkDownloader(temp_dir, extension=".jpg")

        assert downloader.destination("https://x.org/images/1234") == temp_dir / ".cache" / "1234.jpg"

    def test_unknown_extension(self, temp_dir, session):
        downloader = ArtworkDownloader(temp_dir, session=session)

        with pytest.raises(UnknownExtensionError) as exc_info:
            downloader.fetch("https://x.org/images/1234")

        assert str(exc_info.value) == "Cannot determine file extension, use --ext option."
        session.get.assert_not_called()

    def test_fetch(self, temp_dir, session):
        downloader = ArtworkDownloader(temp_dir, session=session)

        path = downloader.fetch("https://x.org/a.png")

        session.get.assert_called_once_with("https://x.org/a.png", stream=True)
        assert path == temp_dir / ".cache" / "a.png"
        assert path.read_bytes() == b"abcdef"

    def test_http_error(self, temp_dir, session):
        session.get.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError("404 Not Found")
        downloader = ArtworkDownloader(temp_dir, session=session)

        with pytest.raises(DownloadError) as exc_info:
            downloader.fetch("https://x.org/a.png")

        assert str(exc_info.value) == "Failed to download 'https://x.org/a.png' (404 Not Found)."
        assert not (temp_dir / ".cache" / "a.png").exists()

    def test_connection_error(self, temp_dir, session):
        session.get.side_effect = requests.exceptions.ConnectionError("refused")
        downloader = ArtworkDownloader(temp_dir, session=session)

        with pytest.raises(DownloadError):
            downloader.fetch("https://x.org/a.png")
