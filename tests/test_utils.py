# tests/test_utils.py
"""Test utilities and helpers"""

import pytest

from autoyt.utils import clamp, copy_or_move, ensure_directory, is_url, sanitize_filename


class TestHelpers:
    """Test helper functions"""

    def test_sanitize_filename(self):
        """Test filename sanitization"""
        assert sanitize_filename("AC/DC - Thunder") == "AC_DC - Thunder"
        assert sanitize_filename("What?") == "What_"
        assert sanitize_filename(" .hidden. ") == "hidden"
        assert sanitize_filename("") == "Unknown"
        assert sanitize_filename("...") == "Unknown"
        assert len(sanitize_filename("a" * 300)) == 200

    @pytest.mark.parametrize("value,expected", [
        ("https://example.com/a.png", True),
        ("http://example.com", True),
        ("/home/user/a.png", False),
        ("a.png", False),
        ("file:///a.png", False),
    ])
    def test_is_url(self, value, expected):
        """Test URL detection"""
        assert is_url(value) is expected

    def test_clamp(self):
        """Test clamping, lower bound wins"""
        assert clamp(5, 1, 10) == 5
        assert clamp(0, 1, 10) == 1
        assert clamp(20, 1, 10) == 10
        assert clamp(5, 3, 2) == 3


class TestFiles:
    """Test file helpers"""

    def test_ensure_directory(self, temp_dir):
        path = temp_dir / "a" / "b"

        assert ensure_directory(path) == path
        assert path.is_dir()
        ensure_directory(path)

    def test_copy(self, temp_dir):
        src = temp_dir / "src.mp3"
        src.write_bytes(b"audio")

        dst = copy_or_move(src, temp_dir / "dst.mp3")

        assert src.exists()
        assert dst.read_bytes() == b"audio"

    def test_move(self, temp_dir):
        src = temp_dir / "src.mp3"
        src.write_bytes(b"audio")

        dst = copy_or_move(src, temp_dir / "dst.mp3", move=True)

        assert not src.exists()
        assert dst.read_bytes() == b"audio"

    def test_same_file(self, temp_dir):
        src = temp_dir / "src.mp3"
        src.write_bytes(b"audio")

        assert copy_or_move(src, temp_dir / "." / "src.mp3", move=True) == temp_dir / "." / "src.mp3"
        assert src.read_bytes() == b"audio"

    def test_missing_source(self, temp_dir):
        with pytest.raises(OSError):
            copy_or_move(temp_dir / "missing.mp3", temp_dir / "dst.mp3")
