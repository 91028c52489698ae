"""Test the ffmpeg renderer"""

import subprocess
from unittest.mock import patch

import pytest

from autoyt.core.config import FfmpegConfig
from autoyt.core.exceptions import RenderError
from autoyt.schedule.render import STDERR_TAIL_LINES, Editor


class TestEditor:
    """Test encoder command line and error handling"""

    @pytest.fixture
    def video(self, make_video):
        return make_video("A - Song", None)

    def test_default_command(self, video):
        editor = Editor(FfmpegConfig())

        assert editor.command(video) == [
            "ffmpeg", "-r", "1", "-loop", "1",
            "-i", "/art/A - Song.png",
            "-i", "/music/A - Song.mp3",
            "-acodec", "copy", "-r", "1", "-shortest",
            "/schedule/A - Song.mp4",
        ]

    def test_custom_command(self, video):
        editor = Editor(FfmpegConfig(
            path="/opt/ffmpeg/bin/ffmpeg",
            input_args="-loop 1",
            output_args='-c:v libx264 -metadata comment="made with autoyt"',
            file_format=".mkv",
        ))

        cmd = editor.command(video)

        assert cmd[:3] == ["/opt/ffmpeg/bin/ffmpeg", "-loop", "1"]
        assert cmd[-3:] == ["-metadata", "comment=made with autoyt", "/schedule/A - Song.mp4"]
        assert editor.file_format == ".mkv"

    @patch("autoyt.schedule.render.subprocess.run")
    def test_render(self, mock_run, video):
        mock_run.return_value = subprocess.CompletedProcess([], 0, stdout="", stderr="")
        editor = Editor(FfmpegConfig())

        editor.render(video)

        mock_run.assert_called_once()
        args, kwargs = mock_run.call_args
        assert args[0] == editor.command(video)
        assert kwargs["capture_output"] is True

    @patch("autoyt.schedule.render.subprocess.run")
    def test_render_failure(self, mock_run, video):
        stderr = "\n".join(f"line {i}" for i in range(30))
        mock_run.return_value = subprocess.CompletedProcess([], 1, stdout="", stderr=stderr)

        with pytest.raises(RenderError) as exc_info:
            Editor(FfmpegConfig()).render(video)

        message = str(exc_info.value)
        assert message.startswith("Failed to render 'A - Song' (exit status 1).")
        assert "line 29" in message
        assert f"line {29 - STDERR_TAIL_LINES}" not in message
        assert exc_info.value.details["returncode"] == 1

    @patch("autoyt.schedule.render.subprocess.run")
    def test_encoder_missing(self, mock_run, video):
        mock_run.side_effect = FileNotFoundError("No such file or directory: 'ffmpeg'")

        with pytest.raises(RenderError) as exc_info:
            Editor(FfmpegConfig()).render(video)

        assert "Failed to start encoder 'ffmpeg'" in str(exc_info.value)
