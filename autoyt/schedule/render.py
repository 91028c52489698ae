"""
Video rendering through ffmpeg.

A music video is a still image looped over the length of the audio:

    ffmpeg -r 1 -loop 1 -i <image> -i <audio> -acodec copy -r 1 -shortest <output>

The input and output arguments come from the ffmpeg section of config.yaml.
The encoder runs synchronously without a timeout while a spinner shows the
video being rendered.
"""

import shlex
import subprocess
from typing import Protocol

from autoyt.core.config import FfmpegConfig
from autoyt.core.exceptions import RenderError
from autoyt.core.logger import get_logger
from autoyt.core.models import Video
from autoyt.core.progress import ActivitySpinner

logger = get_logger(__name__)


# Lines of encoder output kept in a RenderError
STDERR_TAIL_LINES = 10


class Renderer(Protocol):
    def render(self, video: Video) -> None:
        ...


class Editor:
    """
    Renders videos with an ffmpeg compatible encoder.

    Attributes:
        ffmpeg: Encoder path and arguments.
    """

    def __init__(self, ffmpeg: FfmpegConfig) -> None:
        self.ffmpeg = ffmpeg

    @property
    def file_format(self) -> str:
        return self.ffmpeg.file_format

    def command(self, video: Video) -> list[str]:
        """Build the encoder command line for a video."""
        return [
            self.ffmpeg.path,
            *shlex.split(self.ffmpeg.input_args),
            "-i", video.image,
            "-i", video.audio,
            *shlex.split(self.ffmpeg.output_args),
            video.path,
        ]

    def render(self, video: Video) -> None:
        """
        Render video.path from video.image and video.audio.

        Raises:
            RenderError: If the encoder cannot be started or exits with a
                         non-zero status.
        """
        cmd = self.command(video)
        logger.debug(f"Running: {shlex.join(cmd)}")

        with ActivitySpinner("render", video.title):
            try:
                result = subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                )
            except OSError as e:
                raise RenderError(
                    f"Failed to start encoder '{self.ffmpeg.path}': {e}",
                    details={"title": video.title, "command": cmd}
                ) from e

            if result.returncode != 0:
                tail = "\n".join(result.stderr.strip().splitlines()[-STDERR_TAIL_LINES:])
                raise RenderError(
                    f"Failed to render '{video.title}' (exit status {result.returncode}).\n{tail}",
                    details={"title": video.title, "command": cmd, "returncode": result.returncode}
                )
