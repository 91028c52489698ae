"""
Scheduling of music videos.

`autoyt schedule` pairs the buffers (see pairing.py), renders one video per
pair and gives every video a publish time. Publish times continue after the
latest scheduled video:

    upload.frequency_days: 2, upload.time_utc: "18:00:00"
    latest scheduled video  2024-05-01 18:00 UTC
    new videos              2024-05-03 18:00, 2024-05-05 18:00, ...

A slot that is not in the future collapses to "now", i.e. the video is
published as soon as it is uploaded.
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from pathlib import Path
from typing import Callable

from autoyt.core.config import Config, VideoFormat
from autoyt.core.database import Collections
from autoyt.core.exceptions import (
    EmptyScheduleError,
    InvalidUploadTimeError,
    PublishedVideoError,
)
from autoyt.core.logger import get_logger
from autoyt.core.models import ItemState, Video, sort_videos
from autoyt.schedule.composer import VideoBuilder
from autoyt.schedule.pairing import new_schedule
from autoyt.schedule.render import Editor, Renderer

logger = get_logger(__name__)


# Number of newest videos searched for the latest publish time
LATEST_SCHEDULED_WINDOW = 256

UPLOAD_TIME_FORMAT = "%H:%M:%S"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def latest_scheduled_time(schedule: list[Video]) -> datetime | None:
    """
    Return the latest publish time among the newest videos of the schedule.

    Only the last LATEST_SCHEDULED_WINDOW videos are searched. Returns None
    when none of them has a publish time.
    """
    times = [v.publish_at for v in schedule[-LATEST_SCHEDULED_WINDOW:] if v.publish_at is not None]
    if not times:
        return None
    return max(times)


def parse_upload_time(value: str) -> time:
    """
    Parse an hh:mm:ss time of day.

    Raises:
        InvalidUploadTimeError: If value is not a valid hh:mm:ss time.
    """
    try:
        return datetime.strptime(value, UPLOAD_TIME_FORMAT).time()
    except ValueError:
        raise InvalidUploadTimeError(value) from None


def merge_date_time_utc(date: datetime, time_of_day: time) -> datetime:
    """Combine the calendar date of date with time_of_day, in UTC."""
    return datetime(
        date.year,
        date.month,
        date.day,
        time_of_day.hour,
        time_of_day.minute,
        time_of_day.second,
        tzinfo=timezone.utc,
    )


@dataclass(frozen=True)
class SchedulerSettings:
    data_dir: Path
    video_format: VideoFormat
    extension: str
    frequency_days: int
    time_utc: str

    @classmethod
    def from_config(cls, config: Config) -> "SchedulerSettings":
        return cls(
            data_dir=config.paths.data,
            video_format=config.video_format,
            extension=config.ffmpeg.file_format,
            frequency_days=config.upload.frequency_days,
            time_utc=config.upload.time_utc,
        )


class Scheduler:
    """
    Turns paired buffers into scheduled videos.

    Attributes:
        collections: The collections to schedule from and into.
        settings: Paths, templates and publishing rhythm.
        renderer: Produces the video files. An Editor by default.
        clock: Returns the current time (aware, UTC).

    Example:
        scheduler = Scheduler(collections, SchedulerSettings.from_config(config), Editor(config.ffmpeg))
        videos = scheduler.render_all()
    """

    def __init__(
        self,
        collections: Collections,
        settings: SchedulerSettings,
        renderer: Renderer,
        clock: Clock = utc_now,
    ) -> None:
        self.collections = collections
        self.settings = settings
        self.renderer = renderer
        self.clock = clock

    @classmethod
    def from_config(cls, collections: Collections, config: Config) -> "Scheduler":
        return cls(collections, SchedulerSettings.from_config(config), Editor(config.ffmpeg))

    def schedule_time(self, start: datetime, position: int) -> datetime:
        """
        Compute the slot of the position-th new video (1-based).

        Raises:
            InvalidUploadTimeError: If the configured upload time is invalid.
        """
        time_of_day = parse_upload_time(self.settings.time_utc)
        date = start.astimezone(timezone.utc) + timedelta(days=position * self.settings.frequency_days)
        return merge_date_time_utc(date, time_of_day)

    def unique_video_path(self, path: str) -> str:
        """
        Return path, or path with a " (n)" suffix if an entity already uses it.

        Tracks sharing "by" and title ("A - Song.mp3", "A - Song.wav") yield
        the same video title.

        Example:
            "<data>/schedule/A - Song.mp4" -> "<data>/schedule/A - Song (2).mp4"
        """
        candidate = Path(path)
        n = 1
        while self.collections.find(str(candidate)) is not None:
            n += 1
            candidate = Path(path).with_name(f"{Path(path).stem} ({n}){Path(path).suffix}")
        if n > 1:
            logger.debug(f"{path} is taken, using {candidate}")
        return str(candidate)

    def render_all(self) -> list[Video]:
        """
        Render and schedule a video for every pair of buffered items.

        Videos are built, rendered and appended oldest pair first. A render
        failure stops the batch; videos rendered before it stay scheduled in
        memory.

        Returns:
            The new videos in schedule order.

        Raises:
            NoBufferedTrackError, NoBufferedArtworkError: If nothing can be paired.
            InvalidUploadTimeError: If the configured upload time is invalid.
            TemplateError: If a video_format template cannot be resolved.
            RenderError: If the encoder fails.
        """
        schedule = new_schedule(self.collections)
        parse_upload_time(self.settings.time_utc)

        now = self.clock()
        start = latest_scheduled_time(self.collections.schedule) or now
        logger.debug(f"Scheduling {schedule.count} videos after {start.isoformat()}")

        videos = []
        # Pairs are most recent first, publish them oldest first
        for i in reversed(range(schedule.count)):
            track = schedule.tracks[i]
            artwork = schedule.artwork[i]

            builder = VideoBuilder(track, artwork, self.settings.video_format, self.settings.extension)
            video = builder.build(self.collections, self.settings.data_dir)
            video.path = self.unique_video_path(video.path)

            slot = self.schedule_time(start, schedule.count - i)
            video.publish_at = slot if slot > now else now

            self.renderer.render(video)

            track.state = ItemState.SCHEDULED
            artwork.state = ItemState.SCHEDULED
            video.state = ItemState.SCHEDULED
            self.collections.schedule.append(video)
            videos.append(video)
            logger.debug(f"Scheduled {video}")

        return videos

    def undo(self) -> Video:
        """
        Unschedule the last video, buffering its track and artwork again.

        The rendered file is deleted.

        Raises:
            EmptyScheduleError: If the schedule is empty.
            PublishedVideoError: If the last video was already published.
        """
        if not self.collections.schedule:
            raise EmptyScheduleError()

        video = self.collections.schedule[-1]
        if video.state == ItemState.PUBLISHED:
            raise PublishedVideoError(video.title)

        track = self.collections.find_track(video.audio)
        if track is not None:
            track.state = ItemState.BUFFERED
        artwork = self.collections.find_artwork(video.image)
        if artwork is not None:
            artwork.state = ItemState.BUFFERED

        self.collections.schedule.pop()

        try:
            Path(video.path).unlink()
        except FileNotFoundError:
            logger.warning(f"Rendered video already gone: {video.path}")

        logger.info(f"undo: {video.title}")
        return video


def format_schedule(schedule: list[Video], skip_last: int = 0, now: datetime | None = None) -> list[str]:
    """
    Number the videos that are still to be published.

    A video is listed when it is SCHEDULED, or when it was uploaded with a
    publish time that is still in the future.

    Args:
        schedule: Videos in schedule order. Not modified.
        skip_last: Number of newest videos left out.
        now: Current time, defaults to utc_now().

    Returns:
        Lines of the form "1. Title @(2024-05-01 12:00)".
    """
    now = now or utc_now()
    videos = schedule[:len(schedule) - skip_last] if skip_last else list(schedule)

    lines = []
    for video in sort_videos(videos):
        pending = video.publish_at is not None and video.publish_at > now
        if video.state != ItemState.SCHEDULED and not pending:
            continue
        lines.append(f"{len(lines) + 1}. {video}")
    return lines
