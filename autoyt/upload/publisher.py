"""
Publishing of scheduled videos.

`autoyt upload` sends every SCHEDULED video to YouTube, oldest publish time
first. Once YouTube returns the video id, the video, its track and its
artwork are PUBLISHED. The first failing upload stops the command.
"""

from datetime import datetime
from pathlib import Path
from typing import Protocol

from autoyt.core.config import UploadConfig
from autoyt.core.database import Collections
from autoyt.core.exceptions import EmptyScheduleError
from autoyt.core.logger import get_logger, log_video_published
from autoyt.core.models import ItemState, Video, sort_videos
from autoyt.core.progress import ActivitySpinner

logger = get_logger(__name__)


class Uploader(Protocol):
    def upload(
        self,
        video_file: Path,
        title: str,
        description: str,
        tags: list[str],
        privacy: str,
        category_id: str,
        publish_at: datetime | None,
    ) -> str:
        ...


def find_videos_to_upload(collections: Collections) -> list[Video]:
    """
    Return the SCHEDULED videos, immediate publishes first, then by time.

    Raises:
        EmptyScheduleError: If no video is waiting for upload.
    """
    videos = [v for v in collections.schedule if v.state == ItemState.SCHEDULED]
    if not videos:
        raise EmptyScheduleError()
    return sort_videos(videos)


def publish_video(collections: Collections, video: Video, video_id: str) -> None:
    """Record a successful upload on the video, its track and its artwork."""
    video.upload_id = video_id
    video.state = ItemState.PUBLISHED

    track = collections.find_track(video.audio)
    if track is not None:
        track.state = ItemState.PUBLISHED
    artwork = collections.find_artwork(video.image)
    if artwork is not None:
        artwork.state = ItemState.PUBLISHED


def upload_scheduled_videos(
    collections: Collections,
    uploader: Uploader,
    upload_config: UploadConfig,
) -> list[Video]:
    """
    Upload every scheduled video.

    Returns:
        The published videos in upload order.

    Raises:
        EmptyScheduleError: If no video is waiting for upload.
        UploadError: On the first failing upload. Videos uploaded before it
                     stay PUBLISHED.
    """
    videos = find_videos_to_upload(collections)
    logger.debug(f"{len(videos)} videos to upload")

    published = []
    for video in videos:
        spinner = ActivitySpinner("upload", str(video))
        spinner.start()
        try:
            video_id = uploader.upload(
                Path(video.path),
                video.title,
                video.description,
                list(upload_config.tags),
                upload_config.privacy,
                upload_config.category_id,
                video.publish_at,
            )
        finally:
            spinner.stop()

        publish_video(collections, video, video_id)
        log_video_published(logger, video)
        published.append(video)

    return published
