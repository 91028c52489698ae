"""
Upload module for autoyt.

Publishes rendered videos on YouTube:
    - youtube: OAuth authorization and the videos.insert upload
    - publisher: Selection of scheduled videos and state transitions

Usage:
    from autoyt.upload import YouTubeClient, upload_scheduled_videos

    client = YouTubeClient(config.paths.client_secret, config.paths.root)
    upload_scheduled_videos(collections, client, config.upload)
"""

from autoyt.upload.publisher import (
    Uploader,
    find_videos_to_upload,
    publish_video,
    upload_scheduled_videos,
)
from autoyt.upload.youtube import YouTubeClient, build_upload_body, format_publish_at

__all__ = [
    "Uploader",
    "find_videos_to_upload",
    "publish_video",
    "upload_scheduled_videos",
    "YouTubeClient",
    "build_upload_body",
    "format_publish_at",
]
