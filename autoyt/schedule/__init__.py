"""
Schedule module for autoyt.

Turns the buffers into rendered, scheduled videos:
    - pairing: LIFO pairing of buffered tracks and artwork
    - composer: Video title, description and path from templates
    - render: ffmpeg invocation
    - scheduler: Publish-time slots, render batch and undo

Usage:
    from autoyt.schedule import Scheduler

    scheduler = Scheduler.from_config(collections, config)
    scheduler.render_all()
"""

from autoyt.schedule.composer import VideoBuilder, preview_videos, substitute
from autoyt.schedule.pairing import Schedule, new_schedule
from autoyt.schedule.render import Editor, Renderer
from autoyt.schedule.scheduler import (
    Scheduler,
    SchedulerSettings,
    format_schedule,
    latest_scheduled_time,
    merge_date_time_utc,
    parse_upload_time,
    utc_now,
)

__all__ = [
    "VideoBuilder",
    "preview_videos",
    "substitute",
    "Schedule",
    "new_schedule",
    "Editor",
    "Renderer",
    "Scheduler",
    "SchedulerSettings",
    "format_schedule",
    "latest_scheduled_time",
    "merge_date_time_utc",
    "parse_upload_time",
    "utc_now",
]
