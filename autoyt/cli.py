"""
Command-line interface for autoyt.

This module implements the CLI using Click, providing all commands of the
music video pipeline. rich-click is used for the help output colors.

Commands:
    autoyt add music <path>             Add tracks to the buffer
    autoyt add art <path|url> -a <name> Add artwork to the buffer
    autoyt add music|art undo           Remove the last added item
    autoyt desc [items...]              Preview or edit video descriptions
    autoyt desc <links...> -l <artist>  Add links to an artist
    autoyt schedule                     Render and schedule buffered pairs
    autoyt schedule undo                Unschedule the last video
    autoyt schedule list                List videos waiting to be published
    autoyt upload                       Upload scheduled videos to YouTube
    autoyt status                       Count scheduled and published videos
    autoyt json                         Print the collections as JSON

Usage:
    # Buffer a folder of tracks and an image from the web
    autoyt add music ~/Music/new
    autoyt add art "https://example.com/cover.png" -a "Snatti89"

    # Check the description of the next video, then render
    autoyt desc
    autoyt schedule

    # Publish
    autoyt upload

Configuration:
    See autoyt.core.config for the config.yaml search paths and keys.

Exit codes:
    1    Configuration or user error
    2    Collections file error
    3    Download, render or upload failure
    70   Internal error
    130  Interrupted
"""

import sys
from pathlib import Path
from typing import Callable, Optional

import rich_click as click

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.OPTION_GROUPS = {
    "autoyt add": [
        {
            "name": "Metadata",
            "options": ["--artist", "--by", "--name", "--description"],
        },
        {
            "name": "Files",
            "options": ["--mv", "--ext"],
        },
    ],
    "autoyt desc": [
        {
            "name": "Selection",
            "options": ["-n", "-c", "--all"],
        },
        {
            "name": "Artists",
            "options": ["--link-artist"],
        },
    ],
}

from autoyt import __version__
from autoyt.core import (
    AutoYtError,
    Collections,
    CollectionsIntegrityError,
    Config,
    ConfigError,
    DatabaseError,
    DownloadError,
    EmptyScheduleError,
    RenderError,
    UploadError,
    Video,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from autoyt.library import ART, KINDS, AddOptions, ArtworkDownloader, add_files, undo_last
from autoyt.schedule import Scheduler, format_schedule, preview_videos
from autoyt.upload import YouTubeClient, upload_scheduled_videos
from autoyt.utils import ensure_directory

logger = get_logger(__name__)


EXIT_USER_ERROR = 1
EXIT_DATABASE_ERROR = 2
EXIT_COLLABORATOR_ERROR = 3
EXIT_INTERNAL_ERROR = 70
EXIT_INTERRUPTED = 130

Action = Callable[[Config, Collections], None]


@click.group(invoke_without_command=True)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Use this configuration file instead of searching for one"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], version: bool) -> None:
    """
    autoyt: Turn music and artwork into scheduled YouTube music videos.

    Tracks and artwork are collected in a buffer, paired most recent first,
    rendered with ffmpeg and published on a fixed rhythm.

    \b
    BASIC USAGE:
        autoyt add music "A - Song.mp3"          # Buffer a track
        autoyt add art cover.png -a "Artist"     # Buffer artwork
        autoyt schedule                          # Render and schedule
        autoyt upload                            # Upload to YouTube
    """
    if version:
        click.echo(f"autoyt {__version__}")
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(1)

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.argument("kind", type=click.Choice(KINDS))
@click.argument("source", metavar="PATH|URL|undo")
@click.option("-a", "--artist", default="", help="Artist names, comma separated")
@click.option("--by", default="", help="Override the 'by' part of the track title")
@click.option("-n", "--name", default="", help="Override the track title")
@click.option("-d", "--description", default="", help="Text added to the video description")
@click.option("--mv", "move_file", is_flag=True, help="Move files instead of copying them")
@click.option("--ext", "extension", default="", metavar="<.ext>", help="Extension for downloaded artwork")
@click.pass_context
def add(
    ctx: click.Context,
    kind: str,
    source: str,
    artist: str,
    by: str,
    name: str,
    description: str,
    move_file: bool,
    extension: str,
) -> None:
    """
    Add music or art to the buffer.

    PATH can be a file or a directory. For art it can also be an image URL.
    Use "undo" instead of a path to remove the last added item.
    """
    if source == "undo":
        _run_command(ctx.obj, lambda config, collections: undo_last(collections, kind))
        return

    if kind == ART and not artist.strip():
        raise click.UsageError("Artwork needs an artist, use -a <artist>.")

    if extension and not extension.startswith("."):
        extension = "." + extension

    options = AddOptions(
        artist=artist,
        by=by,
        name=name,
        description=description,
        move_file=move_file,
        extension=extension,
    )

    def action(config: Config, collections: Collections) -> None:
        downloader = ArtworkDownloader(config.paths.data, extension=extension or None)
        add_files(collections, kind, source, config.paths.data, options, downloader=downloader)

    _run_command(ctx.obj, action)


@cli.command()
@click.argument("items", nargs=-1)
@click.option("-n", "n", type=int, default=1, show_default=True, help="First video to describe")
@click.option("-c", "count", type=int, default=1, show_default=True, help="Last video to describe")
@click.option("-a", "--all", "show_all", is_flag=True, help="Describe every buffered video")
@click.option("-l", "--link-artist", default="", metavar="<artist>", help="Add ITEMS as links of an artist")
@click.pass_context
def desc(
    ctx: click.Context,
    items: tuple[str, ...],
    n: int,
    count: int,
    show_all: bool,
    link_artist: str,
) -> None:
    """
    Preview or edit video descriptions before scheduling.

    Without ITEMS, shows the description of the next video. With ITEMS,
    each item becomes a line of the description of video N. With -l, ITEMS
    are links added to the credits of an artist.
    """
    def action(config: Config, collections: Collections) -> None:
        if items and link_artist:
            artist = collections.update_artist_links(link_artist, list(items))
            logger.info(f"desc: {artist.name} ({len(artist.links)} links)")
            return

        videos = preview_videos(
            collections,
            config.video_format,
            config.ffmpeg.file_format,
            n=n,
            count=count,
            show_all=show_all,
            description_lines=list(items) or None,
        )
        for video in videos:
            click.echo()
            _describe_video(video)
            click.echo()

    _run_command(ctx.obj, action)


@cli.command()
@click.argument("function", required=False, type=click.Choice(["undo", "list"]))
@click.option("-s", "--short", is_flag=True, help="Only list the schedule")
@click.pass_context
def schedule(ctx: click.Context, function: Optional[str], short: bool) -> None:
    """
    Render and schedule every buffered track and artwork pair.

    "undo" unschedules the last video. "list" shows the videos waiting to
    be published and the full description of the newest one.
    """
    if function == "list":
        _run_command(ctx.obj, lambda config, collections: _list_schedule(collections, short), save=False)
        return

    if function == "undo":
        _run_command(ctx.obj, lambda config, collections: Scheduler.from_config(collections, config).undo())
        return

    def action(config: Config, collections: Collections) -> None:
        videos = Scheduler.from_config(collections, config).render_all()
        logger.debug(f"Rendered {len(videos)} videos")
        logger.info(f"status: {collections.video_status()}")

    _run_command(ctx.obj, action)


@cli.command()
@click.pass_context
def upload(ctx: click.Context) -> None:
    """Upload every scheduled video to YouTube."""
    def action(config: Config, collections: Collections) -> None:
        client = YouTubeClient(config.paths.client_secret, config.paths.root)
        upload_scheduled_videos(collections, client, config.upload)

    _run_command(ctx.obj, action)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Print the number of scheduled and published videos."""
    _run_command(ctx.obj, lambda config, collections: click.echo(collections.video_status()), save=False)


@cli.command("json")
@click.pass_context
def json_command(ctx: click.Context) -> None:
    """Print the stored collections as JSON."""
    _run_command(ctx.obj, lambda config, collections: click.echo(collections.to_json()), save=False)


def _run_command(options: dict, action: Action, save: bool = True) -> None:
    """
    Run a command against the stored collections.

    This is the common frame of every command:
    1. Loads configuration
    2. Sets up logging
    3. Loads the collections
    4. Runs the command
    5. Saves the collections, only if the command completed

    Args:
        options: Dictionary with CLI options from click context.
        action: The command, called with the config and the collections.
        save: Whether the command modifies the collections.

    Raises:
        SystemExit: On errors (with appropriate exit code).
    """
    try:
        config = _load_configuration(options.get("config_path"))

        setup_logging(config.paths.root)
        logger.debug(f"autoyt {__version__} starting")

        collections = Collections.load(config.paths.collections)

        action(config, collections)

        if save:
            ensure_directory(config.paths.root)
            collections.save(config.paths.collections)

    except ConfigError as e:
        click.echo(f"error: {e.message}", err=True)
        sys.exit(EXIT_USER_ERROR)

    except DatabaseError as e:
        click.echo(f"error: {e.message}", err=True)
        logger.error(f"Database error: {e.message}", exc_info=True)
        sys.exit(EXIT_DATABASE_ERROR)

    except (DownloadError, RenderError, UploadError) as e:
        click.echo(f"error: {e.message}", err=True)
        logger.error(f"{type(e).__name__}: {e.message}", exc_info=True)
        sys.exit(EXIT_COLLABORATOR_ERROR)

    except AutoYtError as e:
        click.echo(f"error: {e.message}", err=True)
        logger.debug(f"{type(e).__name__}: {e.message}", exc_info=True)
        sys.exit(EXIT_USER_ERROR)

    except CollectionsIntegrityError as e:
        click.echo(f"internal error: {e}", err=True)
        logger.exception("Collections integrity error")
        sys.exit(EXIT_INTERNAL_ERROR)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("interrupted: nothing was saved")
        sys.exit(EXIT_INTERRUPTED)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(EXIT_INTERNAL_ERROR)

    finally:
        shutdown_logging()


def _load_configuration(config_path: Path | None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Raises:
        ConfigError: If configuration is invalid or missing.
    """
    return load_config(config_path)


def _list_schedule(collections: Collections, short: bool) -> None:
    """
    Print the videos waiting to be published.

    The full description is shown for the newest video only, unless
    short is set.
    """
    if not collections.schedule:
        raise EmptyScheduleError()

    if short:
        for line in format_schedule(collections.schedule):
            click.echo(line)
        return

    for line in format_schedule(collections.schedule, skip_last=1):
        click.echo(line)
    click.echo()
    _describe_video(collections.schedule[-1])


def _describe_video(video: Video) -> None:
    heading = str(video)
    click.echo(click.style(heading, fg="cyan"))
    click.echo("-" * len(heading))
    click.echo(video.description)


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `autoyt` from the command line.
    It invokes the Click CLI group.
    """
    cli()


if __name__ == "__main__":
    main()
