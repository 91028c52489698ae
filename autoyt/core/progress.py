"""
Progress indication for autoyt using the Rich library.

Rendering, downloading and uploading block the process while an external
program or the network does the work. ActivitySpinner shows that something
is happening during that time:

    render: Artist - Song ⠋ 0:00:12

and replaces the line with a final status once the work is done:

    render: Artist - Song

Usage:
    with ActivitySpinner("render", video.title):
        subprocess.run(...)

    # Manual control
    spinner = ActivitySpinner("upload", str(video))
    spinner.start()
    ...
    spinner.stop(final_message=f"{video}")
"""

import threading
from typing import Optional

from rich import get_console
from rich.console import Console, JustifyMethod, OverflowMethod
from rich.progress import (
    Progress,
    ProgressColumn,
    SpinnerColumn,
    Task,
    TaskID,
    TimeElapsedColumn,
)
from rich.style import StyleType
from rich.text import Text
from rich.theme import Theme


PROGRESS_THEME = Theme({
    "progress.spinner": "bold cyan",
    "progress.elapsed": "grey50",
})

# Time between two spinner frames
TICK_INTERVAL = 0.06


class SizedTextColumn(ProgressColumn):
    """
    Text column truncated with an ellipsis when it exceeds a fixed width.

    Long video titles would otherwise wrap and leave stale spinner lines.
    """

    def __init__(
        self,
        text_format: str,
        style: StyleType = "none",
        justify: JustifyMethod = "left",
        markup: bool = False,
        overflow: Optional[OverflowMethod] = "ellipsis",
        width: int = 60,
    ) -> None:
        self.text_format = text_format
        self.justify: JustifyMethod = justify
        self.style = style
        self.markup = markup
        self.overflow: Optional[OverflowMethod] = overflow
        self.width = width
        super().__init__()

    def render(self, task: Task) -> Text:
        _text = self.text_format.format(task=task)
        if self.markup:
            text = Text.from_markup(_text, style=self.style, justify=self.justify)
        else:
            text = Text(_text, style=self.style, justify=self.justify)
        text.truncate(max_width=self.width, overflow=self.overflow)
        return text


class ActivitySpinner:
    """
    Spinner shown while a single blocking operation runs.

    A dedicated ticker thread redraws the spinner every TICK_INTERVAL
    seconds until the cancellation token is set. stop() sets the token,
    joins the ticker and stops the live display before the final status
    line is printed, so the last frame can never appear after it.

    Attributes:
        step: Short name of the operation ("render", "download", "upload").
        subject: What the operation works on (title, URL, ...).
        cancelled: The cancellation token. Set once the spinner is stopped.
    """

    def __init__(
        self,
        step: str,
        subject: str,
        console: Console | None = None,
        interval: float = TICK_INTERVAL,
    ) -> None:
        self.step = step
        self.subject = subject
        self.interval = interval
        self.cancelled = threading.Event()

        self.console = console or get_console()
        self.progress = Progress(
            SizedTextColumn("[bold cyan]{task.description}:[/bold cyan]", markup=True, width=10),
            SizedTextColumn("{task.fields[subject]}", width=60),
            SpinnerColumn(spinner_name="dots"),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
            auto_refresh=False,
        )

        self.task_id: TaskID | None = None
        self._ticker: threading.Thread | None = None
        self._started = False

    def __enter__(self) -> "ActivitySpinner":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        # Only report completion when the operation succeeded
        if exc_type is None:
            self.stop(final_message=self.subject)
        else:
            self.stop()

    def start(self) -> None:
        if self._started:
            return
        self.console.push_theme(PROGRESS_THEME)
        self.progress.start()
        self.task_id = self.progress.add_task(self.step, total=None, subject=self.subject)
        self._ticker = threading.Thread(target=self._tick, name=f"spinner-{self.step}", daemon=True)
        self._started = True
        self._ticker.start()

    def _tick(self) -> None:
        while not self.cancelled.wait(self.interval):
            self.progress.refresh()

    def stop(self, final_message: str | None = None) -> None:
        """
        Stop the spinner and optionally print a final status line.

        Args:
            final_message: Text printed after the step name once the
                           spinner is gone. None prints nothing.
        """
        if self._started:
            self.cancelled.set()
            if self._ticker is not None:
                self._ticker.join()
            self.progress.stop()
            self.console.pop_theme()
            self._started = False
        if final_message is not None:
            line = Text.assemble((f"{self.step}:", "bold cyan"), " ", final_message)
            self.console.print(line, highlight=False)


__all__ = [
    "PROGRESS_THEME",
    "SizedTextColumn",
    "ActivitySpinner",
]
