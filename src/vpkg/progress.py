"""Install progress events and the worker/presenter bridge.

The install algorithm reports discrete, ordered ProgressEvents to an optional
listener. run_with_progress() runs an install on a worker thread while the
calling thread drains those events from a queue and hands them to a
presenter. The only signal flowing back to the worker is cancellation.
"""

import logging
import queue
import sys
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import TypeVar

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn

from vpkg.config import FORCE_TUI_ENV, env_flag
from vpkg.feedback import UserFeedback

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProgressStep(IntEnum):
    DISCOVERY = 0
    DOWNLOAD = 1
    RENDER = 2
    INSTALL = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class ProgressEvent:
    """One progress update from an install.

    fraction is the progress within the step, from 0.0 to 1.0. The file
    counters are set during the per-file steps. error is set on the final
    event of a failed install.
    """

    step: ProgressStep
    fraction: float
    description: str
    total_files: int | None = None
    processed: int | None = None
    error: str | None = None


ProgressListener = Callable[[ProgressEvent], None]


class ProgressPresenter(ABC):
    """Consumes progress events on the caller's thread.

    start() and finish() default to doing nothing.
    """

    def start(self) -> None:
        pass

    @abstractmethod
    def update(self, event: ProgressEvent) -> None:
        """Show one event."""

    def finish(self) -> None:
        pass


class FeedbackPresenter(ProgressPresenter):
    """Line-oriented presenter for non-interactive output.

    Prints one line per step change instead of every event.
    """

    def __init__(self, feedback: UserFeedback) -> None:
        self._feedback = feedback
        self._last_step: ProgressStep | None = None

    def update(self, event: ProgressEvent) -> None:
        if event.error is not None:
            self._feedback.error(f"{event.step.label} failed: {event.error}")
            return
        if event.step != self._last_step:
            self._last_step = event.step
            self._feedback.info(f"{event.step.label}: {event.description}")


class RichProgressPresenter(ProgressPresenter):
    """Progress bar presenter for terminals."""

    def __init__(self, console: Console | None = None) -> None:
        self._progress = Progress(
            TextColumn("[bold]{task.fields[step]:<10}"),
            BarColumn(),
            TextColumn("{task.description}"),
            console=console if console is not None else Console(stderr=True),
            transient=False,
        )
        self._task: TaskID | None = None

    def start(self) -> None:
        self._progress.start()
        self._task = self._progress.add_task("Starting", total=len(ProgressStep), step="")

    def update(self, event: ProgressEvent) -> None:
        if self._task is None:
            return
        description = event.description
        if event.total_files:
            description = f"{description} ({event.processed or 0}/{event.total_files})"
        if event.error is not None:
            description = f"[red]{event.error}"
        self._progress.update(
            self._task,
            completed=int(event.step) + event.fraction,
            description=description,
            step=event.step.label,
        )

    def finish(self) -> None:
        self._progress.stop()


def should_use_rich_progress() -> bool:
    """Interactive progress runs on a TTY, or anywhere when VPKG_FORCE_TUI is set."""
    return env_flag(FORCE_TUI_ENV) or sys.stderr.isatty()


@dataclass
class _Done:
    result: object = None
    error: BaseException | None = None


def run_with_progress(
    task: Callable[[ProgressListener, threading.Event], T],
    presenter: ProgressPresenter,
    *,
    cancel: threading.Event | None = None,
) -> T:
    """Run task on a worker thread, presenting its progress events here.

    The task receives a listener to report events to and the cancellation
    event to check. Ctrl-C on the calling thread sets the cancellation event
    and waits for the worker to stop.

    Returns:
        The task's result

    Raises:
        Whatever the task raised, re-raised on the calling thread
    """
    events: queue.Queue[ProgressEvent | _Done] = queue.Queue()
    cancel_event = cancel if cancel is not None else threading.Event()

    def worker() -> None:
        try:
            result = task(events.put, cancel_event)
        except BaseException as e:
            events.put(_Done(error=e))
        else:
            events.put(_Done(result=result))

    thread = threading.Thread(target=worker, name="vpkg-install", daemon=True)
    presenter.start()
    thread.start()
    try:
        while True:
            try:
                item = events.get()
            except KeyboardInterrupt:
                logger.debug("Interrupted, cancelling worker")
                cancel_event.set()
                continue
            if isinstance(item, _Done):
                break
            presenter.update(item)
    finally:
        thread.join()
        presenter.finish()

    if item.error is not None:
        raise item.error
    return item.result  # type: ignore[return-value]
