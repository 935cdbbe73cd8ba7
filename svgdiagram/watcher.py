"""
Live regeneration: watch the source document, re-render, tell viewers.

This module provides:
- A watchdog handler filtered to the single source file
- A debounced regeneration controller driven by the asyncio loop
- Queue-backed subscribers for the reload fan-out
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, AsyncIterator, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .errors import DiagramError, MalformedRequestError, SourceReadError
from .loader import load_document
from .models import DiagramDocument

logger = logging.getLogger(__name__)

RELOAD = "reload"
DEFAULT_DEBOUNCE_SECONDS = 0.1

Loader = Callable[[Path], tuple[dict[str, Any], DiagramDocument]]
Renderer = Callable[[DiagramDocument], str]


class SubscriberClosed(Exception):
    """Raised when sending to a subscriber whose connection has gone away."""


class QueueSubscriber:
    """One viewer connection. ``send`` never blocks; a full queue is a failure."""

    def __init__(self, maxsize: int = 16):
        self.queue: asyncio.Queue[str] = asyncio.Queue(maxsize=maxsize)
        self.closed = False

    def send(self, token: str) -> None:
        if self.closed:
            raise SubscriberClosed("subscriber is closed")
        self.queue.put_nowait(token)

    def close(self) -> None:
        self.closed = True

    async def tokens(self) -> AsyncIterator[str]:
        while not self.closed:
            yield await self.queue.get()


class LiveRegenerationController:
    """
    Owns the current document, its raw mapping, the rendered artifact and the
    subscriber set.

    Change notifications re-arm a ``loop.call_later`` timer, so a burst of
    notifications inside the debounce window causes one regeneration. The
    artifact is swapped only after a successful render; failures keep the
    previous one.
    """

    def __init__(
        self,
        source: Path,
        render: Renderer,
        load: Loader = load_document,
        *,
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
    ):
        self.source = source
        self.render = render
        self.load = load
        self.debounce = debounce

        self.document: DiagramDocument | None = None
        self.data: dict[str, Any] | None = None
        self.artifact: str | None = None
        self.subscribers: list[QueueSubscriber] = []
        self.regenerations = 0

        self._timer: asyncio.TimerHandle | None = None

    def start(self) -> str:
        """Initial load and render. Errors propagate: a bad source at startup is fatal."""
        data, document = self.load(self.source)
        artifact = self.render(document)
        self._swap(data, document, artifact)
        return artifact

    def subscribe(self) -> QueueSubscriber:
        subscriber = QueueSubscriber()
        self.subscribers.append(subscriber)
        return subscriber

    def unsubscribe(self, subscriber: QueueSubscriber) -> None:
        subscriber.close()
        if subscriber in self.subscribers:
            self.subscribers.remove(subscriber)

    def notify_change(self) -> None:
        """Schedule a regeneration after the debounce window; must run on the loop."""
        loop = asyncio.get_running_loop()
        if self._timer is not None:
            self._timer.cancel()
        self._timer = loop.call_later(self.debounce, self._fire)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        self._timer = None
        self.regenerate()

    def regenerate(self) -> bool:
        """Reload and re-render; on success swap state and broadcast ``reload``."""
        try:
            data, document = self.load(self.source)
            artifact = self.render(document)
        except (SourceReadError, MalformedRequestError) as exc:
            logger.warning("Regeneration skipped, keeping last good diagram: %s", exc)
            return False
        except DiagramError as exc:
            logger.warning("Render failed, keeping last good diagram: %s", exc)
            return False
        except Exception:
            logger.exception("Unexpected failure while regenerating %s", self.source)
            return False

        self._swap(data, document, artifact)
        self.regenerations += 1
        logger.info("Regenerated %s (%d bytes)", self.source, len(artifact))
        self.broadcast(RELOAD)
        return True

    def _swap(self, data: dict[str, Any], document: DiagramDocument, artifact: str) -> None:
        self.data = data
        self.document = document
        self.artifact = artifact

    def broadcast(self, token: str = RELOAD) -> int:
        """Deliver ``token`` to every live subscriber; prune the ones that fail."""
        delivered = 0
        for subscriber in list(self.subscribers):
            try:
                subscriber.send(token)
            except Exception as exc:
                logger.debug("Dropping subscriber: %r", exc)
                self.unsubscribe(subscriber)
            else:
                delivered += 1
        return delivered


class SourceEventHandler(FileSystemEventHandler):
    """
    Forwards events that touch the source file to ``on_change``.

    Runs on the observer thread; ``on_change`` is responsible for getting back
    onto the event loop.
    """

    def __init__(self, source: Path, on_change: Callable[[], None]):
        super().__init__()
        self.source = source.resolve()
        self.on_change = on_change

    def _matches(self, path: str | bytes | None) -> bool:
        if not path:
            return False
        if isinstance(path, bytes):
            path = path.decode()
        return Path(path).resolve() == self.source

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        if event.event_type not in ("created", "modified", "moved"):
            return
        if self._matches(event.src_path) or self._matches(getattr(event, "dest_path", None)):
            self.on_change()


def watch_source(source: Path, on_change: Callable[[], None]) -> tuple[Observer, SourceEventHandler]:
    """
    Start watching the directory holding ``source``.

    Returns:
        Tuple of (observer, handler) - caller should call observer.stop() to stop watching
    """
    handler = SourceEventHandler(source, on_change)
    observer = Observer()
    observer.schedule(handler, str(source.resolve().parent), recursive=False)
    observer.start()
    return observer, handler


def watch_controller(
    controller: LiveRegenerationController, loop: asyncio.AbstractEventLoop
) -> tuple[Observer, SourceEventHandler]:
    """Wire a watchdog observer to ``controller`` through ``loop``."""
    return watch_source(controller.source, lambda: loop.call_soon_threadsafe(controller.notify_change))
