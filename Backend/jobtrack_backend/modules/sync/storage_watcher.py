import asyncio
import logging
import os
from concurrent.futures import Future
from pathlib import Path
from typing import Optional

from watchdog.events import FileSystemEventHandler, FileSystemEvent, FileMovedEvent, DirMovedEvent, \
    FileModifiedEvent, DirModifiedEvent, FileCreatedEvent, DirCreatedEvent
from watchdog.observers import Observer

from jobtrack_backend.modules.sync.base import StorageChangeListener

logger = logging.getLogger(__name__)


class StorageFileHandler(FileSystemEventHandler):
    """Forwards file system events that touch the local storage file.

    Notifications are best effort and also fire for our own writes; the
    listener re-reads whatever is on disk when it runs.
    """

    def __init__(self, file_path: str, listener: StorageChangeListener,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        super().__init__()
        self.watched_path = os.path.realpath(file_path)
        self.listener = listener
        self.loop = loop

    def on_created(self, event: DirCreatedEvent | FileCreatedEvent) -> None:
        self._on_filtered_event(event.src_path)

    def on_modified(self, event: DirModifiedEvent | FileModifiedEvent) -> None:
        self._on_filtered_event(event.src_path)

    def on_moved(self, event: DirMovedEvent | FileMovedEvent) -> None:
        # Storage writes land through a temp file renamed over the original
        self._on_filtered_event(event.dest_path)

    def _on_filtered_event(self, path) -> None:
        if isinstance(path, bytes):
            path = os.fsdecode(path)
        if os.path.realpath(path) != self.watched_path:
            return
        self.notify()

    def notify(self) -> Optional[Future]:
        if self.loop is None:
            logger.debug(f"Storage changed but no event loop is attached: {self.watched_path}")
            return None
        return asyncio.run_coroutine_threadsafe(self._dispatch(), self.loop)

    async def _dispatch(self) -> None:
        try:
            await self.listener.on_storage_change()
        except Exception as e:
            logger.error(f"Error re-hydrating after storage change: {e}")


class StorageFileWatcher:
    """Watches the local storage file for writes made by other processes"""

    def __init__(self, file_path: str, listener: StorageChangeListener):
        self.file_path = Path(file_path)
        self.listener = listener
        self._observer: Optional[Observer] = None
        self.handler: Optional[StorageFileHandler] = None

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        if self._observer is not None:
            return
        loop = loop or asyncio.get_running_loop()
        self.handler = StorageFileHandler(str(self.file_path), self.listener, loop)

        self._observer = Observer()
        self._observer.schedule(self.handler, str(self.file_path.parent.resolve()), recursive=False)
        self._observer.start()
        logger.info(f"Watching {self.file_path} for external changes")

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None
        logger.info(f"Stopped watching {self.file_path}")
