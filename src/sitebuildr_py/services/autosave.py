"""Debounced autosave of the document being edited."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from sitebuildr_py.core.types import SaveStatus
from sitebuildr_py.exceptions import PersistenceError

if TYPE_CHECKING:
    from sitebuildr_py.core.models import Document
    from sitebuildr_py.storage.base import DocumentStoreProtocol

logger = structlog.get_logger(__name__)

StatusListener = Callable[[SaveStatus], None]


class AutosaveCoordinator:
    """Persists the newest document once edits go quiet.

    Every change marks the coordinator dirty and restarts a quiet-period
    window. A single worker task waits for the window to elapse and sends the
    newest document. Only one save is ever in flight; changes made while a save
    is running are kept and sent in the next window.

    A failed save moves the status to ``ERROR`` and is not retried by the
    coordinator. The next change schedules a new save, and ``save_now`` lets
    the user retry explicitly.

    Status transitions: ``IDLE -> PENDING -> SAVING -> IDLE | ERROR``, and
    ``ERROR -> PENDING`` on the next change.

    Attributes:
        website_id: Website the document is saved under.
        delay: Quiet period in seconds.
        last_error: Message of the most recent failure, cleared on success.
        last_saved_at: When the last successful save completed.
        save_count: Number of successful saves.
    """

    def __init__(self, store: DocumentStoreProtocol, website_id: str, *, delay: float = 1.5) -> None:
        """Initialize the coordinator.

        Args:
            store: Where documents are persisted.
            website_id: Website the document is saved under.
            delay: Quiet period in seconds before a save is sent.
        """
        self._store = store
        self.website_id = website_id
        self.delay = delay
        self.last_error: str | None = None
        self.last_saved_at: datetime | None = None
        self.save_count = 0

        self._status = SaveStatus.IDLE
        self._latest: Document | None = None
        self._dirty = False
        self._saving = False
        self._closed = False
        self._changed = asyncio.Event()
        self._settled = asyncio.Event()
        self._settled.set()
        self._save_lock = asyncio.Lock()
        self._worker: asyncio.Task[None] | None = None
        self._listeners: list[StatusListener] = []

    @property
    def status(self) -> SaveStatus:
        """Current autosave status."""
        return self._status

    @property
    def is_dirty(self) -> bool:
        """Whether there are changes that have not been persisted."""
        return self._dirty

    @property
    def is_saving(self) -> bool:
        """Whether a save request is in flight."""
        return self._saving

    def add_listener(self, listener: StatusListener) -> None:
        """Register a callback invoked on every status transition."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StatusListener) -> None:
        """Unregister a status callback."""
        with contextlib.suppress(ValueError):
            self._listeners.remove(listener)

    def _set_status(self, status: SaveStatus) -> None:
        if status == self._status:
            return
        logger.debug("Autosave status changed", website_id=self.website_id, old=self._status, new=status)
        self._status = status
        if status in (SaveStatus.IDLE, SaveStatus.ERROR):
            self._settled.set()
        else:
            self._settled.clear()
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception:
                logger.exception("Autosave status listener failed", website_id=self.website_id)

    def notify_change(self, document: Document) -> None:
        """Record a new document version and restart the quiet period.

        Must be called from within a running event loop.

        Raises:
            RuntimeError: If the coordinator has been closed.
        """
        if self._closed:
            msg = "Autosave coordinator is closed"
            raise RuntimeError(msg)
        self._latest = document
        self._dirty = True
        if not self._saving:
            self._set_status(SaveStatus.PENDING)
        self._changed.set()
        self._ensure_worker()

    def _ensure_worker(self) -> None:
        if self._worker is None or self._worker.done():
            loop = asyncio.get_running_loop()
            self._worker = loop.create_task(self._run(), name=f"autosave-{self.website_id}")

    async def _run(self) -> None:
        while True:
            await self._changed.wait()
            await self._wait_for_quiet()
            await self._save_latest()

    async def _wait_for_quiet(self) -> None:
        """Return once no change has arrived for ``delay`` seconds."""
        while True:
            self._changed.clear()
            try:
                await asyncio.wait_for(self._changed.wait(), timeout=self.delay)
            except TimeoutError:
                return

    async def _save_latest(self) -> bool:
        async with self._save_lock:
            if not self._dirty or self._latest is None:
                return True
            document = self._latest
            self._dirty = False
            self._saving = True
            self._set_status(SaveStatus.SAVING)
            try:
                await self._store.save_document(self.website_id, document)
            except asyncio.CancelledError:
                self._dirty = True
                self._set_status(SaveStatus.PENDING)
                raise
            except PersistenceError as e:
                return self._fail(str(e))
            except Exception as e:
                logger.exception("Unexpected autosave failure", website_id=self.website_id)
                return self._fail(str(e) or type(e).__name__)
            finally:
                self._saving = False

            self.save_count += 1
            self.last_saved_at = datetime.now(UTC)
            self.last_error = None
            logger.info("Document autosaved", website_id=self.website_id, elements=len(document))
            self._set_status(SaveStatus.PENDING if self._dirty else SaveStatus.IDLE)
            return True

    def _fail(self, message: str) -> bool:
        # The document never reached the backend, so it is still unsaved.
        self._dirty = True
        self.last_error = message
        logger.warning("Autosave failed", website_id=self.website_id, error=message)
        self._set_status(SaveStatus.ERROR)
        return False

    async def save_now(self) -> bool:
        """Save immediately, bypassing the quiet period.

        Waits for an in-flight save to finish first. This is also the manual
        retry after a failure.

        Returns:
            True if the document was saved or nothing needed saving, False if
            the save failed.
        """
        return await self._save_latest()

    async def wait_settled(self) -> SaveStatus:
        """Wait until the coordinator is ``IDLE`` or ``ERROR`` and return the status."""
        await self._settled.wait()
        return self._status

    async def aclose(self, *, flush: bool = True) -> None:
        """Stop the worker.

        A save already in flight is allowed to finish first.

        Args:
            flush: Save outstanding changes before stopping.
        """
        if self._closed:
            return
        self._closed = True
        if self._worker is not None:
            async with self._save_lock:
                self._worker.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self._worker
            self._worker = None
        if flush and self._dirty:
            await self._save_latest()
