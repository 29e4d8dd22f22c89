#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Checkmate - Persistence Sync
Debounced write-back of the whole document to the store and the local cache
"""

import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import AsyncIterator, Callable, Optional, Tuple

from checkmate.core.database import Document
from checkmate.services.document_store import DocumentStore, LocalCache
from checkmate.services.timer_service import DebounceScheduler

logger = logging.getLogger(__name__)

SAVE_KEY = "document_save"

class SaveStatus(str, Enum):
    UNSAVED = "unsaved"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"

class PersistenceSync:
    """
    Coalesces edits into one save.

    `snapshot` builds the document to write at the moment the save fires, so
    the latest state is written no matter how many edits armed the timer.
    """

    def __init__(self, store: DocumentStore, cache: Optional[LocalCache],
                 snapshot: Callable[[], Document], debounce_seconds: float = 1.5,
                 scheduler: Optional[DebounceScheduler] = None):
        self.store = store
        self.cache = cache
        self.snapshot = snapshot
        self.debounce_seconds = debounce_seconds
        self.scheduler = scheduler or DebounceScheduler()

        self.status = SaveStatus.SAVED
        self.last_saved_at: Optional[datetime] = None
        self.save_count = 0
        self.error_count = 0

    @property
    def is_pending(self) -> bool:
        return self.scheduler.is_pending(SAVE_KEY)

    def mark_dirty(self) -> None:
        self.status = SaveStatus.UNSAVED
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, save deferred until flush()")
            return
        self.scheduler.arm(SAVE_KEY, self.debounce_seconds, self._save_now)

    async def flush(self) -> bool:
        """Cancel the pending timer and save immediately"""
        self.scheduler.cancel(SAVE_KEY)
        return await self._save_now()

    async def _save_now(self) -> bool:
        self.status = SaveStatus.SAVING
        try:
            document = self.snapshot()
            if self.cache is not None:
                self.cache.set_document(document)
            saved = await self.store.save(document)
        except Exception as e:
            logger.error(f"❌ Save failed before reaching the store: {e}")
            saved = False

        if saved:
            self.status = SaveStatus.SAVED
            self.last_saved_at = datetime.now()
            self.save_count += 1
            logger.debug(f"💾 Document saved to {self.store.name} store")
            return True

        self.status = SaveStatus.ERROR
        self.error_count += 1
        logger.error(f"❌ Saving to {self.store.name} store failed, local cache kept")
        return False

    async def iter_documents(self) -> AsyncIterator[Tuple[Document, str]]:
        """Saved documents in load order: the store first, then the local cache"""
        document = await self.store.load()
        if document is not None:
            logger.info(f"✅ Document loaded from {self.store.name} store")
            yield document, self.store.name

        if self.cache is not None:
            document = self.cache.get_document()
            if document is not None:
                logger.warning("⚠️ Falling back to the local cache")
                yield document, "cache"

    def stats(self):
        return {
            "status": self.status.value,
            "pending": self.is_pending,
            "lastSavedAt": self.last_saved_at.isoformat() if self.last_saved_at else None,
            "saveCount": self.save_count,
            "errorCount": self.error_count,
            "store": self.store.name,
        }
