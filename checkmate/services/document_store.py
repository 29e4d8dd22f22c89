#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Checkmate - Document Stores
The external document store and the local fallback cache

A store holds exactly one document. Failures never propagate: load() returns
None and save() returns False, and the caller decides what that means.
"""

import asyncio
import copy
import json
import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from supabase import Client, create_client

from checkmate.config import CheckmateConfig, StoreBackend
from checkmate.core.database import Document, parse_document, serialize_document

logger = logging.getLogger(__name__)

CACHE_KEY = "checkmate_v2_data"

# ===== STORES =====

class DocumentStore(ABC):
    """Single-record document store"""

    name: str = "base"

    @abstractmethod
    async def load(self) -> Optional[Document]:
        """The stored document, or None when absent or unreadable"""
        ...

    @abstractmethod
    async def save(self, document: Document) -> bool:
        """Create or replace the stored document"""
        ...

class InMemoryDocumentStore(DocumentStore):
    """Keeps the document in process memory"""

    name = "memory"

    def __init__(self, document: Optional[Document] = None, fail_saves: bool = False):
        self.document = copy.deepcopy(document)
        self.fail_saves = fail_saves
        self.save_count = 0

    async def load(self) -> Optional[Document]:
        return copy.deepcopy(self.document)

    async def save(self, document: Document) -> bool:
        if self.fail_saves:
            logger.error("❌ In-memory store rejected the save")
            return False
        self.document = copy.deepcopy(document)
        self.save_count += 1
        return True

class JsonFileDocumentStore(DocumentStore):
    """The document as a single JSON file, replaced atomically on save"""

    name = "file"

    def __init__(self, path: Path):
        self.path = Path(path)

    async def load(self) -> Optional[Document]:
        return await asyncio.to_thread(self._read)

    async def save(self, document: Document) -> bool:
        return await asyncio.to_thread(self._write, document)

    def _read(self) -> Optional[Document]:
        if not self.path.exists():
            logger.info(f"📂 No document at {self.path}")
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return parse_document(f.read())
        except OSError as e:
            logger.error(f"❌ Failed to read {self.path}: {e}")
            return None

    def _write(self, document: Document) -> bool:
        tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"❌ Failed to write {self.path}: {e}")
            return False

class SupabaseDocumentStore(DocumentStore):
    """
    The document in the `content` column of a Supabase table.

    The first row of the table is the document; save() updates it, or inserts
    one when the table is empty.
    """

    name = "supabase"

    def __init__(self, url: str, key: str, table: str = "checkmate_data", client: Optional[Client] = None):
        self.table = table
        self.client = client or create_client(url, key)

    async def load(self) -> Optional[Document]:
        return await asyncio.to_thread(self._load)

    async def save(self, document: Document) -> bool:
        return await asyncio.to_thread(self._save, document)

    def _load(self) -> Optional[Document]:
        try:
            response = self.client.table(self.table).select("content").limit(1).execute()
        except Exception as e:
            logger.error(f"❌ Error fetching checkmate data: {e}")
            return None

        rows = response.data or []
        if not rows:
            return None
        content = rows[0].get("content")
        return content if isinstance(content, dict) else None

    def _save(self, document: Document) -> bool:
        try:
            existing = self.client.table(self.table).select("id").limit(1).execute()
            rows = existing.data or []
            if rows:
                self.client.table(self.table).update({
                    "content": document,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                }).eq("id", rows[0]["id"]).execute()
            else:
                self.client.table(self.table).insert({"content": document}).execute()
            return True
        except Exception as e:
            logger.error(f"❌ Error saving checkmate data: {e}")
            return False

def create_document_store(config: CheckmateConfig) -> DocumentStore:
    storage = config.storage
    if storage.backend is StoreBackend.SUPABASE:
        return SupabaseDocumentStore(storage.supabase_url, storage.supabase_key, storage.supabase_table)
    return JsonFileDocumentStore(storage.document_path)

# ===== LOCAL CACHE =====

class LocalCache:
    """String key/value pairs persisted in one JSON file"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return data if isinstance(data, dict) else {}
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"❌ Local cache {self.path} is unreadable: {e}")
            return {}

    def _save(self, data: Dict[str, str]) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False)
            return True
        except OSError as e:
            logger.error(f"❌ Failed to write local cache {self.path}: {e}")
            return False

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> bool:
        data = self._load()
        data[key] = value
        return self._save(data)

    def remove(self, key: str) -> bool:
        data = self._load()
        if key not in data:
            return False
        del data[key]
        return self._save(data)

    def get_document(self) -> Optional[Document]:
        return parse_document(self.get(CACHE_KEY))

    def set_document(self, document: Document) -> bool:
        return self.set(CACHE_KEY, serialize_document(document))
