#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Checkmate - Document Schema
Default document, (de)serialization and versioned migrations

The whole application state is one JSON document. Documents without a
schemaVersion are version 0 and are migrated once, on load.
"""

import copy
import json
import logging
from typing import Any, Callable, Dict, Optional

from checkmate.core.history import history_to_dict, migrate_legacy
from checkmate.core.models import MAX_CHECK_ITEMS, MAX_PARTICIPANTS, default_check_labels

logger = logging.getLogger(__name__)

Document = Dict[str, Any]

# ===== EXCEPTIONS =====

class DatabaseError(Exception):
    """Base error for document handling"""
    pass

class DocumentCorruptionError(DatabaseError):
    """The stored document is not a JSON object"""
    pass

# ===== DEFAULTS =====

def default_document() -> Document:
    """Compiled-in document used on first run and by reset"""
    return {
        "schemaVersion": DocumentMigration.CURRENT_VERSION,
        "userCount": 7,
        "checkItemCount": 3,
        "checkLabels": default_check_labels(MAX_CHECK_ITEMS),
        "checkWeeklyCount": [5] * MAX_CHECK_ITEMS,
        "mainWeeklyGoal": 5,
        "isSettingsLocked": False,
        "isUserInfoLocked": False,
        "mates": [
            {"id": chr(ord("A") + i), "name": f"User {i + 1}", "contact": "010-0000-0000"}
            for i in range(MAX_PARTICIPANTS)
        ],
        "fineRecords": [],
        "mateHistory": {},
        "habitHistory": {},
        "bankInfo": "",
        "fineNotice": "",
    }

# ===== SERIALIZATION =====

def serialize_document(document: Document) -> str:
    return json.dumps(document, ensure_ascii=False)

def parse_document(raw: Optional[str]) -> Optional[Document]:
    """Decode a stored document; anything malformed counts as no data"""
    if not raw:
        return None
    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise DocumentCorruptionError(f"expected a JSON object, got {type(data).__name__}")
        return data
    except (json.JSONDecodeError, DocumentCorruptionError) as e:
        logger.error(f"❌ Unreadable checkmate document: {e}")
        return None

# ===== MIGRATIONS =====

class DocumentMigration:
    """Versioned document upgrades"""

    VERSION_KEY = "schemaVersion"
    CURRENT_VERSION = 1
    LEGACY_HISTORY_KEY = "dailyHistory"

    @classmethod
    def get_version(cls, data: Document) -> int:
        try:
            return int(data.get(cls.VERSION_KEY, 0))
        except (TypeError, ValueError, OverflowError):
            logger.warning(f"Invalid {cls.VERSION_KEY} {data.get(cls.VERSION_KEY)!r}, treating as 0")
            return 0

    @classmethod
    def set_version(cls, data: Document, version: int) -> None:
        data[cls.VERSION_KEY] = version

    @classmethod
    def needs_migration(cls, data: Document) -> bool:
        return cls.get_version(data) < cls.CURRENT_VERSION

    @classmethod
    def steps(cls) -> Dict[int, Callable[[Document], Document]]:
        return {0: cls._migrate_from_v0}

    @classmethod
    def migrate(cls, data: Document) -> Document:
        """Return an upgraded copy of `data`; the input is not modified"""
        version = cls.get_version(data)
        if version > cls.CURRENT_VERSION:
            logger.warning(f"⚠️ Document version {version} is newer than {cls.CURRENT_VERSION}, loading as-is")
            return copy.deepcopy(data)
        if version == cls.CURRENT_VERSION:
            return copy.deepcopy(data)

        logger.info(f"Migrating document from version {version} to {cls.CURRENT_VERSION}")
        migrated = copy.deepcopy(data)
        steps = cls.steps()
        try:
            while version < cls.CURRENT_VERSION:
                migrated = steps[version](migrated)
                version += 1
                cls.set_version(migrated, version)
        except Exception as e:
            logger.error(f"Document migration failed: {e}")
            raise DatabaseError(f"Migration failed: {e}") from e

        logger.info("Document migration completed successfully")
        return migrated

    @classmethod
    def _migrate_from_v0(cls, data: Document) -> Document:
        """Split the combined dailyHistory into mateHistory and habitHistory"""
        legacy = data.pop(cls.LEGACY_HISTORY_KEY, None)
        mate_history = data.get("mateHistory") or {}
        habit_history = data.get("habitHistory") or {}

        if isinstance(legacy, dict) and not mate_history and not habit_history:
            mates, habits = migrate_legacy(legacy)
            data["mateHistory"] = history_to_dict(mates)
            data["habitHistory"] = history_to_dict(habits)
            logger.info(f"Split {len(legacy)} legacy history days")
        else:
            data["mateHistory"] = mate_history
            data["habitHistory"] = habit_history
        return data
