"""Application state owned by CheckmateService"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List

from checkmate.core.database import Document, DocumentMigration, default_document
from checkmate.core.history import HistoryStore, history_from_dict, history_to_dict
from checkmate.core.models import (
    CallRecord,
    FineRecord,
    HabitRecord,
    Participant,
    Settings,
    roster_from_list,
    total_fine,
)
from checkmate.utils.validators import coerce_str

logger = logging.getLogger(__name__)

@dataclass
class AppState:
    settings: Settings
    mates: List[Participant]
    history: HistoryStore
    fine_records: List[FineRecord] = field(default_factory=list)
    bank_info: str = ""
    fine_notice: str = ""

    @property
    def active_mates(self) -> List[Participant]:
        return self.mates[:self.settings.user_count]

    @property
    def total_fine(self) -> float:
        return total_fine(self.fine_records)

    def to_document(self) -> Document:
        """Full document, with the current view committed to history first"""
        self.history.commit_view()
        document: Dict[str, Any] = {DocumentMigration.VERSION_KEY: DocumentMigration.CURRENT_VERSION}
        document.update(self.settings.to_dict())
        document.update({
            "mates": [mate.to_dict() for mate in self.mates],
            "fineRecords": [record.to_dict() for record in self.fine_records],
            "mateHistory": history_to_dict(self.history.mate_history),
            "habitHistory": history_to_dict(self.history.habit_history),
            "bankInfo": self.bank_info,
            "fineNotice": self.fine_notice,
        })
        return document

    @classmethod
    def from_document(cls, document: Document, selected_date: date) -> "AppState":
        data = DocumentMigration.migrate(document)
        settings = Settings.from_dict(data)
        mates = roster_from_list(data.get("mates"))
        raw_fines = data.get("fineRecords")
        fines = [FineRecord.from_dict(r) for r in raw_fines if isinstance(r, dict)] if isinstance(raw_fines, list) else []

        history = HistoryStore(
            roster=mates,
            settings=settings,
            selected_date=selected_date,
            mate_history=history_from_dict(data.get("mateHistory"), CallRecord),
            habit_history=history_from_dict(data.get("habitHistory"), HabitRecord),
        )
        return cls(
            settings=settings,
            mates=mates,
            history=history,
            fine_records=fines,
            bank_info=coerce_str(data.get("bankInfo")),
            fine_notice=coerce_str(data.get("fineNotice")),
        )

    @classmethod
    def default(cls, selected_date: date) -> "AppState":
        return cls.from_document(default_document(), selected_date)

    def participant(self, index: int) -> Participant:
        if not 0 <= index < len(self.mates):
            raise IndexError(f"no participant slot {index}")
        return self.mates[index]

    def fine(self, index: int) -> FineRecord:
        if not 0 <= index < len(self.fine_records):
            raise IndexError(f"no fine record {index}")
        return self.fine_records[index]
