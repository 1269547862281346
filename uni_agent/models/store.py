"""
Record store interface.

The core reads and writes knowledge records through this narrow interface.
Persistence itself lives outside the core; InMemoryRecordStore backs tests,
the CLI script and single-process use.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from uni_agent.exceptions import RecordNotFoundError

from . import KnowledgeRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class RecordStore(Protocol):
    """Collaborator capability for record retrieval and saving."""

    async def get_by_id(self, record_id: str) -> KnowledgeRecord:
        """Return the record or raise RecordNotFoundError."""
        ...

    async def get_by_title(self, title: str) -> KnowledgeRecord:
        """Return the record or raise RecordNotFoundError."""
        ...

    async def save(self, record: KnowledgeRecord) -> KnowledgeRecord:
        """Persist a record and return the stored version."""
        ...


class InMemoryRecordStore:
    """Dictionary-backed record store."""

    def __init__(self, records: list[KnowledgeRecord] | None = None):
        self._records: dict[str, KnowledgeRecord] = {}
        for record in records or []:
            self._records[record.id] = record

    async def get_by_id(self, record_id: str) -> KnowledgeRecord:
        record = self._records.get(record_id)
        if record is None:
            raise RecordNotFoundError(f"Record {record_id} not found")
        return record

    async def get_by_title(self, title: str) -> KnowledgeRecord:
        # Latest save wins when titles collide
        for record in reversed(list(self._records.values())):
            if record.title == title:
                return record
        raise RecordNotFoundError(f'Record "{title}" not found')

    async def save(self, record: KnowledgeRecord) -> KnowledgeRecord:
        self._records[record.id] = record
        logger.info(f"[Store] Saved record {record.id} ({record.title})")
        return record

    def __len__(self) -> int:
        return len(self._records)
