"""
Resume Repository

Persistence for saved résumés, injected wherever a caller needs the store.
Rendering never touches it.

Layout (JSON file):
    {"resumeforge_resumes": [<ResumeDocument JSON>, ...]}

Usage:
    from resumeforge.utils.resume_repository import JsonFileResumeRepository

    repo = JsonFileResumeRepository()
    repo.put(doc)
    repo.get(doc.id)
"""

import json
import os
import secrets
import shutil
import string
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from dotenv import load_dotenv
from loguru import logger

from resumeforge.contexts.templating.exceptions import InvalidResumeStructureError
from resumeforge.contexts.templating.resume_data_structure import ResumeDocument
from resumeforge.utils.timestamp import DEFAULT_CLOCK, Clock, now_exact

load_dotenv()
STORE_PATH = Path(os.getenv("RESUMEFORGE_STORE_PATH", "outs/resumes.json"))
STORAGE_KEY = "resumeforge_resumes"

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    digits = []
    while True:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
        if value == 0:
            return "".join(reversed(digits))


def generate_resume_id(clock: Optional[Clock] = None) -> str:
    """
    New résumé id: base-36 millisecond timestamp plus a random base-36 suffix.

    Ids from later instants sort after earlier ones when their timestamp parts
    have equal length.
    """
    millis = int((clock or DEFAULT_CLOCK).now().timestamp() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(10))
    return _to_base36(millis) + suffix


class ResumeRepository(Protocol):
    """Storage interface for saved résumés."""

    def list(self) -> List[ResumeDocument]: ...

    def get(self, resume_id: str) -> Optional[ResumeDocument]: ...

    def put(self, doc: ResumeDocument) -> ResumeDocument: ...

    def delete(self, resume_id: str) -> bool: ...


def _stamp(existing: Optional[ResumeDocument], doc: ResumeDocument, clock: Clock) -> ResumeDocument:
    """
    Timestamps applied on save.

    Replacing an existing id refreshes updatedAt; a new document only gets a
    createdAt when it has none.
    """
    if existing is not None:
        return doc.evolve(updated_at=now_exact(clock))
    if not doc.created_at:
        return doc.evolve(created_at=now_exact(clock))
    return doc


class InMemoryResumeRepository:
    """Repository kept in a list; used by tests and one-off scripts."""

    def __init__(self, docs: List[ResumeDocument] = None, clock: Clock = None):
        self.clock = clock or DEFAULT_CLOCK
        self._docs: List[ResumeDocument] = list(docs or [])

    def list(self) -> List[ResumeDocument]:
        return list(self._docs)

    def get(self, resume_id: str) -> Optional[ResumeDocument]:
        return next((d for d in self._docs if d.id == resume_id), None)

    def put(self, doc: ResumeDocument) -> ResumeDocument:
        for i, existing in enumerate(self._docs):
            if existing.id == doc.id:
                self._docs[i] = _stamp(existing, doc, self.clock)
                return self._docs[i]
        stored = _stamp(None, doc, self.clock)
        self._docs.append(stored)
        return stored

    def delete(self, resume_id: str) -> bool:
        before = len(self._docs)
        self._docs = [d for d in self._docs if d.id != resume_id]
        return len(self._docs) < before


class JsonFileResumeRepository:
    """
    Repository backed by one JSON file.

    Every write rewrites the whole file through a temporary file that is moved
    into place, so a crash mid-write leaves the previous contents intact.

    Args:
        path: JSON file (default: RESUMEFORGE_STORE_PATH from environment)
        clock: Clock for createdAt/updatedAt (default: system clock)
    """

    def __init__(self, path: Path = None, clock: Clock = None):
        self.path = Path(path or STORE_PATH)
        self.clock = clock or DEFAULT_CLOCK

    def _read(self) -> List[Dict]:
        if not self.path.exists():
            return []
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        records = data.get(STORAGE_KEY, []) if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise InvalidResumeStructureError(f"{self.path}: '{STORAGE_KEY}' must hold a list")
        return records

    def _write(self, records: List[Dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write to temp file first (atomic write pattern)
        temp_fd, temp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".json")
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump({STORAGE_KEY: records}, f, indent=2, ensure_ascii=False)

            shutil.move(temp_path, self.path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def list(self) -> List[ResumeDocument]:
        return [ResumeDocument.from_dict(record) for record in self._read()]

    def get(self, resume_id: str) -> Optional[ResumeDocument]:
        for record in self._read():
            if record.get("id") == resume_id:
                return ResumeDocument.from_dict(record)
        return None

    def put(self, doc: ResumeDocument) -> ResumeDocument:
        """
        Save a document.

        Returns:
            The stored document (with refreshed timestamps)
        """
        records = self._read()
        for i, record in enumerate(records):
            if record.get("id") == doc.id:
                stored = _stamp(ResumeDocument.from_dict(record), doc, self.clock)
                records[i] = stored.to_dict()
                self._write(records)
                logger.debug(f"Updated resume {doc.id} in {self.path}")
                return stored

        stored = _stamp(None, doc, self.clock)
        records.append(stored.to_dict())
        self._write(records)
        logger.debug(f"Added resume {doc.id} to {self.path}")
        return stored

    def delete(self, resume_id: str) -> bool:
        records = self._read()
        remaining = [record for record in records if record.get("id") != resume_id]
        if len(remaining) == len(records):
            return False
        self._write(remaining)
        logger.debug(f"Deleted resume {resume_id} from {self.path}")
        return True
