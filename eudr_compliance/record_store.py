# eudr_compliance/record_store.py
"""
Historical assessment storage.

The scoring engine never touches a store; callers score first and then hand
the pair of form data and result to whichever ``RecordStore`` they were given.
"""
import fcntl
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Protocol, Union

from .models import AssessmentRecord, ComplianceResult, ExporterFormData
from .serialization import record_from_dict, record_to_dict

logger = logging.getLogger(__name__)


class RecordNotFoundError(KeyError):
    """No stored assessment has the requested id."""


class RecordStore(Protocol):
    def save(self, record: AssessmentRecord) -> AssessmentRecord:
        ...

    def list(self) -> List[AssessmentRecord]:
        ...

    def find_by_id(self, record_id: str) -> AssessmentRecord:
        ...


def new_record(form_data: ExporterFormData, result: ComplianceResult) -> AssessmentRecord:
    return AssessmentRecord(form_data=form_data, result=result)


class InMemoryRecordStore:
    """Process-local store, newest record first."""

    def __init__(self) -> None:
        self._records: List[AssessmentRecord] = []

    def save(self, record: AssessmentRecord) -> AssessmentRecord:
        self._records.insert(0, record)
        logger.info("Stored assessment %s (score %d)", record.id, record.result.score)
        return record

    def list(self) -> List[AssessmentRecord]:
        return list(self._records)

    def get(self, record_id: str) -> Optional[AssessmentRecord]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def find_by_id(self, record_id: str) -> AssessmentRecord:
        record = self.get(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        return record


class JsonFileRecordStore:
    """
    Store backed by one JSON array on disk, newest record first.

    Every save rewrites the whole file through a temporary sibling and an
    atomic replace, so a crash mid-write leaves the previous file intact.
    Saves hold an exclusive lock on a sibling ``.lock`` file across the
    whole read-modify-write.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self._thread_lock = threading.Lock()

    @contextmanager
    def _locked(self) -> Iterator[None]:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self._thread_lock, open(self.lock_path, "a") as lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _read(self) -> List[Dict]:
        if not self.path.exists():
            return []
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return []
        return json.loads(text)

    def _write(self, payload: List[Dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise

    def save(self, record: AssessmentRecord) -> AssessmentRecord:
        entry = record_to_dict(record)
        with self._locked():
            payload = self._read()
            payload.insert(0, entry)
            self._write(payload)
        logger.info(
            "Stored assessment %s (score %d) in %s", record.id, record.result.score, self.path
        )
        return record

    def list(self) -> List[AssessmentRecord]:
        return [record_from_dict(item) for item in self._read()]

    def get(self, record_id: str) -> Optional[AssessmentRecord]:
        for item in self._read():
            if item.get("id") == record_id:
                return record_from_dict(item)
        return None

    def find_by_id(self, record_id: str) -> AssessmentRecord:
        record = self.get(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        return record
