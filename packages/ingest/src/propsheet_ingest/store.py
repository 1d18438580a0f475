"""Document stores for property records.

Two implementations of the PropertyStore protocol:
- InMemoryPropertyStore for tests and one-off runs
- JsonFilePropertyStore, which appends each record to a JSON-lines file
"""

import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union
from uuid import uuid4

from pydantic import ValidationError

from propsheet_core.exceptions import ConfigurationError, PersistenceError
from propsheet_core.models import ExtractedProperty, StoredProperty

from .config import PropsheetConfig, StorageBackend
from .interfaces import PropertyStore
from .logging import get_logger

logger = get_logger(__name__)


def to_stored(record: ExtractedProperty, *, source_pdf: Optional[str] = None) -> StoredProperty:
    """
    Assign identity and timestamps to a record, revalidating it.

    Raises:
        PersistenceError: If the record breaks a model invariant (for
            example floors emptied after construction)
    """
    now = datetime.now(timezone.utc)
    data = record.model_dump(exclude={"id", "source_pdf", "uploaded_at", "created_at", "updated_at"})
    try:
        return StoredProperty.model_validate({
            **data,
            "id": uuid4().hex,
            "source_pdf": source_pdf,
            "uploaded_at": now,
            "created_at": now,
            "updated_at": now,
        })
    except ValidationError as e:
        raise PersistenceError(
            f"Invalid property record: {e.error_count()} validation error(s)",
            source=source_pdf,
            details={"errors": e.errors(include_url=False)},
        ) from e


class InMemoryPropertyStore:
    """Property store backed by a list."""

    def __init__(self) -> None:
        self._records: list[StoredProperty] = []
        self._lock = threading.Lock()

    def create(
        self,
        record: ExtractedProperty,
        *,
        source_pdf: Optional[str] = None,
    ) -> StoredProperty:
        stored = to_stored(record, source_pdf=source_pdf)
        with self._lock:
            self._append(stored)
        return stored

    def find_all(self) -> list[StoredProperty]:
        with self._lock:
            return list(reversed(self._records))

    def delete_all(self) -> int:
        with self._lock:
            deleted = len(self._records)
            self._clear()
        logger.info("properties_deleted", count=deleted)
        return deleted

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def _append(self, stored: StoredProperty) -> None:
        """Add one record. Called with the lock held."""
        self._records.append(stored)

    def _clear(self) -> None:
        """Drop every record. Called with the lock held."""
        self._records.clear()


class JsonFilePropertyStore(InMemoryPropertyStore):
    """
    Property store persisted to a JSON-lines file.

    Each create appends one line, so the cost of a write does not grow with
    the collection. The in-memory list only changes after the file write
    has succeeded.
    """

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)
        self._records = self._load()

    def _load(self) -> list[StoredProperty]:
        if not self.path.exists():
            return []

        records: list[StoredProperty] = []
        line_number = 0
        try:
            with self.path.open(encoding="utf-8") as f:
                for line_number, line in enumerate(f, start=1):
                    if line.strip():
                        records.append(StoredProperty.model_validate_json(line))
        except (OSError, ValueError) as e:
            raise PersistenceError(
                f"Cannot load property store: {e}",
                details={"path": str(self.path), "line": line_number},
                recoverable=False,
            ) from e

        logger.debug("property_store_loaded", path=str(self.path), records=len(records))
        return records

    def _append(self, stored: StoredProperty) -> None:
        line = (stored.model_dump_json() + "\n").encode("utf-8")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("ab") as f:
                offset = f.tell()
                try:
                    f.write(line)
                    f.flush()
                except OSError:
                    f.truncate(offset)
                    raise
        except OSError as e:
            raise PersistenceError(
                f"Cannot write property store: {e}",
                source=stored.source_pdf,
                details={"path": str(self.path)},
            ) from e
        self._records.append(stored)

    def _clear(self) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text("", encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceError(
                f"Cannot write property store: {e}",
                details={"path": str(self.path)},
            ) from e
        self._records.clear()


def build_store(config: PropsheetConfig) -> PropertyStore:
    """Create the store selected by configuration."""
    backend = config.storage.backend
    if backend == StorageBackend.MEMORY:
        return InMemoryPropertyStore()
    if backend == StorageBackend.JSON:
        return JsonFilePropertyStore(config.store_path)
    raise ConfigurationError(
        "Unknown storage backend",
        config_key="PROPSHEET_STORAGE_BACKEND",
        expected="memory or json",
        actual=str(backend),
    )


__all__ = [
    "InMemoryPropertyStore",
    "JsonFilePropertyStore",
    "build_store",
    "to_stored",
]
