"""Collaborator interfaces for the ingestion pipeline.

The pipeline only depends on these protocols. They use structural
subtyping via typing.Protocol, so any class with matching methods is
accepted; no inheritance is required.

Example Usage:
    ```python
    class FixedTextExtractor:
        def __init__(self, text: str):
            self.text = text

        def extract_text(self, file_bytes: bytes, *, source: str = "upload") -> str:
            return self.text

    assert isinstance(FixedTextExtractor("..."), TextExtractor)
    ```
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable

from propsheet_core.models import ExtractedProperty, StoredProperty


@runtime_checkable
class TextExtractor(Protocol):
    """Turns raw document bytes into text.

    Implementations raise ExtractionError on malformed input. The call may
    block; the pipeline runs it in a worker thread under a timeout.
    """

    def extract_text(self, file_bytes: bytes, *, source: str = "upload") -> str:
        """Return the full text layer of the document."""
        ...


@runtime_checkable
class PropertyStore(Protocol):
    """Generic document store for property records.

    No transactional guarantees are assumed: every create() stands alone.
    """

    def create(
        self,
        record: ExtractedProperty,
        *,
        source_pdf: Optional[str] = None,
    ) -> StoredProperty:
        """Persist one record and return it with identity and timestamps.

        Raises:
            PersistenceError: If the record cannot be stored
        """
        ...

    def find_all(self) -> list[StoredProperty]:
        """Return every stored record, newest first."""
        ...

    def delete_all(self) -> int:
        """Delete every record and return how many were removed."""
        ...

    def count(self) -> int:
        """Return the number of stored records."""
        ...


@runtime_checkable
class ExportWriter(Protocol):
    """Writes the denormalized export of all stored records."""

    def write_denormalized_export(self, records: Sequence[ExtractedProperty]) -> int:
        """Replace the export with these records and return the row count.

        Raises:
            ExportError: If the export cannot be written
        """
        ...


__all__ = ["ExportWriter", "PropertyStore", "TextExtractor"]
