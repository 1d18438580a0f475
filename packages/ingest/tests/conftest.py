"""Shared fixtures for propsheet_ingest tests."""

import time

import pytest

from propsheet_core.exceptions import PersistenceError
from propsheet_ingest.config import (
    IngestionConfig,
    PropsheetConfig,
    StorageBackend,
    StorageConfig,
)
from propsheet_ingest.store import InMemoryPropertyStore

PDF_BYTES = b"%PDF-1.4\n% listing sheet stub\n"

SAMPLE_TEXT = """\
SEPTEMBER 2025 RESIDENTIAL SALE LIST
SOUTH DELHI
VASANT VIHAR
A-12  200 YD 3BR GF
B-5 150 SQFT 2BR contact 9876543210
D-2 4BHK FF
GREATER KAILASH
12B 250 GAJ TF TERR owner Ramesh Kumar 98765-43210
"""


class FixedTextExtractor:
    """Text extractor returning canned text for any payload."""

    def __init__(self, text: str = SAMPLE_TEXT, error: Exception = None, delay: float = 0.0):
        self.text = text
        self.error = error
        self.delay = delay
        self.calls = []

    def extract_text(self, file_bytes: bytes, *, source: str = "upload") -> str:
        self.calls.append(source)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.text


class FlakyStore(InMemoryPropertyStore):
    """In-memory store whose create() fails for chosen call numbers."""

    def __init__(self, fail_on=(), error: Exception = None):
        super().__init__()
        self.fail_on = set(fail_on)
        self.error = error
        self.attempts = 0

    def create(self, record, *, source_pdf=None):
        self.attempts += 1
        if self.attempts in self.fail_on:
            raise self.error or PersistenceError("disk full", source=source_pdf)
        return super().create(record, source_pdf=source_pdf)


class RecordingExportWriter:
    """Export writer that remembers what it was asked to write."""

    def __init__(self, error: Exception = None):
        self.error = error
        self.exports = []

    def write_denormalized_export(self, records):
        if self.error is not None:
            raise self.error
        self.exports.append(list(records))
        return len(records)


@pytest.fixture
def config(tmp_path) -> PropsheetConfig:
    return PropsheetConfig(
        env="test",
        ingestion=IngestionConfig(extraction_timeout=5),
        storage=StorageConfig(backend=StorageBackend.MEMORY, data_dir=str(tmp_path)),
    )


@pytest.fixture
def extractor() -> FixedTextExtractor:
    return FixedTextExtractor()


@pytest.fixture
def store() -> InMemoryPropertyStore:
    return InMemoryPropertyStore()


@pytest.fixture
def export_writer() -> RecordingExportWriter:
    return RecordingExportWriter()


@pytest.fixture
def pdf_bytes() -> bytes:
    return PDF_BYTES


@pytest.fixture
def make_extractor():
    return FixedTextExtractor


@pytest.fixture
def make_flaky_store():
    return FlakyStore


@pytest.fixture
def make_export_writer():
    return RecordingExportWriter
