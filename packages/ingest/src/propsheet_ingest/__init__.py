"""Propsheet Ingest - configuration, stores and the upload pipeline."""

from propsheet_ingest.config import (
    IngestionConfig,
    ParserConfig,
    PropsheetConfig,
    StorageBackend,
    StorageConfig,
)
from propsheet_ingest.ingestion import IngestionPipeline

__version__ = "0.1.0"

__all__ = [
    "IngestionConfig",
    "IngestionPipeline",
    "ParserConfig",
    "PropsheetConfig",
    "StorageBackend",
    "StorageConfig",
]
