"""Ingestion pipeline for uploaded listing sheets.

One call to IngestionPipeline.ingest() takes a document from raw bytes to
stored records:

1. Reject payloads that are empty, too large or not PDFs
2. Extract the text layer (worker thread, bounded by a timeout)
3. Parse the text into property records
4. Persist each record independently, counting failures
5. Regenerate the denormalized export (best effort)

Steps 1-3 fail the whole ingestion; steps 4-5 never do.
"""

import asyncio
from pathlib import Path
from typing import Optional, Union

from propsheet_core.exceptions import (
    DocumentRejectedError,
    ExportError,
    ExtractionError,
    ExtractionTimeoutError,
    NoRecordsExtractedError,
    PersistenceError,
)
from propsheet_core.export import ExcelExportWriter
from propsheet_core.listing_parser import ListingSheetParser
from propsheet_core.models import IngestionResult
from propsheet_core.pdf_text import PDFTextExtractor, looks_like_pdf

from .config import PropsheetConfig
from .interfaces import ExportWriter, PropertyStore, TextExtractor
from .logging import get_logger
from .store import build_store

logger = get_logger(__name__)


def build_parser(config: PropsheetConfig) -> ListingSheetParser:
    """Create a listing parser from configuration."""
    return ListingSheetParser(
        default_city=config.parser.default_city,
        city_tokens=config.parser.city_tokens,
        include_legacy_fields=config.parser.include_legacy_fields,
        strict_floor_matching=config.parser.strict_floor_matching,
    )


class IngestionPipeline:
    """
    Orchestrates text extraction, parsing, persistence and export.

    The pipeline keeps no per-document state between calls, so several
    documents may be ingested concurrently against the same pipeline.
    """

    def __init__(
        self,
        extractor: TextExtractor,
        store: PropertyStore,
        export_writer: Optional[ExportWriter] = None,
        *,
        parser: Optional[ListingSheetParser] = None,
        config: Optional[PropsheetConfig] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            extractor: Text extraction collaborator
            store: Document store for property records
            export_writer: Export collaborator; None disables export
            parser: Listing parser; built from config when omitted
            config: Settings; loaded from the environment when omitted
        """
        self.config = config or PropsheetConfig()
        self.extractor = extractor
        self.store = store
        self.export_writer = export_writer if self.config.ingestion.export_enabled else None
        self.parser = parser or build_parser(self.config)

    @classmethod
    def from_config(cls, config: Optional[PropsheetConfig] = None) -> "IngestionPipeline":
        """Wire the default PDF extractor, configured store and Excel export."""
        config = config or PropsheetConfig()
        return cls(
            PDFTextExtractor(),
            build_store(config),
            ExcelExportWriter(config.export_path),
            config=config,
        )

    def validate_document(self, document_bytes: bytes, source_name: str) -> None:
        """
        Reject payloads that cannot be a listing sheet.

        Raises:
            DocumentRejectedError: For empty, oversized or non-PDF payloads
        """
        if not document_bytes:
            raise DocumentRejectedError("No file uploaded", source=source_name, reason="empty")

        limit = self.config.ingestion.max_upload_bytes
        if len(document_bytes) > limit:
            raise DocumentRejectedError(
                f"File exceeds the {limit} byte upload limit",
                source=source_name,
                reason="too_large",
                details={"size": len(document_bytes), "limit": limit},
            )

        if not looks_like_pdf(document_bytes):
            raise DocumentRejectedError(
                "Only PDF files are allowed",
                source=source_name,
                reason="not_pdf",
            )

    async def extract_text(self, document_bytes: bytes, source_name: str) -> str:
        """
        Run the extraction collaborator under the configured timeout.

        Raises:
            ExtractionTimeoutError: If extraction takes too long
            ExtractionError: For any other extraction failure
        """
        timeout = self.config.ingestion.extraction_timeout
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.extractor.extract_text, document_bytes, source=source_name),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise ExtractionTimeoutError(
                f"Text extraction timed out after {timeout}s",
                timeout=timeout,
                source=source_name,
            ) from e
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(
                f"Failed to extract text: {e}",
                source=source_name,
            ) from e

    async def ingest(self, document_bytes: bytes, source_name: str) -> IngestionResult:
        """
        Ingest one uploaded document.

        Args:
            document_bytes: Raw document bytes
            source_name: Display name stored with every record

        Returns:
            IngestionResult with saved/error counts; saved > 0 together
            with errors > 0 is a normal outcome

        Raises:
            DocumentRejectedError: If the payload is refused
            ExtractionError: If no text could be extracted
            NoRecordsExtractedError: If the text holds no parseable listings
        """
        log = logger.bind(source=source_name)
        self.validate_document(document_bytes, source_name)

        text = await self.extract_text(document_bytes, source_name)

        report = self.parser.parse_report(text)
        if not report.records:
            raise NoRecordsExtractedError(
                "No properties could be extracted from PDF",
                source=source_name,
                line_count=report.line_count,
            )
        if report.dropped_lines:
            log.warning("property_lines_without_size", count=len(report.dropped_lines))

        result = IngestionResult(source_name=source_name, total_extracted=len(report.records))

        for index, record in enumerate(report.records):
            try:
                await asyncio.to_thread(self.store.create, record, source_pdf=source_name)
                result.saved += 1
            except PersistenceError as e:
                result.errors += 1
                log.error("property_save_failed", record_index=index, error=str(e))
            except Exception as e:
                result.errors += 1
                log.error(
                    "property_save_failed",
                    record_index=index,
                    error=str(e),
                    error_type=type(e).__name__,
                )

        result.export_written = await self.regenerate_export()

        log.info(
            "ingestion_complete",
            saved=result.saved,
            errors=result.errors,
            extracted=result.total_extracted,
        )
        return result

    async def regenerate_export(self) -> bool:
        """Rewrite the export from the full store; failures are only logged."""
        if self.export_writer is None:
            return False
        try:
            records = await asyncio.to_thread(self.store.find_all)
            await asyncio.to_thread(self.export_writer.write_denormalized_export, records)
        except ExportError as e:
            logger.error("export_failed", error=str(e), path=e.path)
            return False
        except Exception as e:
            logger.error("export_failed", error=str(e), error_type=type(e).__name__)
            return False
        return True

    async def ingest_file(self, file_path: Union[str, Path]) -> IngestionResult:
        """
        Ingest a PDF from disk under its file name.

        Raises:
            FileNotFoundError: If the path does not exist
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"PDF file not found at path: {file_path}")
        return await self.ingest(file_path.read_bytes(), file_path.name)

    def ingest_sync(self, document_bytes: bytes, source_name: str) -> IngestionResult:
        """Blocking wrapper around ingest() for scripts."""
        return asyncio.run(self.ingest(document_bytes, source_name))


__all__ = ["IngestionPipeline", "build_parser"]
