"""Custom exceptions for the Propsheet application.

This module provides a hierarchy of exception classes for consistent error
handling across the listing-sheet ingestion pipeline. All exceptions inherit
from PropsheetError, making it easy to catch all application-specific errors.

Fatal errors (ExtractionError, NoRecordsExtractedError, DocumentRejectedError)
abort an ingestion and reach the caller. Recoverable errors (PersistenceError,
ExportError) are counted or logged by the pipeline and never surfaced
individually.

Example:
    try:
        result = await pipeline.ingest(payload, "september.pdf")
    except NoRecordsExtractedError as e:
        logger.warning("sheet_format_unrecognised", source=e.source)
    except PropsheetError as e:
        logger.error("ingestion_failed", error=str(e))
"""

from typing import Any, Optional


class PropsheetError(Exception):
    """Base exception for all Propsheet application errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise PropsheetError("Something went wrong", details={"code": 500})
        PropsheetError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize PropsheetError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error is potentially recoverable through
                retry or by skipping the affected item. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ExtractionError(PropsheetError):
    """Error raised when the text layer of a document cannot be read.

    Text extraction failure aborts the ingestion before any record work,
    so this error is not recoverable.

    Attributes:
        source: The document name or path that failed extraction.
        document_type: Type of document being processed (if known).

    Example:
        >>> raise ExtractionError(
        ...     "Failed to extract text from PDF",
        ...     source="september_listing.pdf",
        ...     document_type="pdf",
        ... )
        ExtractionError: Failed to extract text from PDF
    """

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        document_type: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ExtractionError.

        Args:
            message: Human-readable error description.
            source: The document path or display name being processed.
            document_type: Type of document (e.g., "pdf").
            details: Optional dictionary with additional context.
            recoverable: Whether extraction can be retried. Defaults to False.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.source = source
        self.document_type = document_type

        if source:
            self.details["source"] = source
        if document_type:
            self.details["document_type"] = document_type


class ExtractionTimeoutError(ExtractionError):
    """Error raised when text extraction exceeds the configured timeout.

    Treated exactly like any other extraction failure by the pipeline.
    """

    def __init__(
        self,
        message: str,
        *,
        timeout: Optional[float] = None,
        source: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, source=source, details=details)
        self.timeout = timeout

        if timeout is not None:
            self.details["timeout"] = timeout


class NoRecordsExtractedError(PropsheetError):
    """Error raised when a readable document yields zero property records.

    Distinct from per-record failures: it signals that the sheet format was
    not recognised at all. Nothing is persisted when this is raised.

    Attributes:
        source: The document name.
        line_count: Number of non-empty text lines that were scanned.
    """

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        line_count: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details, recoverable=False)
        self.source = source
        self.line_count = line_count

        if source:
            self.details["source"] = source
        if line_count is not None:
            self.details["line_count"] = line_count


class PersistenceError(PropsheetError):
    """Error raised when a single record cannot be persisted.

    The ingestion pipeline counts these and carries on with the next record.

    Attributes:
        record_index: Position of the record within the parsed batch.
        source: Source document of the record.
    """

    def __init__(
        self,
        message: str,
        *,
        record_index: Optional[int] = None,
        source: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.record_index = record_index
        self.source = source

        if record_index is not None:
            self.details["record_index"] = record_index
        if source:
            self.details["source"] = source


class ExportError(PropsheetError):
    """Error raised when the denormalized export cannot be written.

    Export is a best-effort side effect; the pipeline logs this error and
    still returns its counts.

    Attributes:
        path: Destination path of the export.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.path = path

        if path:
            self.details["path"] = path


class DocumentRejectedError(PropsheetError):
    """Error raised when an uploaded payload is refused before extraction.

    Raised for empty payloads, payloads over the upload limit and payloads
    that are not PDF documents.

    Example:
        >>> raise DocumentRejectedError(
        ...     "Only PDF files are allowed",
        ...     source="listing.docx",
        ...     reason="not_pdf",
        ... )
        DocumentRejectedError: Only PDF files are allowed
    """

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        reason: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details, recoverable=False)
        self.source = source
        self.reason = reason

        if source:
            self.details["source"] = source
        if reason:
            self.details["reason"] = reason


class ConfigurationError(PropsheetError):
    """Error raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "Unknown storage backend",
        ...     config_key="PROPSHEET_STORAGE_BACKEND",
        ...     expected="memory or json",
        ... )
        ConfigurationError: Unknown storage backend
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description.
            config_key: The name of the configuration key that is problematic.
            expected: Description of what value was expected.
            actual: The actual value found.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed at runtime.
                Defaults to False.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "PropsheetError",
    "ExtractionError",
    "ExtractionTimeoutError",
    "NoRecordsExtractedError",
    "PersistenceError",
    "ExportError",
    "DocumentRejectedError",
    "ConfigurationError",
]
