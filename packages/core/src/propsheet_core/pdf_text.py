"""PDF text extraction for uploaded listing sheets.

Reads the text layer with PyPDF2 and falls back to pdfplumber when PyPDF2
returns little or nothing, which happens with some scanned-then-OCR'd
sheets and unusual font encodings.
"""

import re
from io import BytesIO
from pathlib import Path
from typing import Union

import structlog
from PyPDF2 import PdfReader

try:
    import pdfplumber
    HAS_PDFPLUMBER = True
except ImportError:
    HAS_PDFPLUMBER = False

from .exceptions import DocumentRejectedError, ExtractionError

logger = structlog.get_logger()


PDF_MAGIC = b"%PDF-"
MIN_TEXT_CHARS = 20


def looks_like_pdf(file_bytes: bytes) -> bool:
    """Check the PDF header within the first KiB."""
    return PDF_MAGIC in file_bytes[:1024]


class PDFTextExtractor:
    """
    Extract the full text layer of a PDF.

    Pages are joined with newlines so that sheet lines stay one per line.
    """

    def __init__(self, *, use_pdfplumber_fallback: bool = True):
        """
        Initialize the extractor.

        Args:
            use_pdfplumber_fallback: Retry with pdfplumber (when installed)
                if PyPDF2 yields fewer than MIN_TEXT_CHARS characters.
        """
        self._use_fallback = use_pdfplumber_fallback and HAS_PDFPLUMBER

    def extract_text(self, file_bytes: bytes, *, source: str = "upload") -> str:
        """
        Extract text from PDF bytes.

        Args:
            file_bytes: Raw document bytes
            source: Display name used in logs and errors

        Returns:
            The document text, pages separated by newlines

        Raises:
            ExtractionError: If the bytes cannot be read as a PDF or no
                text layer could be recovered
        """
        logger.info("extracting_pdf_text", source=source, size=len(file_bytes))

        try:
            reader = PdfReader(BytesIO(file_bytes))
            pages = list(reader.pages)
        except Exception as e:
            raise ExtractionError(
                f"Failed to read PDF: {e}",
                source=source,
                document_type="pdf",
            ) from e

        page_texts: list[str] = []
        for page_num, page in enumerate(pages, start=1):
            try:
                page_texts.append(page.extract_text() or "")
            except Exception as e:
                logger.warning("page_extraction_failed", source=source, page=page_num, error=str(e))
                page_texts.append("")

        text = "\n".join(page_texts)

        if self._use_fallback and len(text.strip()) < MIN_TEXT_CHARS:
            logger.info(
                "pypdf2_fallback_pdfplumber",
                source=source,
                pypdf2_chars=len(text.strip()),
            )
            text = self._extract_with_pdfplumber(file_bytes, source) or text

        if not text.strip():
            raise ExtractionError(
                "PDF has no extractable text layer",
                source=source,
                document_type="pdf",
                details={"pages": len(pages)},
            )

        logger.info("pdf_text_extracted", source=source, pages=len(pages), chars=len(text))
        return text

    def extract_file(self, file_path: Union[str, Path]) -> str:
        """
        Extract text from a PDF on disk.

        Raises:
            FileNotFoundError: If the path does not exist
            DocumentRejectedError: If the path is not a .pdf file
            ExtractionError: If the text layer cannot be read
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"PDF file not found: {file_path}")

        if file_path.suffix.lower() != ".pdf":
            raise DocumentRejectedError(
                f"File must be a PDF: {file_path}",
                source=file_path.name,
                reason="not_pdf",
            )

        return self.extract_text(file_path.read_bytes(), source=file_path.name)

    def _extract_with_pdfplumber(self, file_bytes: bytes, source: str) -> str:
        """Extract text with pdfplumber, returning "" on failure."""
        try:
            with pdfplumber.open(BytesIO(file_bytes)) as pdf:
                texts = []
                for page_num, page in enumerate(pdf.pages, start=1):
                    try:
                        texts.append(self._clean_pdfplumber_text(page.extract_text() or ""))
                    except Exception as e:
                        logger.warning("pdfplumber_page_failed", source=source, page=page_num, error=str(e))
                        texts.append("")
        except Exception as e:
            logger.warning("pdfplumber_fallback_failed", source=source, error=str(e))
            return ""

        text = "\n".join(texts)
        logger.info("pdfplumber_extraction_success", source=source, chars_extracted=len(text.strip()))
        return text

    @staticmethod
    def _clean_pdfplumber_text(text: str) -> str:
        """Drop "(cid:X)" glyph placeholders left by broken font maps."""
        return re.sub(r"\(cid:\d+\)", "", text)


__all__ = ["PDFTextExtractor", "looks_like_pdf", "HAS_PDFPLUMBER"]
