"""Excel export of stored listings.

The export is a denormalized, one-row-per-listing workbook that admins pull
for offline work. It is regenerated in full after every ingestion.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Sequence, Union

import structlog
from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font

from .exceptions import ExportError
from .models import ExtractedProperty

logger = structlog.get_logger()


SHEET_TITLE = "Properties"

COLUMNS = [
    "City",
    "Area",
    "Property ID",
    "Size Value",
    "Size Unit",
    "Size (sqft)",
    "Floors",
    "Bedrooms",
    "Detail",
    "Raw Detail",
    "Source PDF",
    "Uploaded At",
]

COLUMN_WIDTHS = {
    "City": 16,
    "Area": 24,
    "Property ID": 12,
    "Detail": 60,
    "Raw Detail": 60,
    "Source PDF": 28,
    "Uploaded At": 22,
}


def clean_cell(value: Any) -> Any:
    """Drop control characters openpyxl refuses to store."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def property_row(record: ExtractedProperty) -> list[Any]:
    """Flatten one record into export cells."""
    uploaded_at = getattr(record, "uploaded_at", None)
    row = [
        record.location.city,
        record.location.area,
        record.property_id or "",
        record.size.value if record.size else None,
        record.size.unit.value if record.size else "",
        record.size_sqft,
        ", ".join(floor.value for floor in record.floors),
        record.bedrooms,
        record.detail or "",
        record.raw_detail or "",
        getattr(record, "source_pdf", None) or "",
        uploaded_at.replace(tzinfo=None) if isinstance(uploaded_at, datetime) else None,
    ]
    return [clean_cell(value) for value in row]


class ExcelExportWriter:
    """Write the denormalized listings workbook with openpyxl."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def write_denormalized_export(self, records: Sequence[ExtractedProperty]) -> int:
        """
        Replace the workbook with one row per record.

        Args:
            records: Every currently stored record

        Returns:
            Number of data rows written

        Raises:
            ExportError: If the workbook cannot be written
        """
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = SHEET_TITLE

        sheet.append(COLUMNS)
        for cell in sheet[1]:
            cell.font = Font(bold=True)
        sheet.freeze_panes = "A2"

        for index, name in enumerate(COLUMNS, start=1):
            letter = sheet.cell(row=1, column=index).column_letter
            sheet.column_dimensions[letter].width = COLUMN_WIDTHS.get(name, 12)

        try:
            for record in records:
                sheet.append(property_row(record))
            self.path.parent.mkdir(parents=True, exist_ok=True)
            workbook.save(self.path)
        except Exception as e:
            raise ExportError(f"Failed to write export: {e}", path=str(self.path)) from e

        logger.info("export_written", path=str(self.path), rows=len(records))
        return len(records)


def read_export(path: Union[str, Path]) -> list[dict[str, Any]]:
    """Read an export workbook back as a list of row dicts."""
    path = Path(path)
    if not path.exists():
        return []

    workbook = load_workbook(path, read_only=True)
    try:
        sheet = workbook[SHEET_TITLE]
        rows = sheet.iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return []
        return [dict(zip(header, row)) for row in rows]
    finally:
        workbook.close()


__all__ = ["COLUMNS", "ExcelExportWriter", "clean_cell", "property_row", "read_export"]
