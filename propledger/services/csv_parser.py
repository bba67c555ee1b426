"""CSV file parsing for transaction imports."""
import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from propledger.config import settings

logger = logging.getLogger(__name__)


class CSVParseError(ValueError):
    """Raised when an uploaded file is not a usable CSV. Aborts the import."""


@dataclass
class ParsedCSV:
    """Header row plus one dict per data row, keyed by header."""
    headers: List[str]
    rows: List[Dict[str, str]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def preview(self, limit: Optional[int] = None) -> List[Dict[str, str]]:
        """First rows shown on the mapping step."""
        if limit is None:
            limit = settings.IMPORT_PREVIEW_ROWS
        return self.rows[:limit]


def decode_content(content: Union[bytes, str], encoding: Optional[str] = None) -> str:
    """Decode upload bytes, falling back to latin-1 for legacy exports."""
    if isinstance(content, str):
        return content

    encoding = encoding or settings.CSV_ENCODING
    try:
        return content.decode(encoding)
    except UnicodeDecodeError:
        logger.warning(f"CSV is not valid {encoding}, decoding as latin-1")
        return content.decode("latin-1")


def parse_csv(content: Union[bytes, str], encoding: Optional[str] = None) -> ParsedCSV:
    """
    Parse CSV content into headers and rows.

    Blank lines are skipped. Values are kept as raw strings; typing happens
    per field in the row normalizer.

    Raises:
        CSVParseError: empty file, missing or duplicate headers, or a row
            with more cells than there are headers
    """
    text = decode_content(content, encoding)
    if not text.strip():
        raise CSVParseError("CSV file is empty")

    reader = csv.DictReader(io.StringIO(text, newline=""))

    try:
        raw_headers = reader.fieldnames
    except csv.Error as e:
        raise CSVParseError(f"Could not read CSV header: {e}") from e

    if not raw_headers:
        raise CSVParseError("CSV file has no header row")

    headers = [h.strip() for h in raw_headers]
    if any(not h for h in headers):
        raise CSVParseError("CSV header contains a blank column name")

    seen = set()
    for header in headers:
        if header in seen:
            raise CSVParseError(f"Duplicate column name in header: {header}")
        seen.add(header)

    reader.fieldnames = headers

    rows: List[Dict[str, str]] = []
    try:
        for row in reader:
            if None in row:
                raise CSVParseError(
                    f"Row {reader.line_num} has more values than the header has columns"
                )
            values = {key: (value if value is not None else "") for key, value in row.items()}
            if not any(v.strip() for v in values.values()):
                continue
            rows.append(values)
    except csv.Error as e:
        raise CSVParseError(f"Malformed CSV at line {reader.line_num}: {e}") from e

    logger.info(f"Parsed CSV with {len(headers)} columns and {len(rows)} rows")
    return ParsedCSV(headers=headers, rows=rows)
