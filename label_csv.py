import csv
import io
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from errors import InvalidFileType, MissingRequiredColumn, ParseError

logger = logging.getLogger(__name__)

DELIMITER = ";"
REQUIRED_COLUMN = "LOCALIZACAO"
QUANTITY_COLUMN = "QUANTIDADE"
CSV_MIMETYPE = "text/csv"

TEMPLATE_FILENAME = "modelo_localizacao.csv"
# \ufeff so spreadsheet tools keep the accents
TEMPLATE_CONTENT = (
    "\ufeffLOCALIZACAO;QUANTIDADE\n"
    "A-01-01;1\n"
    "A-01-02;2\n"
    "B-05-10;1"
)


@dataclass(frozen=True)
class InputRow:
    location_code: str
    quantity: Optional[str] = None


@dataclass(frozen=True)
class ParsedTable:
    rows: List[InputRow] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)

    def __len__(self):
        return len(self.rows)


def is_csv_upload(file_name: str, mimetype: Optional[str]) -> bool:
    return mimetype == CSV_MIMETYPE or (file_name or "").endswith(".csv")


def check_upload(file_name: str, mimetype: Optional[str]) -> None:
    if not is_csv_upload(file_name, mimetype):
        raise InvalidFileType(file_name)


def parse_table(data: bytes) -> ParsedTable:
    """Read `;`-delimited text into rows keyed by the header line.

    Values stay strings; blank lines are skipped. A leading BOM (as written by
    the template download) is dropped.
    """
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError(f"arquivo não está em UTF-8 ({exc.reason})") from exc

    try:
        r = csv.DictReader(io.StringIO(text, newline=""), delimiter=DELIMITER)
        columns = list(r.fieldnames or [])
        rows = []
        for row in r:
            rows.append(
                InputRow(
                    location_code=(row.get(REQUIRED_COLUMN) or "").strip(),
                    quantity=row.get(QUANTITY_COLUMN),
                )
            )
    except csv.Error as exc:
        raise ParseError(str(exc)) from exc

    logger.debug("parsed %d rows with columns %s", len(rows), columns)
    return ParsedTable(rows=rows, columns=columns)


def validate_columns(table: ParsedTable) -> ParsedTable:
    if REQUIRED_COLUMN not in table.columns:
        raise MissingRequiredColumn(REQUIRED_COLUMN)
    return table


def template_csv() -> bytes:
    return TEMPLATE_CONTENT.encode("utf-8")
