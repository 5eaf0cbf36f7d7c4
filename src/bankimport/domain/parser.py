"""Bank export reading and row normalization."""

import csv
import io
import logging
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from bankimport.config import (
    HEADER_SCAN_ROWS,
    MAX_FILE_SIZE,
    MIN_HEADER_CELLS,
    SUPPORTED_EXTENSIONS,
)
from bankimport.domain.entities import ColumnMapping, ParsedTransaction, ParseResult
from bankimport.domain.errors import FormatError
from bankimport.domain.templates import detect_column_mapping, find_bank_template
from bankimport.utils.amount_parser import parse_amount
from bankimport.utils.date_parser import parse_transaction_date

logger = logging.getLogger(__name__)

TEXT_ENCODINGS = ("utf-8-sig", "cp949")


def _is_filled(cell: Any) -> bool:
    return cell is not None and cell != ""


def _decode(content: bytes) -> str:
    for encoding in TEXT_ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise FormatError(f"Could not decode file as any of: {', '.join(TEXT_ENCODINGS)}")


def _read_delimited(content: bytes, suffix: str) -> list[list[Any]]:
    text = _decode(content)
    if suffix == ".tsv":
        dialect = csv.excel_tab
    else:
        try:
            dialect = csv.Sniffer().sniff(text[:4096], delimiters=",;\t|")
        except csv.Error:
            dialect = csv.excel
    return [row for row in csv.reader(io.StringIO(text), dialect)]


def _read_workbook(content: bytes) -> list[list[Any]]:
    try:
        df = pd.read_excel(io.BytesIO(content), header=None, dtype=object, engine="openpyxl")
    except Exception as e:
        raise FormatError(f"Could not read workbook: {e}")
    return [
        [None if pd.isna(cell) else cell for cell in row]
        for row in df.itertuples(index=False, name=None)
    ]


def read_table(file_path: str) -> list[list[Any]]:
    """Read every physical row of a bank export.

    Args:
        file_path: Path to a .csv/.tsv/.txt or .xlsx file

    Returns:
        Rows as lists of cell values (strings for text files, native values
        for workbooks)

    Raises:
        FormatError: If the file is missing, too large, of an unsupported type
            or unreadable
    """
    path = Path(file_path)
    if not path.exists():
        raise FormatError(f"File not found: {file_path}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise FormatError(
            f"Unsupported file type '{suffix}'. Supported: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    size = path.stat().st_size
    if size > MAX_FILE_SIZE:
        raise FormatError(f"File is too large ({size} bytes, limit {MAX_FILE_SIZE})")

    content = path.read_bytes()
    if suffix == ".xlsx":
        return _read_workbook(content)
    return _read_delimited(content, suffix)


def find_header_row(rows: list[list[Any]]) -> Optional[int]:
    """Return the index of the first early row with enough non-empty cells."""
    for index, row in enumerate(rows[:HEADER_SCAN_ROWS]):
        if row and sum(1 for cell in row if _is_filled(cell)) >= MIN_HEADER_CELLS:
            return index
    return None


def _column_index(headers: list[str], header: Optional[str]) -> int:
    if not header:
        return -1
    try:
        return headers.index(header)
    except ValueError:
        return -1


def _cell(row: list[Any], index: int) -> Any:
    if index == -1 or index >= len(row):
        return None
    return row[index]


def extract_transactions(
    rows: list[list[Any]], headers: list[str], mapping: ColumnMapping
) -> list[ParsedTransaction]:
    """Turn data rows into parsed transactions using a column mapping.

    Rows without a recognizable date, or with neither a deposit nor a
    withdrawal, are dropped without error.

    Args:
        rows: Data rows following the header row
        headers: Header row cells
        mapping: Field to header mapping

    Returns:
        Parsed transactions; ``row_index`` is the 1-based position in ``rows``
    """
    date_index = _column_index(headers, mapping.date)
    desc_index = _column_index(headers, mapping.description)
    deposit_index = _column_index(headers, mapping.deposit)
    withdrawal_index = _column_index(headers, mapping.withdrawal)
    balance_index = _column_index(headers, mapping.balance)

    transactions = []
    for row_index, row in enumerate(rows, start=1):
        raw_data = {header: _cell(row, i) for i, header in enumerate(headers)}

        txn_date = parse_transaction_date(_cell(row, date_index))
        description = _cell(row, desc_index)
        description = "" if description is None else str(description).strip()
        deposit = parse_amount(_cell(row, deposit_index))
        withdrawal = parse_amount(_cell(row, withdrawal_index))
        balance = parse_amount(_cell(row, balance_index))

        if not txn_date or (deposit == 0 and withdrawal == 0):
            continue

        transactions.append(
            ParsedTransaction(
                row_index=row_index,
                date=txn_date,
                description=description,
                deposit=deposit,
                withdrawal=withdrawal,
                balance=balance,
                raw_data=raw_data,
            )
        )

    dropped = len(rows) - len(transactions)
    if dropped:
        logger.debug("Dropped %d of %d data rows without date or amount", dropped, len(rows))
    return transactions


def parse_rows(raw_rows: list[list[Any]]) -> ParseResult:
    """Detect the layout of raw rows and normalize them.

    Args:
        raw_rows: Every physical row of the file

    Returns:
        Parse result with headers, data rows, suggested mapping and parsed
        transactions

    Raises:
        FormatError: If there are fewer than 2 rows, no header row within the
            first rows, or no data rows after the header
    """
    if len(raw_rows) < 2:
        raise FormatError(
            "Not enough data: a header row and at least one data row are required"
        )

    header_index = find_header_row(raw_rows)
    if header_index is None:
        raise FormatError(
            f"No header row found: none of the first {HEADER_SCAN_ROWS} rows has "
            f"at least {MIN_HEADER_CELLS} non-empty cells"
        )

    headers = ["" if cell is None else str(cell).strip() for cell in raw_rows[header_index]]
    rows = [
        list(row) for row in raw_rows[header_index + 1:] if any(_is_filled(c) for c in row)
    ]
    if not rows:
        raise FormatError("No data rows found after the header row")

    template = find_bank_template(headers)
    mapping = detect_column_mapping(headers, template)
    transactions = extract_transactions(rows, headers, mapping)

    logger.info(
        "Parsed %d transactions from %d data rows (template '%s')",
        len(transactions),
        len(rows),
        template.id,
    )
    return ParseResult(
        bank_type=template.id,
        headers=headers,
        rows=rows,
        suggested_mapping=mapping,
        transactions=transactions,
    )


def parse_file(file_path: str) -> ParseResult:
    """Read a bank export and normalize it.

    Raises:
        FormatError: If the file cannot be read or has no usable layout
    """
    return parse_rows(read_table(file_path))
