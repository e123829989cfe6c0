import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, List, Optional, TextIO

from classifier import classify_transaction
from errors import InputFormatError, MalformedHeaderError, RowDecodeError
from models import MAX_CLIENT_ID, MAX_TRANSACTION_ID, RawTransaction, Transaction, parse_transaction_type

logger = logging.getLogger(__name__)

HEADER_ALIASES = {
    "type": "type",
    "transaction_type": "type",
    "client": "client",
    "client_id": "client",
    "tx": "tx",
    "transaction_id": "tx",
    "amount": "amount",
}
REQUIRED_COLUMNS = ("type", "client", "tx")
MAX_AMOUNT_DIGITS = 64


def parse_header(header: List[str]) -> Dict[str, int]:
    """Map canonical column names to their position in the header row."""
    columns: Dict[str, int] = {}
    for index, name in enumerate(header):
        canonical = HEADER_ALIASES.get(name.strip().lower())
        if canonical is None:
            continue
        if canonical in columns:
            raise MalformedHeaderError(f"column {canonical!r} appears more than once in header {header}")
        columns[canonical] = index

    missing = [name for name in REQUIRED_COLUMNS if name not in columns]
    if missing:
        raise MalformedHeaderError(f"header {header} is missing columns {missing}")
    return columns


def _parse_id(text: str, field_name: str, max_value: int) -> int:
    if not text.isascii() or not text.isdigit():
        raise RowDecodeError(f"{field_name} {text!r} is not an unsigned integer")
    value = int(text)
    if value > max_value:
        raise RowDecodeError(f"{field_name} {value} is out of range (max {max_value})")
    return value


def _parse_amount(text: str) -> Optional[Decimal]:
    if not text:
        return None
    if not text.isascii():
        raise RowDecodeError(f"amount {text!r} is not a decimal number")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise RowDecodeError(f"amount {text!r} is not a decimal number") from None
    if not amount.is_finite():
        raise RowDecodeError(f"amount {text!r} is not a finite number")

    integer_digits = max(amount.adjusted() + 1, 1)
    fraction_digits = max(-amount.as_tuple().exponent, 0)
    if integer_digits + fraction_digits > MAX_AMOUNT_DIGITS:
        raise RowDecodeError(f"amount {text!r} has more than {MAX_AMOUNT_DIGITS} digits")
    return amount


def decode_row(columns: Dict[str, int], header_width: int, row: List[str]) -> RawTransaction:
    """
    Structurally decode one CSV row. Short rows are padded with empty fields,
    trailing extra fields must be empty.
    """
    fields = [field.strip() for field in row]

    extra = [field for field in fields[header_width:] if field]
    if extra:
        raise RowDecodeError(f"unexpected extra fields {extra}")

    def field(name: str) -> str:
        index = columns.get(name)
        if index is None or index >= len(fields):
            return ""
        return fields[index]

    type_str = field("type")
    try:
        transaction_type = parse_transaction_type(type_str)
    except ValueError as e:
        raise RowDecodeError(str(e)) from None

    return RawTransaction(
        transaction_type=transaction_type,
        client_id=_parse_id(field("client"), "client", MAX_CLIENT_ID),
        transaction_id=_parse_id(field("tx"), "tx", MAX_TRANSACTION_ID),
        amount=_parse_amount(field("amount")),
    )


class CsvTransactionReader:
    """
    Reads transactions from a CSV text stream in two stages: structural row
    decoding, then classification into Transfer/Amendment records.
    Rows failing either stage are logged and skipped.
    """

    def __init__(self, stream: TextIO):
        self._rows = csv.reader(stream)
        self.rejected_rows = 0

    def __iter__(self) -> Iterator[Transaction]:
        for line_num, raw in self._read_raw_transactions():
            try:
                transaction = classify_transaction(raw)
            except InputFormatError as e:
                self._reject(line_num, e)
                continue
            yield transaction

    def read_raw_transactions(self) -> Iterator[RawTransaction]:
        """Yield structurally valid rows without classifying them."""
        for _, raw in self._read_raw_transactions():
            yield raw

    def _read_raw_transactions(self) -> Iterator[tuple]:
        try:
            header = next(self._rows, None)
        except csv.Error as e:
            logger.error(f"Failed to read CSV header: {e}")
            return
        if header is None:
            logger.warning("Input contains no header row")
            return

        try:
            columns = parse_header(header)
        except MalformedHeaderError as e:
            logger.error(f"Invalid CSV header: {e}")
            return

        while True:
            try:
                row = next(self._rows)
            except StopIteration:
                return
            except csv.Error as e:
                self._reject(self._rows.line_num, e)
                continue

            if not any(field.strip() for field in row):
                continue

            try:
                raw = decode_row(columns, len(header), row)
            except RowDecodeError as e:
                self._reject(self._rows.line_num, e)
                continue
            yield self._rows.line_num, raw

    def _reject(self, line_num: int, error: Exception) -> None:
        self.rejected_rows += 1
        logger.warning(f"Skipping line {line_num}: {error.__class__.__name__}: {error}")
