"""
CSV parsing and validation for contact exports.

Any malformed row aborts the whole parse; there is no partial-skip policy.
"""

import codecs
import csv
import io
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from contact_filter.contacts.schemas import CONTACT_HEADERS, Contact, PartitionedContacts
from contact_filter.shared.exceptions import CSVFormatError, InputFileError
from contact_filter.shared.logging import get_logger

logger = get_logger(__name__)


def validate_headers(headers: list[str]) -> None:
    """Check that the header row holds exactly the contact columns.

    Column order is free; it is carried through to the output unchanged.

    Raises:
        CSVFormatError: On missing, unknown or duplicated columns.
    """
    duplicates = sorted({h for h in headers if headers.count(h) > 1})
    if duplicates:
        raise CSVFormatError(
            f"Duplicate headers: {', '.join(duplicates)}",
            line_number=1,
            value=", ".join(duplicates),
        )

    missing = [h for h in CONTACT_HEADERS if h not in headers]
    if missing:
        raise CSVFormatError(
            f"Missing required headers: {', '.join(missing)}",
            line_number=1,
            value=", ".join(missing),
        )

    unknown = [h for h in headers if h not in CONTACT_HEADERS]
    if unknown:
        raise CSVFormatError(
            f"Unknown headers: {', '.join(unknown)}",
            line_number=1,
            value=", ".join(unknown),
        )


class CSVParser:
    """Parser for contact CSV files."""

    def __init__(
        self,
        delimiter: str = ",",
        encoding: str = "utf-8",
    ) -> None:
        """Initialize CSV parser.

        Args:
            delimiter: CSV field delimiter.
            encoding: File encoding.
        """
        self.delimiter = delimiter
        self.encoding = encoding

    def parse_file(self, path: str | Path) -> tuple[list[str], list[Contact]]:
        """Read and parse a contact CSV from disk.

        Raises:
            InputFileError: If the file cannot be opened or read.
            CSVFormatError: If the header or any row is malformed.
        """
        try:
            content = Path(path).read_bytes()
        except OSError as e:
            raise InputFileError(
                message=f"Cannot read input CSV {path}: {e}",
                details={"path": str(path)},
            ) from e
        return self.parse(content)

    def parse(self, content: bytes) -> tuple[list[str], list[Contact]]:
        """Parse CSV content into its header row and contact records.

        Args:
            content: Raw CSV file content.

        Returns:
            Tuple of (header row as read, contacts in input order).

        Raises:
            InputFileError: If the content cannot be decoded.
            CSVFormatError: If the header or any row is malformed.
        """
        encoding = self.encoding
        try:
            if codecs.lookup(encoding).name == "utf-8":
                # A leading byte-order mark is not part of the first header.
                encoding = "utf-8-sig"
            text = content.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            raise InputFileError(message=f"File encoding error: {e}") from e

        # newline="" lets the reader see "\r", "\n" and "\r\n" record terminators.
        reader = csv.reader(io.StringIO(text, newline=""), delimiter=self.delimiter)

        headers = self._read_headers(reader)
        validate_headers(headers)

        logger.debug("CSV headers parsed", extra={"headers": headers})

        contacts: list[Contact] = []
        try:
            for row in reader:
                if not row:
                    # blank line
                    continue
                contacts.append(self._parse_row(reader.line_num, headers, row))
        except csv.Error as e:
            raise CSVFormatError(f"CSV syntax error: {e}", line_number=reader.line_num) from e

        return headers, contacts

    def _read_headers(self, reader) -> list[str]:
        try:
            for row in reader:
                if row:
                    return row
        except csv.Error as e:
            raise CSVFormatError(f"CSV syntax error: {e}", line_number=reader.line_num) from e
        raise CSVFormatError("CSV file is empty or has no headers", line_number=1)

    def _parse_row(
        self,
        line_number: int,
        headers: list[str],
        row: list[str],
    ) -> Contact:
        """Parse and validate a single CSV row.

        Args:
            line_number: Line number in the file.
            headers: Header row.
            row: Raw cell values.

        Returns:
            Parsed contact.
        """
        if len(row) != len(headers):
            raise CSVFormatError(
                f"Expected {len(headers)} fields, found {len(row)}",
                line_number=line_number,
                value=self.delimiter.join(row),
            )

        try:
            return Contact.model_validate(dict(zip(headers, row)))
        except ValidationError as e:
            first = e.errors()[0]
            field = str(first["loc"][0]) if first["loc"] else None
            value = first.get("input")
            logger.debug(
                "Row parsing error",
                extra={"line_number": line_number, "error": str(e)},
            )
            raise CSVFormatError(
                f"Invalid value for {field!r}: {first['msg']}",
                line_number=line_number,
                field=field,
                value=None if value is None else str(value),
            ) from e


def partition_contacts(
    contacts: Iterable[Contact],
    countries: set[str],
    priority_country: str | None = None,
) -> PartitionedContacts:
    """Keep contacts whose country is in ``countries`` and split them.

    Contacts from ``priority_country`` go to the priority group, everything
    else kept goes to the other group. Both groups keep input order. With no
    priority country every kept contact lands in the other group.
    """
    result = PartitionedContacts()
    for contact in contacts:
        result.records_read += 1
        if contact.country not in countries:
            continue
        if priority_country is not None and contact.country == priority_country:
            result.priority.append(contact)
        else:
            result.other.append(contact)
    return result
