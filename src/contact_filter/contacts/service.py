"""
Contact filtering pipeline: load filter set, ingest, finalize, write.
"""

import logging
from pathlib import Path

from contact_filter.config import Settings, get_settings
from contact_filter.contacts.csv_parser import CSVParser, partition_contacts
from contact_filter.contacts.filter_set import load_filter_set
from contact_filter.contacts.schemas import FilterSummary
from contact_filter.contacts.writer import finalize_contacts, write_contacts
from contact_filter.shared.logging import get_logger, log_with_context

logger = get_logger(__name__)


class ContactFilterService:
    """Runs a single filtering pass over a contact CSV."""

    def __init__(
        self,
        settings: Settings | None = None,
        parser: CSVParser | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            settings: Application settings (defaults to ``get_settings()``).
            parser: Optional CSV parser (for DI).
        """
        self._settings = settings or get_settings()
        self._parser = parser or CSVParser(
            delimiter=self._settings.delimiter,
            encoding=self._settings.encoding,
        )

    def run(
        self,
        input_csv: str | Path,
        filter_file: str | Path,
        output_csv: str | Path,
        priority_country: str | None = None,
        limit: int | None = None,
    ) -> FilterSummary:
        """Filter ``input_csv`` by the countries in ``filter_file``.

        Args:
            input_csv: Path to the contact CSV.
            filter_file: Path to the country list, one per line.
            output_csv: Destination path.
            priority_country: Country whose contacts go first, or None.
            limit: Maximum rows in the output, or None for no limit.

        Returns:
            Summary of the run.

        Raises:
            ContactFilterError: On any read, parse or write failure.
        """
        countries = load_filter_set(filter_file, encoding=self._settings.encoding)
        logger.info("Filtering for %d countries.", len(countries))

        # Phase 1: read and filter
        logger.info("--- Phase 1: Reading and filtering contacts from %s... ---", input_csv)
        headers, contacts = self._parser.parse_file(input_csv)
        partitioned = partition_contacts(contacts, countries, priority_country)

        logger.info("Read %d records.", partitioned.records_read)
        if priority_country is not None:
            logger.info(
                "Found %d contacts from the priority country (%s).",
                len(partitioned.priority),
                priority_country,
            )
            logger.info("Found %d contacts from other filtered countries.", len(partitioned.other))
        else:
            logger.info("Found %d contacts from filtered countries.", len(partitioned.other))

        # Phase 2: prioritize and truncate
        if limit is not None:
            logger.info("--- Phase 2: Prioritizing list and truncating to %d records... ---", limit)
        total_filtered = partitioned.total
        logger.info("Total filtered contacts before truncation: %d", total_filtered)

        final = finalize_contacts(partitioned, limit)
        truncated = len(final) < total_filtered
        if truncated:
            logger.info("List truncated to the first %d records.", limit)

        # Phase 3: write
        logger.info("--- Phase 3: Writing final list to output file... ---")
        written = write_contacts(
            output_csv,
            headers,
            final,
            delimiter=self._settings.delimiter,
            encoding=self._settings.encoding,
            line_terminator=self._settings.line_terminator,
        )
        logger.info("Processing complete!")
        logger.info("Wrote %d records to %s.", written, output_csv)

        summary = FilterSummary(
            filter_countries=len(countries),
            records_read=partitioned.records_read,
            priority_country=priority_country,
            priority_count=len(partitioned.priority),
            other_count=len(partitioned.other),
            total_filtered=total_filtered,
            limit=limit,
            truncated=truncated,
            records_written=written,
            output_path=str(output_csv),
        )
        log_with_context(logger, logging.DEBUG, "Run summary", **summary.model_dump())
        return summary
