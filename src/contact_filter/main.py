"""
Command-line entry points.

``contact-filter`` is the full tool with prioritization and a row limit;
``contact-filter-basic`` only filters and renumbers.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from pydantic import ValidationError

from contact_filter import __version__
from contact_filter.config import Settings, get_settings
from contact_filter.contacts.service import ContactFilterService
from contact_filter.shared.exceptions import ContactFilterError
from contact_filter.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)

BASIC_USAGE = "Usage: contact-filter-basic <input_csv> <filter_file> <output_csv>"


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid count: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"count must be >= 0, got {number}")
    return number


def build_parser(settings: Settings | None = None) -> argparse.ArgumentParser:
    settings = settings or get_settings()
    parser = argparse.ArgumentParser(
        prog="contact-filter",
        description=(
            "Filter a CSV file of contacts by a list of countries, "
            "with prioritization and size limiting."
        ),
    )
    parser.add_argument("input_csv", help="Path to the input CSV file.")
    parser.add_argument("filter_file", help="Path to the country filter file (one country per line).")
    parser.add_argument("output_csv", help="Path for the new, filtered output CSV file.")
    parser.add_argument(
        "--priority-country",
        default=settings.priority_country,
        help="The country to prioritize, ensuring its contacts appear first. (default: %(default)s)",
    )
    parser.add_argument(
        "--limit",
        type=_non_negative_int,
        default=settings.limit,
        help="The maximum number of contacts to include in the final output. (default: %(default)s)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _load_settings() -> Settings | None:
    """Build settings, reporting invalid environment values instead of raising."""
    try:
        return get_settings()
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return None


def _run(
    settings: Settings,
    input_csv: str,
    filter_file: str,
    output_csv: str,
    priority_country: str | None,
    limit: int | None,
) -> int:
    setup_logging(settings)
    try:
        ContactFilterService(settings).run(
            input_csv,
            filter_file,
            output_csv,
            priority_country=priority_country,
            limit=limit,
        )
    except ContactFilterError as e:
        logger.error("Filtering failed: %s", e, extra={"details": e.details})
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for ``contact-filter``."""
    settings = _load_settings()
    if settings is None:
        return 1
    args = build_parser(settings).parse_args(argv)
    return _run(
        settings,
        args.input_csv,
        args.filter_file,
        args.output_csv,
        priority_country=args.priority_country,
        limit=args.limit,
    )


def basic_main(argv: Sequence[str] | None = None) -> int:
    """Entry point for ``contact-filter-basic``: exactly three paths, no options."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 3:
        print(BASIC_USAGE, file=sys.stderr)
        return 1
    settings = _load_settings()
    if settings is None:
        return 1
    input_csv, filter_file, output_csv = args
    return _run(settings, input_csv, filter_file, output_csv, priority_country=None, limit=None)


if __name__ == "__main__":
    sys.exit(main())
