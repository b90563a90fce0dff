"""
Final ordering, truncation, renumbering and CSV output.
"""

import csv
from collections.abc import Sequence
from pathlib import Path

from contact_filter.contacts.schemas import Contact, PartitionedContacts
from contact_filter.shared.exceptions import OutputWriteError
from contact_filter.shared.logging import get_logger

logger = get_logger(__name__)


def finalize_contacts(
    partitioned: PartitionedContacts,
    limit: int | None = None,
) -> list[Contact]:
    """Order, truncate and renumber the filtered contacts.

    Priority contacts come first, so truncation drops from the tail of the
    other group before touching them. Sequence numbers run 1..N in the
    returned order.

    Args:
        partitioned: Filtered contacts split by priority.
        limit: Maximum number of contacts to keep, or None for no limit.

    Returns:
        Contacts in output order.
    """
    final = [*partitioned.priority, *partitioned.other]
    if limit is not None and len(final) > limit:
        final = final[:limit]

    return [
        contact.model_copy(update={"no": position})
        for position, contact in enumerate(final, start=1)
    ]


def write_contacts(
    path: str | Path,
    headers: Sequence[str],
    contacts: Sequence[Contact],
    delimiter: str = ",",
    encoding: str = "utf-8",
    line_terminator: str = "\n",
) -> int:
    """Write the header row and contacts to ``path``.

    Values are written in the column order of ``headers``. A failure
    partway through may leave a truncated file behind.

    Returns:
        Number of contacts written.

    Raises:
        OutputWriteError: If the file cannot be created or written.
    """
    try:
        with open(path, "w", newline="", encoding=encoding) as f:
            writer = csv.writer(f, delimiter=delimiter, lineterminator=line_terminator)
            writer.writerow(headers)
            for contact in contacts:
                writer.writerow(contact.to_row(headers))
    except (OSError, UnicodeEncodeError, LookupError) as e:
        raise OutputWriteError(
            message=f"Cannot write output CSV {path}: {e}",
            details={"path": str(path)},
        ) from e

    logger.debug("Output written", extra={"path": str(path), "rows": len(contacts)})
    return len(contacts)
