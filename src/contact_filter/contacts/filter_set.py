"""
Loading of the country allow-list.
"""

from pathlib import Path

from contact_filter.shared.exceptions import FilterFileError
from contact_filter.shared.logging import get_logger

logger = get_logger(__name__)


def split_lines(text: str) -> list[str]:
    """Split text on ``\\n``, dropping one trailing ``\\r`` per line.

    A trailing newline does not produce an extra empty entry, but blank
    lines elsewhere are kept as empty strings.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def load_filter_set(path: str | Path, encoding: str = "utf-8") -> set[str]:
    """Read the filter file into a set of country names.

    Matching is case-sensitive and names are not trimmed beyond the line
    terminator.

    Args:
        path: Path to a text file with one country per line.
        encoding: File encoding.

    Returns:
        Set of distinct country names.

    Raises:
        FilterFileError: If the file cannot be opened, read or decoded.
    """
    try:
        # Decode the raw bytes so that a lone "\r" is not treated as a line break.
        text = Path(path).read_bytes().decode(encoding)
    except (OSError, UnicodeDecodeError, LookupError) as e:
        raise FilterFileError(
            message=f"Cannot read filter file {path}: {e}",
            details={"path": str(path)},
        ) from e

    countries = set(split_lines(text))
    logger.debug(
        "Filter set loaded",
        extra={"path": str(path), "countries": len(countries)},
    )
    return countries
