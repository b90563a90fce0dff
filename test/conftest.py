"""
Pytest configuration and fixtures for the contact filter tests.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from contact_filter.config import Settings
from contact_filter.shared.logging import ROOT_LOGGER_NAME

HEADER_LINE = "No.,ID,Repeater,Name,City,Province,Country,Remark,Type,Alert Call"


def make_row(no: int, contact_id: int, country: str, name: str | None = None) -> str:
    """Build one CSV data line for the standard header."""
    name = name or f"Op{contact_id}"
    return f"{no},{contact_id},RPT{contact_id},{name},Town,Region,{country},,Private Call,None"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep user environment variables out of the settings under test."""
    for key in [
        "CONTACT_FILTER_LOG_LEVEL",
        "CONTACT_FILTER_LOG_FORMAT",
        "CONTACT_FILTER_PRIORITY_COUNTRY",
        "CONTACT_FILTER_LIMIT",
        "CONTACT_FILTER_ENCODING",
        "CONTACT_FILTER_DELIMITER",
        "CONTACT_FILTER_LINE_TERMINATOR",
    ]:
        monkeypatch.delenv(key, raising=False)
    yield
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.handlers = []
    package_logger.propagate = True


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write text to a file under tmp_path without newline translation."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_bytes(content.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def sample_csv(write_file) -> Path:
    """Three US and two Canada contacts interleaved with other countries."""
    lines = [
        HEADER_LINE,
        make_row(1, 101, "Canada", "CA1"),
        make_row(2, 102, "United States", "US1"),
        make_row(3, 103, "Germany", "DE1"),
        make_row(4, 104, "United States", "US2"),
        make_row(5, 105, "Canada", "CA2"),
        make_row(6, 106, "Japan", "JP1"),
        make_row(7, 107, "United States", "US3"),
    ]
    return write_file("contacts.csv", "\n".join(lines) + "\n")


@pytest.fixture
def north_america_filter(write_file) -> Path:
    return write_file("countries.txt", "United States\nCanada\n")


def read_output(path: Path) -> list[str]:
    return path.read_bytes().decode("utf-8").splitlines()
