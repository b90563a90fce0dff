"""
Integration tests for the contact filtering pipeline.
"""

import csv

import pytest

from contact_filter.config import Settings
from contact_filter.contacts.service import ContactFilterService
from contact_filter.shared.exceptions import CSVFormatError, FilterFileError, InputFileError, OutputWriteError

from conftest import HEADER_LINE, make_row, read_output


def _rows(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


@pytest.fixture
def service(settings: Settings) -> ContactFilterService:
    return ContactFilterService(settings)


class TestContactFilterService:
    def test_prioritize_and_limit(self, service, sample_csv, north_america_filter, tmp_path):
        """Three US and two Canada rows with limit 4 keep all US rows and the first Canada row."""
        out = tmp_path / "out.csv"

        summary = service.run(sample_csv, north_america_filter, out, priority_country="United States", limit=4)

        rows = _rows(out)
        assert [r["Name"] for r in rows] == ["US1", "US2", "US3", "CA1"]
        assert [r["No."] for r in rows] == ["1", "2", "3", "4"]
        assert [r["ID"] for r in rows] == ["102", "104", "107", "101"]

        assert summary.filter_countries == 2
        assert summary.records_read == 7
        assert summary.priority_count == 3
        assert summary.other_count == 2
        assert summary.total_filtered == 5
        assert summary.truncated is True
        assert summary.records_written == 4
        assert summary.output_path == str(out)

    def test_row_kept_iff_country_in_filter(self, service, sample_csv, write_file, tmp_path):
        out = tmp_path / "out.csv"
        countries = write_file("countries.txt", "Japan\nGermany\n")

        service.run(sample_csv, countries, out, priority_country="United States", limit=100)

        assert {r["Country"] for r in _rows(out)} == {"Germany", "Japan"}
        assert [r["Name"] for r in _rows(out)] == ["DE1", "JP1"]

    def test_header_is_identical(self, service, sample_csv, north_america_filter, tmp_path):
        out = tmp_path / "out.csv"

        service.run(sample_csv, north_america_filter, out, priority_country="United States", limit=10)

        assert read_output(out)[0] == HEADER_LINE

    def test_reordered_header_is_preserved(self, service, write_file, north_america_filter, tmp_path):
        header = "Country,Name,No.,ID,Repeater,City,Province,Remark,Type,Alert Call"
        source = write_file(
            "contacts.csv",
            header + "\nCanada,Jane,9,55,R,Town,Region,,Private Call,None\n",
        )
        out = tmp_path / "out.csv"

        service.run(source, north_america_filter, out)

        assert read_output(out) == [header, "Canada,Jane,1,55,R,Town,Region,,Private Call,None"]

    def test_full_filter_keeps_every_row(self, service, sample_csv, write_file, tmp_path):
        out = tmp_path / "out.csv"
        countries = write_file("countries.txt", "United States\nCanada\nGermany\nJapan\n")

        summary = service.run(sample_csv, countries, out, priority_country="United States", limit=50_000)

        rows = _rows(out)
        assert len(rows) == 7
        assert summary.truncated is False
        assert sorted(r["ID"] for r in rows) == [str(i) for i in range(101, 108)]
        assert [r["No."] for r in rows] == [str(i) for i in range(1, 8)]

    def test_without_priority_keeps_input_order(self, service, sample_csv, north_america_filter, tmp_path):
        out = tmp_path / "out.csv"

        summary = service.run(sample_csv, north_america_filter, out)

        assert [r["Name"] for r in _rows(out)] == ["CA1", "US1", "US2", "CA2", "US3"]
        assert summary.priority_count == 0
        assert summary.limit is None

    def test_custom_priority_country(self, service, sample_csv, north_america_filter, tmp_path):
        out = tmp_path / "out.csv"

        service.run(sample_csv, north_america_filter, out, priority_country="Canada", limit=50_000)

        assert [r["Name"] for r in _rows(out)] == ["CA1", "CA2", "US1", "US2", "US3"]

    def test_zero_limit_writes_header_only(self, service, sample_csv, north_america_filter, tmp_path):
        out = tmp_path / "out.csv"

        summary = service.run(sample_csv, north_america_filter, out, priority_country="United States", limit=0)

        assert read_output(out) == [HEADER_LINE]
        assert summary.records_written == 0

    def test_progress_messages(self, service, sample_csv, north_america_filter, tmp_path, capsys):
        from contact_filter.shared.logging import setup_logging

        setup_logging(Settings(_env_file=None))
        out = tmp_path / "out.csv"

        service.run(sample_csv, north_america_filter, out, priority_country="United States", limit=4)

        stdout = capsys.readouterr().out
        assert "Filtering for 2 countries." in stdout
        assert "Read 7 records." in stdout
        assert "Found 3 contacts from the priority country (United States)." in stdout
        assert "Found 2 contacts from other filtered countries." in stdout
        assert "Total filtered contacts before truncation: 5" in stdout
        assert "List truncated to the first 4 records." in stdout
        assert f"Wrote 4 records to {out}." in stdout

    def test_malformed_row_aborts_before_writing(self, service, write_file, north_america_filter, tmp_path):
        source = write_file(
            "contacts.csv",
            "\n".join([HEADER_LINE, make_row(1, 1, "Canada"), "2,not-a-number,R,N,C,P,Canada,,T,None"]) + "\n",
        )
        out = tmp_path / "out.csv"

        with pytest.raises(CSVFormatError) as exc_info:
            service.run(source, north_america_filter, out)

        assert exc_info.value.line_number == 3
        assert not out.exists()

    def test_missing_filter_file(self, service, sample_csv, tmp_path):
        with pytest.raises(FilterFileError):
            service.run(sample_csv, tmp_path / "missing.txt", tmp_path / "out.csv")

    def test_missing_input(self, service, north_america_filter, tmp_path):
        with pytest.raises(InputFileError):
            service.run(tmp_path / "missing.csv", north_america_filter, tmp_path / "out.csv")

    def test_unwritable_output(self, service, sample_csv, north_america_filter, tmp_path):
        with pytest.raises(OutputWriteError):
            service.run(sample_csv, north_america_filter, tmp_path / "missing-dir" / "out.csv")

    def test_byte_order_mark_input_succeeds(self, service, north_america_filter, tmp_path):
        """A BOM-prefixed export is read and the output header carries no BOM."""
        source = tmp_path / "contacts.csv"
        source.write_bytes(b"\xef\xbb\xbf" + (HEADER_LINE + "\n" + make_row(1, 1, "Canada") + "\n").encode())
        out = tmp_path / "out.csv"

        summary = service.run(source, north_america_filter, out)

        assert read_output(out)[0] == HEADER_LINE
        assert summary.records_written == 1

    def test_settings_delimiter_used_for_input_and_output(self, write_file, north_america_filter, tmp_path):
        source = write_file(
            "contacts.csv",
            HEADER_LINE.replace(",", ";") + "\n" + make_row(5, 1, "Canada").replace(",", ";") + "\n",
        )
        out = tmp_path / "out.csv"

        ContactFilterService(Settings(_env_file=None, delimiter=";")).run(source, north_america_filter, out)

        assert read_output(out)[1].startswith("1;1;RPT1;")
