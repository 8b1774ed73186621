"""Tests for the CSV and JSON report writers."""

import csv
import json
import os
from datetime import datetime, timedelta, timezone

import pytest

from drive_audit.errors import ReportError
from drive_audit.models import ExternalShareRecord, FileRecord
from drive_audit.reporter import (EXTERNAL_SHARING_HEADER, FILES_BY_OWNER_HEADER, CSVReporter,
                                  JSONReporter, Reporter, new_reporter, sort_records)


def read_rows(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


def file_record(owner, name, file_id="id", **extra):
    return FileRecord(owner_email=owner, file_id=file_id, file_name=name,
                      file_type="text/plain", **extra)


def test_reporter_creates_nested_output_dir(tmp_path):
    output_dir = tmp_path / "parent" / "child" / "output"

    reporter = CSVReporter(str(output_dir))

    assert output_dir.is_dir()
    assert reporter.output_dir == str(output_dir)


def test_files_by_owner_header_and_rows(tmp_path):
    reporter = CSVReporter(str(tmp_path))
    records = [
        file_record("alice@example.com", "document1.pdf", file_id="file1",
                    created_time=datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
                    modified_time=datetime(2024, 1, 20, 15, 0, tzinfo=timezone.utc),
                    size_bytes=1024),
    ]

    path = reporter.write_files_by_owner(records)

    assert path == os.path.join(str(tmp_path), "files_by_owner.csv")
    rows = read_rows(path)
    assert rows[0] == FILES_BY_OWNER_HEADER
    assert rows[1] == ["alice@example.com", "file1", "document1.pdf", "text/plain",
                       "2024-01-15T10:00:00Z", "2024-01-20T15:00:00Z", "1024"]


def test_empty_records_write_header_only(tmp_path):
    reporter = CSVReporter(str(tmp_path))

    rows = read_rows(reporter.write_external_sharing([]))

    assert rows == [EXTERNAL_SHARING_HEADER]


def test_unset_timestamps_are_empty(tmp_path):
    reporter = CSVReporter(str(tmp_path))

    rows = read_rows(reporter.write_files_by_owner([file_record("u@example.com", "notime.txt")]))

    assert rows[1][4] == ""
    assert rows[1][5] == ""
    assert rows[1][6] == "0"


def test_timestamps_are_rendered_in_utc(tmp_path):
    reporter = CSVReporter(str(tmp_path))
    plus_two = timezone(timedelta(hours=2))
    record = file_record("u@example.com", "a.txt",
                         created_time=datetime(2024, 5, 15, 16, 30, 45, tzinfo=plus_two))

    rows = read_rows(reporter.write_files_by_owner([record]))

    assert rows[1][4] == "2024-05-15T14:30:45Z"


def test_rows_sorted_by_owner_then_name(tmp_path):
    reporter = CSVReporter(str(tmp_path))
    records = [
        file_record("charlie@example.com", "c.txt", "1"),
        file_record("alice@example.com", "a.txt", "2"),
        file_record("bob@example.com", "b.txt", "3"),
        file_record("alice@example.com", "z.txt", "4"),
        file_record("alice@example.com", "m.txt", "5"),
        file_record("alice@example.com", "B.txt", "6"),
    ]

    rows = read_rows(reporter.write_files_by_owner(records))[1:]

    assert [r[0] for r in rows] == ["alice@example.com"] * 4 + ["bob@example.com", "charlie@example.com"]
    # Ordinal comparison: upper case sorts before lower case
    assert [r[2] for r in rows[:4]] == ["B.txt", "a.txt", "m.txt", "z.txt"]


def test_sort_does_not_mutate_input():
    records = [file_record("b@example.com", "x"), file_record("a@example.com", "y")]

    ordered = sort_records(records)

    assert [r.owner_email for r in ordered] == ["a@example.com", "b@example.com"]
    assert records[0].owner_email == "b@example.com"


def test_external_sharing_shared_date_is_empty(tmp_path):
    reporter = CSVReporter(str(tmp_path))
    records = [
        ExternalShareRecord(owner_email="bob@example.com", file_id="f2", file_name="s.xlsx",
                            shared_with_domain="external.org", permission_type="domain",
                            permission_role="writer"),
        ExternalShareRecord(owner_email="alice@example.com", file_id="f1", file_name="s.pdf",
                            shared_with_email="guest@other.com", shared_with_domain="other.com",
                            permission_type="user", permission_role="reader"),
    ]

    rows = read_rows(reporter.write_external_sharing(records))

    assert rows[0] == EXTERNAL_SHARING_HEADER
    assert rows[1] == ["alice@example.com", "f1", "s.pdf", "guest@other.com", "other.com",
                       "user", "reader", ""]
    assert rows[2][0] == "bob@example.com"
    assert rows[2][7] == ""


def test_output_is_byte_identical_for_reordered_input(tmp_path):
    records = [
        file_record("b@example.com", "two", "2", size_bytes=5),
        file_record("a@example.com", "one", "1", size_bytes=7),
    ]

    first = CSVReporter(str(tmp_path / "first")).write_files_by_owner(records)
    second = CSVReporter(str(tmp_path / "second")).write_files_by_owner(list(reversed(records)))

    with open(first, "rb") as f1, open(second, "rb") as f2:
        assert f1.read() == f2.read()


def test_json_reporter_uses_column_names(tmp_path):
    reporter = JSONReporter(str(tmp_path))

    path = reporter.write_files_by_owner([file_record("a@example.com", "one", "1")])

    assert path.endswith("files_by_owner.json")
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    assert data["total_records"] == 1
    assert list(data["records"][0].keys()) == FILES_BY_OWNER_HEADER
    assert data["records"][0]["size_bytes"] == "0"


def test_new_reporter_selects_by_format(tmp_path):
    assert isinstance(new_reporter("csv", str(tmp_path)), CSVReporter)
    assert isinstance(new_reporter("json", str(tmp_path)), JSONReporter)
    with pytest.raises(ReportError):
        new_reporter("xml", str(tmp_path))


def test_unwritable_output_dir_raises_report_error(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")

    with pytest.raises(ReportError):
        CSVReporter(str(blocker / "output"))


def test_early_and_zero_timestamps_keep_fixed_width(tmp_path):
    reporter = CSVReporter(str(tmp_path))
    record = file_record("o@example.com", "n",
                         created_time=datetime(1, 1, 1, tzinfo=timezone.utc),
                         modified_time=datetime(999, 3, 4, 5, 6, 7, tzinfo=timezone.utc))

    rows = read_rows(reporter.write_files_by_owner([record]))

    assert rows[1][4] == ""
    assert rows[1][5] == "0999-03-04T05:06:07Z"


def test_base_reporter_cannot_be_instantiated(tmp_path):
    with pytest.raises(TypeError):
        Reporter(str(tmp_path))
