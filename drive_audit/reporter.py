"""
Report writers for audit results.

Records are sorted by owner email, then file name, before they are written,
so the same input always produces the same file.
"""

import csv
import json
import os
from abc import ABC, abstractmethod
from typing import Dict, List, Sequence, Union

from .errors import ReportError
from .models import ExternalShareRecord, FileRecord, format_timestamp

FILES_BY_OWNER_BASENAME = "files_by_owner"
EXTERNAL_SHARING_BASENAME = "external_sharing"

FILES_BY_OWNER_HEADER = [
    "owner_email", "file_id", "file_name", "file_type",
    "created_time", "modified_time", "size_bytes",
]

EXTERNAL_SHARING_HEADER = [
    "owner_email", "file_id", "file_name", "shared_with_email",
    "shared_with_domain", "permission_type", "permission_role", "shared_date",
]

AnyRecord = Union[FileRecord, ExternalShareRecord]


def sort_records(records: Sequence[AnyRecord]) -> List[AnyRecord]:
    """Order by owner email, then file name (ordinal, case-sensitive)."""
    return sorted(records, key=lambda r: (r.owner_email, r.file_name))


def file_record_row(rec: FileRecord) -> List[str]:
    return [
        rec.owner_email,
        rec.file_id,
        rec.file_name,
        rec.file_type,
        format_timestamp(rec.created_time),
        format_timestamp(rec.modified_time),
        str(rec.size_bytes),
    ]


def external_share_row(rec: ExternalShareRecord) -> List[str]:
    return [
        rec.owner_email,
        rec.file_id,
        rec.file_name,
        rec.shared_with_email,
        rec.shared_with_domain,
        rec.permission_type,
        rec.permission_role,
        format_timestamp(rec.shared_date),
    ]


class Reporter(ABC):
    """Writes both audit reports into one output directory."""

    extension = ""

    def __init__(self, output_dir: str):
        try:
            os.makedirs(output_dir, mode=0o750, exist_ok=True)
        except OSError as e:
            raise ReportError(f"failed to create output directory {output_dir}: {e}") from e
        self.output_dir = output_dir

    def report_path(self, basename: str) -> str:
        return os.path.join(self.output_dir, basename + self.extension)

    def write_files_by_owner(self, records: Sequence[FileRecord]) -> str:
        """Write the files-by-owner report and return its path."""
        rows = [file_record_row(r) for r in sort_records(records)]
        return self._write(FILES_BY_OWNER_BASENAME, FILES_BY_OWNER_HEADER, rows)

    def write_external_sharing(self, records: Sequence[ExternalShareRecord]) -> str:
        """Write the external-sharing report and return its path."""
        rows = [external_share_row(r) for r in sort_records(records)]
        return self._write(EXTERNAL_SHARING_BASENAME, EXTERNAL_SHARING_HEADER, rows)

    @abstractmethod
    def _write(self, basename: str, header: List[str], rows: List[List[str]]) -> str:
        """Write one report and return its path."""


class CSVReporter(Reporter):
    extension = ".csv"

    def _write(self, basename: str, header: List[str], rows: List[List[str]]) -> str:
        path = self.report_path(basename)
        try:
            with open(path, "w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(header)
                writer.writerows(rows)
        except (OSError, csv.Error) as e:
            raise ReportError(f"failed to write {path}: {e}") from e
        return path


class JSONReporter(Reporter):
    """Same rows as the CSV reports, as a list of objects keyed by column name."""

    extension = ".json"

    def _write(self, basename: str, header: List[str], rows: List[List[str]]) -> str:
        path = self.report_path(basename)
        output_data: Dict = {
            "report": basename,
            "total_records": len(rows),
            "records": [dict(zip(header, row)) for row in rows],
        }
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(output_data, f, indent=2)
                f.write("\n")
        except OSError as e:
            raise ReportError(f"failed to write {path}: {e}") from e
        return path


REPORTERS = {
    "csv": CSVReporter,
    "json": JSONReporter,
}


def new_reporter(output_format: str, output_dir: str) -> Reporter:
    """Pick the reporter for a configured output format."""
    try:
        reporter_class = REPORTERS[output_format]
    except KeyError:
        raise ReportError(f"unsupported output format: {output_format}")
    return reporter_class(output_dir)
