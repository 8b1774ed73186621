"""
Records produced by the Drive listings and the audits built on them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

# Zero value used by the Drive tooling for "no timestamp"
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class FileInfo:
    """File metadata as returned by the Drive files listing."""
    id: str
    name: str = ""
    mime_type: str = ""
    owner_email: str = ""
    created_time: str = ""
    modified_time: str = ""
    size: int = 0


@dataclass(frozen=True)
class Permission:
    """A single permission entry on a file."""
    id: str = ""
    type: str = ""  # user, group, domain, anyone
    role: str = ""  # owner, organizer, fileOrganizer, writer, commenter, reader
    email_address: str = ""
    domain: str = ""
    display_name: str = ""


@dataclass(frozen=True)
class FileRecord:
    """A row of the files-by-owner report."""
    owner_email: str
    file_id: str
    file_name: str
    file_type: str
    created_time: Optional[datetime] = None
    modified_time: Optional[datetime] = None
    size_bytes: int = 0


@dataclass(frozen=True)
class ExternalShareRecord:
    """A row of the external-sharing report."""
    owner_email: str
    file_id: str
    file_name: str
    shared_with_email: str = ""
    shared_with_domain: str = ""
    permission_type: str = ""
    permission_role: str = ""
    # The Drive API does not expose when a permission was granted
    shared_date: Optional[datetime] = None


@dataclass(frozen=True)
class FileError:
    """A permission fetch that failed for one file."""
    file_id: str
    error: Exception

    def __str__(self) -> str:
        return f"file {self.file_id}: {self.error}"


@dataclass
class AuditResult:
    """Counts and records gathered by one audit run."""
    total_files: int = 0
    files_processed: int = 0
    total_external_shares: int = 0
    file_records: List[FileRecord] = field(default_factory=list)
    external_shares: List[ExternalShareRecord] = field(default_factory=list)
    errors: List[FileError] = field(default_factory=list)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an RFC 3339 timestamp such as "2024-01-15T10:00:00.000Z".

    Returns:
        Datetime in UTC, or None when the value is empty, invalid, outside
        the representable range, or the zero time 0001-01-01T00:00:00Z
    """
    if not value or "T" not in value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    try:
        parsed = parsed.astimezone(timezone.utc)
    except OverflowError:
        return None
    if parsed == ZERO_TIME:
        return None
    return parsed


def format_timestamp(value: Optional[datetime]) -> str:
    """Render a timestamp for reports; None and the zero time become ""."""
    if value is None:
        return ""
    try:
        value = value.astimezone(timezone.utc)
    except OverflowError:
        return ""
    if value == ZERO_TIME:
        return ""
    # strftime("%Y") does not zero-pad years before 1000 on every platform
    return (f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
            f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}Z")


def parse_size(value) -> int:
    """Drive reports sizes as decimal strings; missing or bad values become 0."""
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
