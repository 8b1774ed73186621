"""Shared fixtures: a scripted DriveAPI and sample configuration."""

from typing import Dict, List, Optional

import pytest

from drive_audit.config_utils import AuditConfig, Config, GoogleConfig, OutputConfig
from drive_audit.drive_api import DriveAPI
from drive_audit.errors import DriveAPIError


class ScriptedDriveAPI(DriveAPI):
    """
    DriveAPI that replays canned pages.

    files_pages: list of files.list response bodies, served in order
    permission_pages: file ID -> list of permissions.list response bodies
    permission_errors: file ID -> exception raised for that file's listing
    """

    def __init__(self, files_pages: Optional[List[Dict]] = None,
                 permission_pages: Optional[Dict[str, List[Dict]]] = None,
                 permission_errors: Optional[Dict[str, Exception]] = None,
                 files_error: Optional[Exception] = None):
        self.files_pages = files_pages or [{"files": []}]
        self.permission_pages = permission_pages or {}
        self.permission_errors = permission_errors or {}
        self.files_error = files_error
        self.file_calls: List[Dict] = []
        self.permission_calls: List[Dict] = []

    def list_files(self, page_token, page_size, include_all_drives):
        self.file_calls.append({
            "page_token": page_token,
            "page_size": page_size,
            "include_all_drives": include_all_drives,
        })
        if self.files_error is not None:
            raise self.files_error
        return self.files_pages[len(self.file_calls) - 1]

    def list_permissions(self, file_id, page_token, include_all_drives):
        self.permission_calls.append({"file_id": file_id, "page_token": page_token})
        if file_id in self.permission_errors:
            raise self.permission_errors[file_id]
        pages = self.permission_pages.get(file_id, [{"permissions": []}])
        served = sum(1 for c in self.permission_calls if c["file_id"] == file_id)
        return pages[served - 1]


def api_error(file_id: str = "", status_code: int = 403) -> DriveAPIError:
    return DriveAPIError(f"GET /files/{file_id}/permissions", status_code=status_code,
                         detail="access denied")


def drive_file(file_id: str, name: str, owner: str = "alice@example.com", **extra) -> Dict:
    entry = {
        "id": file_id,
        "name": name,
        "mimeType": "application/pdf",
        "owners": [{"emailAddress": owner}],
        "createdTime": "2024-01-15T10:00:00.000Z",
        "modifiedTime": "2024-01-20T15:00:00.000Z",
        "size": "1024",
    }
    entry.update(extra)
    return entry


@pytest.fixture
def config(tmp_path) -> Config:
    key_file = tmp_path / "service-account.json"
    key_file.write_text("{}")
    return Config(
        google=GoogleConfig(
            service_account_file=str(key_file),
            admin_email="admin@example.com",
            domain="example.com",
        ),
        audit=AuditConfig(include_shared_drives=True, page_size=100),
        output=OutputConfig(format="csv", directory=str(tmp_path / "output")),
    )
