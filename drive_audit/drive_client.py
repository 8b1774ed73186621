"""
Paginated file and permission listings on top of a DriveAPI.
"""

import threading
from typing import Dict, List, Optional, Sequence, Tuple

from .classifier import is_external_share
from .drive_api import DriveAPI
from .models import FileInfo, Permission, parse_size
from .pagination import fetch_all


def file_info_from_api(entry: Dict) -> FileInfo:
    """Convert a files.list entry. Only the first owner is kept."""
    owners = entry.get("owners") or []
    owner_email = owners[0].get("emailAddress", "") if owners else ""

    return FileInfo(
        id=entry.get("id", ""),
        name=entry.get("name", ""),
        mime_type=entry.get("mimeType", ""),
        owner_email=owner_email,
        created_time=entry.get("createdTime", ""),
        modified_time=entry.get("modifiedTime", ""),
        size=parse_size(entry.get("size")),
    )


def permission_from_api(entry: Dict) -> Permission:
    """Convert a permissions.list entry; absent optional fields become ""."""
    return Permission(
        id=entry.get("id", ""),
        type=entry.get("type", ""),
        role=entry.get("role", ""),
        email_address=entry.get("emailAddress", ""),
        domain=entry.get("domain", ""),
        display_name=entry.get("displayName", ""),
    )


class DriveClient:
    """
    Domain-wide Drive listings for one organization.

    Args:
        api: Live or scripted DriveAPI
        domain: The organization's domain
        page_size: Files requested per page (1-1000)
        include_shared_drives: Also list items from shared drives
        cancel_event: Checked before every page fetch
    """

    def __init__(self, api: DriveAPI, domain: str, page_size: int = 1000,
                 include_shared_drives: bool = True,
                 cancel_event: Optional[threading.Event] = None):
        self.api = api
        self._domain = domain
        self.page_size = page_size
        self.include_shared_drives = include_shared_drives
        self.cancel_event = cancel_event

    @property
    def domain(self) -> str:
        return self._domain

    def list_all_files(self) -> List[FileInfo]:
        """Retrieve every file visible to the domain-wide listing."""
        def fetch_page(page_token: str) -> Tuple[Sequence[FileInfo], Optional[str]]:
            result = self.api.list_files(page_token, self.page_size, self.include_shared_drives)
            files = [file_info_from_api(f) for f in result.get("files", [])]
            return files, result.get("nextPageToken")

        return fetch_all(fetch_page, "list files", cancel_event=self.cancel_event)

    def get_file_permissions(self, file_id: str) -> List[Permission]:
        """Retrieve every permission on a file."""
        def fetch_page(page_token: str) -> Tuple[Sequence[Permission], Optional[str]]:
            result = self.api.list_permissions(file_id, page_token, self.include_shared_drives)
            perms = [permission_from_api(p) for p in result.get("permissions", [])]
            return perms, result.get("nextPageToken")

        return fetch_all(fetch_page, "list permissions for file", target=file_id,
                         cancel_event=self.cancel_event)

    def is_external_share(self, perm: Permission) -> bool:
        return is_external_share(perm, self._domain)
