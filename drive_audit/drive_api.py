"""
Google Drive v3 listing calls.

DriveAPI is the boundary between the audit logic and the network. The live
implementation, GoogleDriveAPI, issues plain REST calls through a requests
session that already carries the OAuth credentials (see auth.Authenticator).
Tests substitute a scripted implementation of the same two methods.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

import requests
from google.auth.exceptions import GoogleAuthError

from .errors import DriveAPIError

DRIVE_API_URL = "https://www.googleapis.com/drive/v3"

FILE_FIELDS = "nextPageToken, files(id, name, mimeType, owners, createdTime, modifiedTime, size)"
PERMISSION_FIELDS = "nextPageToken, permissions(id, type, role, emailAddress, domain, displayName)"

REQUEST_TIMEOUT = 30


class DriveAPI(ABC):
    """Raw Drive listing operations. Each call returns one page as a dict."""

    @abstractmethod
    def list_files(self, page_token: str, page_size: int, include_all_drives: bool) -> Dict:
        """Return a files.list response body ("files", "nextPageToken")."""

    @abstractmethod
    def list_permissions(self, file_id: str, page_token: str, include_all_drives: bool) -> Dict:
        """Return a permissions.list response body ("permissions", "nextPageToken")."""


def _describe_api_error(status_code: int, response_text: str) -> str:
    """
    Turn a failed Drive API response into a short explanation.

    Args:
        status_code: HTTP status code from the API response
        response_text: Raw response text from the API

    Returns:
        Hint for the common cases, the response body otherwise
    """
    if status_code == 401:
        return "token expired or invalid; check the service account key and domain-wide delegation"
    if status_code == 403:
        return ("access denied; the admin user may lack access, the Drive API may not be enabled, "
                "or the delegation scopes were not granted")
    if status_code == 404:
        return "not found"
    return response_text.strip()


class GoogleDriveAPI(DriveAPI):
    """DriveAPI backed by the Drive v3 REST endpoints."""

    def __init__(self, session: requests.Session, base_url: str = DRIVE_API_URL):
        self.session = session
        self.base_url = base_url.rstrip("/")

    def _get(self, path: str, params: Dict) -> Dict:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.get(url, params=params, timeout=REQUEST_TIMEOUT)
        except requests.exceptions.RequestException as e:
            raise DriveAPIError(f"GET {path}", detail=f"network error: {e}") from e
        except GoogleAuthError as e:
            # AuthorizedSession refreshes an expired token inside get()
            raise DriveAPIError(f"GET {path}", detail=f"token refresh failed: {e}") from e

        if resp.status_code != 200:
            raise DriveAPIError(f"GET {path}", status_code=resp.status_code,
                                detail=_describe_api_error(resp.status_code, resp.text))

        try:
            return resp.json()
        except ValueError as e:
            raise DriveAPIError(f"GET {path}", detail=f"invalid JSON response: {e}") from e

    def list_files(self, page_token: str, page_size: int, include_all_drives: bool) -> Dict:
        params = {
            "corpora": "domain",
            "pageSize": page_size,
            "fields": FILE_FIELDS,
            "supportsAllDrives": _bool_param(include_all_drives),
            "includeItemsFromAllDrives": _bool_param(include_all_drives),
        }
        if page_token:
            params["pageToken"] = page_token
        return self._get("/files", params)

    def list_permissions(self, file_id: str, page_token: str, include_all_drives: bool) -> Dict:
        params = {
            "fields": PERMISSION_FIELDS,
            "supportsAllDrives": _bool_param(include_all_drives),
        }
        if page_token:
            params["pageToken"] = page_token
        return self._get(f"/files/{file_id}/permissions", params)


def _bool_param(value: Optional[bool]) -> str:
    return "true" if value else "false"
