"""
Service account authentication with domain-wide delegation.

The service account impersonates an admin user so that the files listing
covers the whole domain rather than the service account's own drive.
"""

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession, Request
from google.oauth2 import service_account

from .errors import AuthError

DRIVE_SCOPES = [
    "https://www.googleapis.com/auth/drive.readonly",
    "https://www.googleapis.com/auth/drive.metadata.readonly",
]


class Authenticator:
    """
    Builds authorized HTTP sessions for the Drive API.

    Args:
        service_account_file: Path to the service account JSON key
        admin_email: Workspace admin to impersonate
    """

    def __init__(self, service_account_file: str, admin_email: str):
        if not service_account_file:
            raise AuthError("service account file path is required")
        if not admin_email:
            raise AuthError("admin email is required for domain-wide delegation")

        self.service_account_file = service_account_file
        self.admin_email = admin_email

    def load_credentials(self) -> service_account.Credentials:
        """Read the key file and delegate to the admin user."""
        try:
            credentials = service_account.Credentials.from_service_account_file(
                self.service_account_file, scopes=DRIVE_SCOPES)
        except OSError as e:
            raise AuthError(f"failed to read service account file: {e}") from e
        except (ValueError, KeyError) as e:
            raise AuthError(f"failed to parse service account file: {e}") from e

        return credentials.with_subject(self.admin_email)

    def authorized_session(self) -> AuthorizedSession:
        """
        Exchange the credentials for an access token and return a session using it.

        The token is fetched up front so that a bad key or missing delegation
        shows up here and not on the first listing call. The session refreshes
        the token by itself when it expires.
        """
        credentials = self.load_credentials()

        try:
            credentials.refresh(Request())
        except GoogleAuthError as e:
            raise AuthError(f"token exchange failed for {self.admin_email}: {e}") from e

        return AuthorizedSession(credentials)
