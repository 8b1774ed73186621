"""
Audit orchestration: files by owner and external sharing.
"""

import threading
from typing import List, Optional, Tuple

from .auth import Authenticator
from .classifier import extract_domain
from .config_utils import Config
from .drive_api import GoogleDriveAPI
from .drive_client import DriveClient
from .errors import AuditCancelled, DriveAPIError
from .models import (AuditResult, ExternalShareRecord, FileError, FileInfo, FileRecord,
                     Permission, parse_timestamp)


def file_info_to_record(f: FileInfo) -> FileRecord:
    """Unparseable timestamps are left empty rather than failing the audit."""
    return FileRecord(
        owner_email=f.owner_email,
        file_id=f.id,
        file_name=f.name,
        file_type=f.mime_type,
        created_time=parse_timestamp(f.created_time),
        modified_time=parse_timestamp(f.modified_time),
        size_bytes=f.size,
    )


def permission_to_record(f: FileInfo, perm: Permission) -> ExternalShareRecord:
    shared_with_domain = perm.domain
    if not shared_with_domain and perm.email_address:
        shared_with_domain = extract_domain(perm.email_address)

    return ExternalShareRecord(
        owner_email=f.owner_email,
        file_id=f.id,
        file_name=f.name,
        shared_with_email=perm.email_address,
        shared_with_domain=shared_with_domain,
        permission_type=perm.type,
        permission_role=perm.role,
    )


class Auditor:
    """
    Runs audits against one Drive client.

    Args:
        config: Settings for the run
        drive_client: Client used for all listings
        cancel_event: Checked before every per-file permission fetch
    """

    def __init__(self, config: Config, drive_client: DriveClient,
                 cancel_event: Optional[threading.Event] = None):
        self.config = config
        self.drive_client = drive_client
        self.cancel_event = cancel_event

    @classmethod
    def from_config(cls, config: Config,
                    cancel_event: Optional[threading.Event] = None) -> "Auditor":
        """
        Authenticate and build an Auditor on the live Drive API.

        Raises:
            AuthError: credentials could not be loaded or exchanged
        """
        authenticator = Authenticator(config.google.service_account_file,
                                      config.google.admin_email)
        session = authenticator.authorized_session()

        client = DriveClient(
            GoogleDriveAPI(session),
            config.google.domain,
            page_size=config.audit.page_size,
            include_shared_drives=config.audit.include_shared_drives,
            cancel_event=cancel_event,
        )
        return cls(config, client, cancel_event)

    def _cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def audit_files(self) -> AuditResult:
        """
        List every file in the domain and convert it to a report record.

        Raises:
            DriveAPIError: the file listing failed
            AuditCancelled: cancelled during the listing; `partial` is an
                AuditResult with the files listed before the cancel
        """
        try:
            files = self.drive_client.list_all_files()
        except AuditCancelled as e:
            raise AuditCancelled(self._files_result(e.partial or [])) from e

        return self._files_result(files)

    def _files_result(self, files: List[FileInfo]) -> AuditResult:
        result = AuditResult(total_files=len(files), files_processed=len(files))
        result.file_records = [file_info_to_record(f) for f in files]
        return result

    def audit_external_sharing(self) -> AuditResult:
        """
        Find every permission that grants access outside the organization.

        A file whose permissions cannot be fetched is recorded in
        result.errors and skipped; the remaining files are still processed.

        Raises:
            DriveAPIError: the top-level file listing failed
            AuditCancelled: cancelled; `partial` is the AuditResult so far
        """
        try:
            files = self.drive_client.list_all_files()
        except AuditCancelled as e:
            # Nothing has been classified yet
            raise AuditCancelled(AuditResult(total_files=len(e.partial or []))) from e

        result = AuditResult(total_files=len(files))

        for f in files:
            if self._cancelled():
                result.total_external_shares = len(result.external_shares)
                raise AuditCancelled(result)

            try:
                perms = self.drive_client.get_file_permissions(f.id)
            except DriveAPIError as e:
                result.errors.append(FileError(f.id, e))
                continue
            except AuditCancelled as e:
                result.total_external_shares = len(result.external_shares)
                raise AuditCancelled(result) from e

            result.files_processed += 1

            for perm in perms:
                if self.drive_client.is_external_share(perm):
                    result.external_shares.append(permission_to_record(f, perm))

        result.total_external_shares = len(result.external_shares)
        return result

    def audit_all(self) -> Tuple[AuditResult, AuditResult]:
        """Run the files audit, then the sharing audit."""
        files_result = self.audit_files()
        sharing_result = self.audit_external_sharing()
        return files_result, sharing_result
