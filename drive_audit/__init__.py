"""
Google Drive Audit Package

This package audits file ownership and external sharing across a Google
Workspace domain using the Google Drive API with a delegated service account.

Modules:
- auditor: Files-by-owner and external-sharing audits
- classifier: Internal/external classification of permissions
- drive_api: Drive v3 listing calls (live implementation over requests)
- drive_client: Paginated file and permission listings
- reporter: CSV and JSON report writers
- config_utils: YAML configuration loading and validation
- auth: Service account authentication with domain-wide delegation
- cli: Command line entry point
"""

__version__ = "0.1.0"
__author__ = "Drive Audit Project"
