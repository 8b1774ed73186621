#!/usr/bin/env python3
"""
Google Drive Audit - Find who owns what and what is shared outside the domain.

Uses a service account with domain-wide delegation to list every file in the
Google Workspace domain and, for the sharing audit, every permission on each
file.

Prerequisites:
- A service account JSON key with domain-wide delegation for the Drive
  read-only scopes
- A config file (create one with: drive-audit config init)

Usage:
    drive-audit [options] <command> [subcommand]

Commands:
    audit files       - Write files_by_owner.csv for every file in the domain
    audit sharing     - Write external_sharing.csv for files shared outside the domain
    audit all         - Run both audits
    config init [path] - Create a sample .drive-audit.yaml
    version           - Print the version

Options:
    -c, --config PATH  Config file (default: .drive-audit.yaml in . or ~)
    -v, --verbose      List files whose permissions could not be read
    -q, --quiet        Only print errors

Examples:
    python -m drive_audit config init
    python -m drive_audit audit files
    python -m drive_audit -c /etc/drive-audit.yaml -v audit sharing
"""

import argparse
import os
import signal
import sys
import threading
from typing import List, Optional

from . import __version__, exitcode
from .auditor import Auditor
from .config_utils import CONFIG_FILENAME, Config, load_config, save_config
from .errors import AuditCancelled, AuthError, ConfigError, DriveAPIError, DriveAuditError
from .models import AuditResult
from .reporter import Reporter, new_reporter


class Console:
    """Console output honouring --quiet and --verbose."""

    def __init__(self, quiet: bool = False, verbose: bool = False):
        self.quiet = quiet
        self.verbose = verbose

    def info(self, message: str = "") -> None:
        if not self.quiet:
            print(message)

    def error(self, message: str) -> None:
        print(message, file=sys.stderr)


def _print_files_summary(console: Console, result: AuditResult, path: str) -> None:
    console.info(f"✅ Files audit complete. Total files: {result.total_files}")
    console.info(f"   Report saved to: {path}")


def _print_sharing_summary(console: Console, result: AuditResult, path: str) -> None:
    console.info(f"✅ Sharing audit complete. Files processed: {result.files_processed}")
    console.info(f"   External shares found: {result.total_external_shares}")
    console.info(f"   Report saved to: {path}")

    if result.errors:
        console.info(f"⚠️  Warnings: {len(result.errors)} files could not be processed")
        if console.verbose:
            for e in result.errors:
                console.info(f"   - {e}")


def run_audit(args: argparse.Namespace, console: Console,
              cancel_event: threading.Event) -> None:
    """Load config, authenticate, run the requested audit(s) and write the reports."""
    cfg = load_config(args.config)

    auditor = Auditor.from_config(cfg, cancel_event)
    console.info(f"✅ Authenticated as {cfg.google.admin_email} for domain {cfg.google.domain}")

    reporter: Reporter = new_reporter(cfg.output.format, cfg.output.directory)

    if args.audit_command == "files":
        console.info("🔍 Fetching files from Google Drive...")
        result = auditor.audit_files()
        path = reporter.write_files_by_owner(result.file_records)
        _print_files_summary(console, result, path)

    elif args.audit_command == "sharing":
        console.info("🔍 Analyzing external sharing...")
        result = auditor.audit_external_sharing()
        path = reporter.write_external_sharing(result.external_shares)
        _print_sharing_summary(console, result, path)

    else:
        console.info("🔍 Running all audits...")
        files_result, sharing_result = auditor.audit_all()
        files_path = reporter.write_files_by_owner(files_result.file_records)
        sharing_path = reporter.write_external_sharing(sharing_result.external_shares)
        _print_files_summary(console, files_result, files_path)
        _print_sharing_summary(console, sharing_result, sharing_path)


def run_config_init(args: argparse.Namespace, console: Console) -> None:
    """Write a config file with the default settings."""
    path = args.path or CONFIG_FILENAME
    if os.path.exists(path):
        raise ConfigError(f"config file {path} already exists")

    save_config(Config(), path)
    console.info(f"✅ Created {path}")
    console.info("Please edit the file to add your Google service account credentials.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drive-audit",
        description="Audit Google Drive file ownership and external sharing")
    parser.add_argument("-c", "--config", default=None,
                        help=f"Config file (default: {CONFIG_FILENAME} in the current or home directory)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable verbose output")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Suppress non-error output")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Audit commands
    audit_parser = subparsers.add_parser("audit", help="Run audit operations")
    audit_subparsers = audit_parser.add_subparsers(dest="audit_command", help="Audit to run")
    audit_subparsers.add_parser("files", help="Generate files by owner report")
    audit_subparsers.add_parser("sharing", help="Generate external sharing report")
    audit_subparsers.add_parser("all", help="Run all audits")

    # Config commands
    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_subparsers = config_parser.add_subparsers(dest="config_command", help="Config action")
    init_parser = config_subparsers.add_parser("init", help="Generate sample config file")
    init_parser.add_argument("path", nargs="?", default=None,
                             help=f"Where to write the config (default: {CONFIG_FILENAME})")

    subparsers.add_parser("version", help="Print the version number")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main function. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    console = Console(quiet=args.quiet, verbose=args.verbose)

    if args.command == "version":
        print(f"drive-audit v{__version__}")
        return exitcode.SUCCESS

    if args.command == "config":
        if args.config_command != "init":
            parser.print_help()
            return exitcode.CONFIG_ERROR
        try:
            run_config_init(args, console)
        except ConfigError as e:
            console.error(f"❌ {e}")
            return exitcode.CONFIG_ERROR
        return exitcode.SUCCESS

    if args.command != "audit" or not args.audit_command:
        parser.print_help()
        return exitcode.CONFIG_ERROR

    # Ctrl+C stops the audit between two API calls
    cancel_event = threading.Event()
    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: cancel_event.set())

    try:
        run_audit(args, console, cancel_event)
    except ConfigError as e:
        console.error(f"❌ {e}")
        return exitcode.CONFIG_ERROR
    except AuthError as e:
        console.error(f"❌ Authentication failed: {e}")
        return exitcode.AUTH_ERROR
    except DriveAPIError as e:
        console.error(f"❌ Google Drive API error: {e}")
        return exitcode.API_ERROR
    except AuditCancelled as e:
        console.error(f"⚠️  {e}; no report written")
        return exitcode.INTERNAL_ERROR
    except DriveAuditError as e:
        console.error(f"❌ {e}")
        return exitcode.INTERNAL_ERROR
    except Exception as e:
        console.error(f"❌ Unexpected error: {e}")
        return exitcode.INTERNAL_ERROR
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    return exitcode.SUCCESS


if __name__ == "__main__":
    sys.exit(main())
