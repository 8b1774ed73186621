"""
Configuration utilities for the Drive audit tools.

This module provides functions for:
- Locating the YAML configuration file
- Loading it on top of the defaults
- Validating required settings
- Writing a sample configuration
"""

import os
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".drive-audit.yaml"

DEFAULT_PAGE_SIZE = 1000
DEFAULT_OUTPUT_FORMAT = "csv"
DEFAULT_OUTPUT_DIRECTORY = "./output"

VALID_OUTPUT_FORMATS = ["csv", "json"]


@dataclass
class GoogleConfig:
    service_account_file: str = ""
    admin_email: str = ""
    domain: str = ""


@dataclass
class AuditConfig:
    include_shared_drives: bool = True
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass
class OutputConfig:
    format: str = DEFAULT_OUTPUT_FORMAT
    directory: str = DEFAULT_OUTPUT_DIRECTORY


@dataclass
class Config:
    """Complete settings for one audit run."""
    google: GoogleConfig = field(default_factory=GoogleConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> Dict:
        return asdict(self)


def find_config_file() -> Optional[str]:
    """
    Look for the config file in the current directory, then the home directory.

    Returns:
        Path of the first file found, None if there is none
    """
    candidates = [
        os.path.join(os.getcwd(), CONFIG_FILENAME),
        os.path.join(os.path.expanduser("~"), CONFIG_FILENAME),
    ]
    for path in candidates:
        if os.path.isfile(path):
            return path
    return None


def _section(data: Dict, name: str) -> Dict:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping")
    return section


def _as_bool(value, key: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"{key} must be true or false")


def _as_int(value, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be an integer")


def config_from_dict(data: Optional[Dict]) -> Config:
    """Build a Config from parsed YAML, keeping defaults for missing keys."""
    cfg = Config()
    if not data:
        return cfg
    if not isinstance(data, dict):
        raise ConfigError("configuration must be a mapping")

    google = _section(data, "google")
    audit = _section(data, "audit")
    output = _section(data, "output")

    cfg.google.service_account_file = str(google.get("service_account_file") or "")
    cfg.google.admin_email = str(google.get("admin_email") or "")
    cfg.google.domain = str(google.get("domain") or "")

    if "include_shared_drives" in audit:
        cfg.audit.include_shared_drives = _as_bool(audit["include_shared_drives"],
                                                   "audit.include_shared_drives")
    if "page_size" in audit:
        cfg.audit.page_size = _as_int(audit["page_size"], "audit.page_size")

    if output.get("format"):
        cfg.output.format = str(output["format"])
    if output.get("directory"):
        cfg.output.directory = str(output["directory"])

    return cfg


def validate_config(cfg: Config) -> None:
    """
    Check every setting and report all problems at once.

    Raises:
        ConfigError: one line per problem found
    """
    errors: List[str] = []

    if not cfg.google.service_account_file:
        errors.append("google.service_account_file is required")
    elif not os.path.exists(cfg.google.service_account_file):
        errors.append(f"service account file not found: {cfg.google.service_account_file}")

    if not cfg.google.admin_email:
        errors.append("google.admin_email is required for domain-wide delegation")
    elif "@" not in cfg.google.admin_email:
        errors.append("google.admin_email must be a valid email address")

    if not cfg.google.domain:
        errors.append("google.domain is required")

    if cfg.audit.page_size < 1 or cfg.audit.page_size > 1000:
        errors.append("audit.page_size must be between 1 and 1000")

    if cfg.output.format not in VALID_OUTPUT_FORMATS:
        errors.append(f"output.format must be one of: {', '.join(VALID_OUTPUT_FORMATS)}")

    if errors:
        raise ConfigError("invalid configuration:\n  " + "\n  ".join(errors))


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load and validate the configuration.

    Args:
        config_path: Explicit config file. If None, the default locations are
                     searched and the defaults are used when nothing is found.

    Returns:
        Validated Config

    Raises:
        ConfigError: the file is missing, unreadable, malformed or invalid
    """
    if config_path is None:
        config_path = find_config_file()
    elif not os.path.isfile(config_path):
        raise ConfigError(f"config file not found: {config_path}")

    data = None
    if config_path is not None:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"failed to read config file {config_path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"failed to parse config file {config_path}: {e}") from e

    cfg = config_from_dict(data)
    validate_config(cfg)
    return cfg


def save_config(cfg: Config, path: str) -> None:
    """
    Write the configuration as YAML, readable by the owner only.

    Raises:
        ConfigError: the file or its directory could not be written
    """
    directory = os.path.dirname(path)
    try:
        if directory:
            os.makedirs(directory, mode=0o750, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            yaml.safe_dump(cfg.to_dict(), f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigError(f"failed to write config file {path}: {e}") from e
