"""Optional YAML configuration for resolver and resolution settings."""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import List, Optional

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from .dns_resolver import ENDPOINT_TIMEOUT, DnsResolver
from .policy import DEFAULT_MAX_DEPTH

CONFIG_DIR_NAME = "spf-check"
CONFIG_FILE_NAME = "config.yaml"

_SCHEMA_PACKAGE = "spf_check.resources"
_SCHEMA_FILENAME = "config.schema.json"

LOGGER = logging.getLogger(__name__)

SYSTEM_CONFIG_DIRS = [
    Path("/etc") / CONFIG_DIR_NAME,
    Path("/usr/local/etc") / CONFIG_DIR_NAME,
]


@dataclasses.dataclass(frozen=True)
class Settings:
    """Effective resolver and resolution settings.

    Attributes:
        dns_servers (List[str]): Resolver endpoints; empty uses the system resolver.
        dns_timeout (Optional[float]): Per-query timeout in seconds.
        dns_lifetime (Optional[float]): Total query lifetime in seconds.
        dns_tcp (bool): Whether to force TCP.
        max_depth (int): Maximum include nesting below the root domain.
        source (Optional[Path]): File the settings were read from.
    """

    dns_servers: List[str] = dataclasses.field(default_factory=list)
    dns_timeout: Optional[float] = None
    dns_lifetime: Optional[float] = None
    dns_tcp: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH
    source: Optional[Path] = None

    def build_resolver(self) -> Optional[DnsResolver]:
        """Build a resolver for these settings.

        Explicit servers get the pinned-endpoint timeout unless one is configured.

        Returns:
            Optional[DnsResolver]: Configured resolver, or None when the defaults apply.
        """
        if not (self.dns_servers or self.dns_timeout or self.dns_lifetime or self.dns_tcp):
            return None
        timeout = self.dns_timeout
        if timeout is None and self.dns_servers:
            timeout = ENDPOINT_TIMEOUT
        return DnsResolver(
            self.dns_servers or None,
            timeout=timeout,
            lifetime=self.dns_lifetime,
            use_tcp=self.dns_tcp,
        )


def external_config_dirs() -> List[Path]:
    """Return directories that may contain a configuration file.

    Returns:
        List[Path]: Ordered list of user and system config directories.
    """
    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_home:
        user_dir = Path(xdg_home) / CONFIG_DIR_NAME
    else:
        user_dir = Path.home() / ".config" / CONFIG_DIR_NAME
    return [user_dir, *SYSTEM_CONFIG_DIRS]


def find_config_file() -> Optional[Path]:
    """Find the first configuration file in the search directories.

    Returns:
        Optional[Path]: Path of the configuration file, if any.
    """
    for directory in external_config_dirs():
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


@lru_cache(maxsize=1)
def _load_schema_validator() -> Draft202012Validator:
    """Load and cache the configuration JSON Schema validator.

    Returns:
        Draft202012Validator: Validator for configuration payloads.
    """
    schema_text = (
        resources.files(_SCHEMA_PACKAGE).joinpath(_SCHEMA_FILENAME).read_text(encoding="utf-8")
    )
    return Draft202012Validator(json.loads(schema_text))


def _schema_error_data(err: ValidationError) -> dict[str, str]:
    """Render one schema validation error as a structured mapping.

    Args:
        err (ValidationError): JSON Schema validation error.

    Returns:
        dict[str, str]: Error location and message fields.
    """
    location = ".".join(str(part) for part in err.absolute_path) or "<root>"
    return {"location": location, "message": str(err.message)}


def collect_config_schema_errors(payload: object) -> list[dict[str, str]]:
    """Collect deterministic configuration schema validation errors.

    Args:
        payload (object): Configuration payload to validate.

    Returns:
        list[dict[str, str]]: Sorted schema validation errors.
    """
    validator = _load_schema_validator()
    errors = [_schema_error_data(err) for err in validator.iter_errors(payload)]
    return sorted(errors, key=lambda item: (item["location"], item["message"]))


def parse_settings(payload: object, source: Optional[Path] = None) -> Settings:
    """Validate a configuration payload and build settings from it.

    Args:
        payload (object): Parsed YAML document; None counts as empty.
        source (Optional[Path]): File the payload came from.

    Returns:
        Settings: Settings with defaults for missing keys.

    Raises:
        ValueError: If the payload does not match the schema.
    """
    data = {} if payload is None else payload
    errors = collect_config_schema_errors(data)
    if errors:
        label = str(source) if source else "configuration"
        details = "; ".join(f"{item['location']}: {item['message']}" for item in errors)
        raise ValueError(f"Invalid {label}: {details}")

    dns_section = data.get("dns", {})
    resolution = data.get("resolution", {})
    return Settings(
        dns_servers=list(dns_section.get("servers", [])),
        dns_timeout=dns_section.get("timeout"),
        dns_lifetime=dns_section.get("lifetime"),
        dns_tcp=bool(dns_section.get("tcp", False)),
        max_depth=int(resolution.get("max_depth", DEFAULT_MAX_DEPTH)),
        source=source,
    )


def load_settings(path: Optional[Path | str] = None) -> Settings:
    """Load settings from a YAML file.

    Without an explicit path the search directories are tried; when no file
    exists, default settings are returned.

    Args:
        path (Optional[Path | str]): Configuration file to read.

    Returns:
        Settings: Loaded settings.

    Raises:
        ValueError: If the file cannot be read, parsed or validated.
    """
    config_path = Path(path).expanduser() if path else find_config_file()
    if config_path is None:
        return Settings()

    LOGGER.debug("Loading configuration from %s", config_path)
    try:
        payload = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValueError(f"Unable to read {config_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Unable to parse {config_path}: {exc}") from exc
    return parse_settings(payload, config_path)


__all__ = [
    "CONFIG_DIR_NAME",
    "CONFIG_FILE_NAME",
    "Settings",
    "collect_config_schema_errors",
    "external_config_dirs",
    "find_config_file",
    "load_settings",
    "parse_settings",
]
