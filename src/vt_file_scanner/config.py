"""Configuration and credential management for the file scanner."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import dotenv_values

from vt_file_scanner.exceptions import ConfigurationError

logger = logging.getLogger("vt_file_scanner")

VIRUSTOTAL_BASE_URL = "https://www.virustotal.com/api/v3"

API_KEY_ENV_VAR = "VIRUSTOTAL_API_KEY"
BASE_URL_ENV_VAR = "VIRUSTOTAL_BASE_URL"

# Checked in order, relative to the working directory. First hit wins.
ENV_SEARCH_PATHS: tuple[str, ...] = (
    ".env",
    "./.env",
    "../.env",
    "../../.env",
)

DEFAULT_POLL_INTERVAL = 5


def find_env_file(search_paths: tuple[str, ...] = ENV_SEARCH_PATHS) -> Path | None:
    """Return the first existing .env file among ``search_paths``."""
    for candidate in search_paths:
        path = Path(candidate)
        if path.is_file():
            return path
    return None


def read_env_file_value(key: str, env_file: str | Path | None = None) -> str | None:
    """Read a single value from a .env-style file.

    Blank lines, ``#`` comments and lines without ``=`` are ignored. Whitespace
    around keys and values is stripped, and one pair of matching single or
    double quotes is removed from the value.

    Args:
        key: Variable name to look up.
        env_file: Explicit file to read. When omitted, ``find_env_file()``
            picks one.

    Returns:
        The value, or None if there is no file, no such key, or the value is empty.

    Raises:
        ConfigurationError: If the file exists but cannot be read or decoded.
    """
    path = Path(env_file) if env_file else find_env_file()
    if path is None or not path.is_file():
        return None

    try:
        values = dotenv_values(path, interpolate=False)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read .env file {path}: {e}") from e
    value = values.get(key)
    if not value:
        return None
    return value


@dataclass
class ScannerConfig:
    """Configuration for the VirusTotal file scanner.

    The API key loads automatically: a .env file in the working directory (or up
    to two parents) takes precedence over the process environment. You can also
    pass it directly or point to a specific .env file.

    Environment variables:
        VIRUSTOTAL_API_KEY  - VirusTotal API key
        VIRUSTOTAL_BASE_URL - API root override (e.g. for a local mock)
    """

    api_key: str = ""
    base_url: str = ""

    # Seconds
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_wait: float | None = None  # None polls until the analysis completes
    request_timeout: int = 60

    env_file: str | None = None
    _loaded: bool = field(default=False, repr=False)

    def __post_init__(self) -> None:
        if not self._loaded:
            self._load_from_env()
            self._loaded = True

    def _load_from_env(self) -> None:
        """Fill missing values from the .env file and the environment."""
        if self.env_file and not Path(self.env_file).is_file():
            logger.warning("Specified .env file not found: %s", self.env_file)

        if not self.api_key:
            self.api_key = (
                read_env_file_value(API_KEY_ENV_VAR, self.env_file)
                or os.getenv(API_KEY_ENV_VAR, "")
            ).strip()

        if not self.base_url:
            self.base_url = os.getenv(BASE_URL_ENV_VAR, "") or VIRUSTOTAL_BASE_URL

    def validate(self) -> None:
        """Validate the configuration. Raises ConfigurationError if unusable."""
        if not self.api_key:
            raise ConfigurationError(
                f"{API_KEY_ENV_VAR} not found. "
                "Set it in a .env file (create one if it doesn't exist):\n"
                f"  {API_KEY_ENV_VAR}=your_api_key_here\n"
                "Or set it as an environment variable:\n"
                f"  export {API_KEY_ENV_VAR}=your_api_key_here"
            )

        if self.poll_interval <= 0:
            raise ConfigurationError(
                f"Invalid poll interval {self.poll_interval}: must be a positive number of seconds"
            )

        if self.max_wait is not None and self.max_wait <= 0:
            raise ConfigurationError(
                f"Invalid max wait {self.max_wait}: must be positive, or unset to wait forever"
            )

    @property
    def analyses_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/analyses"

    @property
    def files_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/files"
