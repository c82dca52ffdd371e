"""Exception hierarchy for the VirusTotal file scanner."""

from __future__ import annotations


class VTScannerError(Exception):
    """Base exception for all scanner errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(VTScannerError):
    """Raised when required configuration is missing or invalid.

    Common causes: no VIRUSTOTAL_API_KEY in .env or the environment,
    a non-positive poll interval.
    """


class VirusTotalError(VTScannerError):
    """Raised when the VirusTotal API call fails.

    Covers transport failures, non-200 responses, malformed JSON and
    missing response fields.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class ScanTimeoutError(VTScannerError):
    """Raised when an analysis is still queued after the configured max wait."""

    def __init__(
        self,
        message: str,
        elapsed_seconds: float = 0.0,
        details: dict | None = None,
    ) -> None:
        super().__init__(message, details)
        self.elapsed_seconds = elapsed_seconds
