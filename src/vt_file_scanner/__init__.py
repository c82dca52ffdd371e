"""Command-line VirusTotal file scanner: upload a file, poll its analysis, report the verdict."""

from vt_file_scanner.config import ScannerConfig
from vt_file_scanner.exceptions import (
    ConfigurationError,
    ScanTimeoutError,
    VirusTotalError,
    VTScannerError,
)
from vt_file_scanner.verdicts import Category, ScanVerdict, Verdict
from vt_file_scanner.virustotal.client import VirusTotalClient

__version__ = "0.1.0"

__all__ = [
    "VirusTotalClient",
    "ScannerConfig",
    "ScanVerdict",
    "Verdict",
    "Category",
    "VTScannerError",
    "ConfigurationError",
    "VirusTotalError",
    "ScanTimeoutError",
]
