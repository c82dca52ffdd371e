"""Shared test fixtures for the vt-file-scanner test suite."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from vt_file_scanner.config import ScannerConfig

ANALYSIS_ID = "NjY0MjRlOTFjMDIyYTkyNWM0NjU2NWQzYWNlMzFmZmI6MTQ3NTA0ODI3Nw=="


@pytest.fixture
def config() -> ScannerConfig:
    """Config with a key and no environment lookup."""
    return ScannerConfig(api_key="test-vt-key-12345", _loaded=True)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Run in an empty directory with no VirusTotal variables set."""
    monkeypatch.delenv("VIRUSTOTAL_API_KEY", raising=False)
    monkeypatch.delenv("VIRUSTOTAL_BASE_URL", raising=False)
    workdir = tmp_path / "a" / "b" / "work"
    workdir.mkdir(parents=True)
    monkeypatch.chdir(workdir)
    return workdir


# Sample VirusTotal v3 JSON responses
VT_UPLOAD_JSON = json.dumps(
    {
        "data": {
            "type": "analysis",
            "id": ANALYSIS_ID,
            "links": {"self": f"https://www.virustotal.com/api/v3/analyses/{ANALYSIS_ID}"},
        }
    }
)

VT_ANALYSIS_QUEUED_JSON = json.dumps(
    {
        "data": {
            "id": ANALYSIS_ID,
            "type": "analysis",
            "attributes": {
                "status": "queued",
                "stats": {
                    "harmless": 0,
                    "malicious": 0,
                    "suspicious": 0,
                    "undetected": 0,
                },
            },
        }
    }
)

VT_ANALYSIS_COMPLETED_JSON = json.dumps(
    {
        "data": {
            "id": ANALYSIS_ID,
            "type": "analysis",
            "attributes": {
                "status": "completed",
                "stats": {
                    "harmless": 0,
                    "malicious": 3,
                    "suspicious": 1,
                    "undetected": 58,
                    "timeout": 0,
                    "type-unsupported": 13,
                    "failure": 1,
                },
            },
        }
    }
)

VT_ANALYSIS_CLEAN_JSON = json.dumps(
    {
        "data": {
            "id": ANALYSIS_ID,
            "type": "analysis",
            "attributes": {
                "status": "completed",
                "stats": {"harmless": 61, "malicious": 0, "suspicious": 0, "undetected": 9},
            },
        }
    }
)

VT_ERROR_JSON = json.dumps(
    {"error": {"code": "WrongCredentialsError", "message": "Wrong API key"}}
)


@pytest.fixture
def upload_json() -> str:
    return VT_UPLOAD_JSON


@pytest.fixture
def analysis_queued_json() -> str:
    return VT_ANALYSIS_QUEUED_JSON


@pytest.fixture
def analysis_completed_json() -> str:
    return VT_ANALYSIS_COMPLETED_JSON


@pytest.fixture
def analysis_clean_json() -> str:
    return VT_ANALYSIS_CLEAN_JSON


@pytest.fixture
def error_json() -> str:
    return VT_ERROR_JSON


def has_real_virustotal_key() -> bool:
    """Check if real VirusTotal credentials are available for integration tests."""
    return bool(os.getenv("VIRUSTOTAL_API_KEY"))


skip_no_virustotal = pytest.mark.skipif(
    not has_real_virustotal_key(),
    reason="VIRUSTOTAL_API_KEY not set",
)
