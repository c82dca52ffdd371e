"""Parse VirusTotal v3 JSON API responses.

Both endpoints wrap their payload in a top-level ``data`` object. This module
turns the response bodies into typed Python objects and rejects anything that
lacks a required field.
"""

from __future__ import annotations

import json
from typing import Any

from vt_file_scanner.exceptions import VirusTotalError
from vt_file_scanner.virustotal.models import AnalysisResult, AnalysisStats, UploadResult


def parse_upload_response(json_text: str) -> UploadResult:
    """Parse the JSON response from POST /files.

    Expected format:
        {
            "data": {
                "type": "analysis",
                "id": "NjY0MjRlOTFjMDIyYTkyNWM0NjU2NWQzYWNlMzFmZmI6MTQ3NTA0ODI3Nw==",
                "links": {"self": "https://www.virustotal.com/api/v3/analyses/..."}
            }
        }
    """
    payload = _load_json(json_text, "upload")

    data = payload.get("data")
    if not isinstance(data, dict):
        raise VirusTotalError(
            "VirusTotal upload response missing 'data' object",
            details={"response_body": json_text[:500]},
        )

    analysis_id = data.get("id")
    if not isinstance(analysis_id, str) or not analysis_id:
        raise VirusTotalError(
            "Failed to parse analysis ID from VirusTotal upload response",
            details={"response_body": json_text[:500]},
        )

    object_type = data.get("type")
    return UploadResult(
        analysis_id=analysis_id,
        object_type=object_type if isinstance(object_type, str) else "analysis",
    )


def parse_analysis_response(json_text: str, analysis_id: str = "") -> AnalysisResult:
    """Parse the JSON response from GET /analyses/{id}.

    Expected format:
        {
            "data": {
                "id": "...",
                "type": "analysis",
                "attributes": {
                    "status": "completed",
                    "stats": {"harmless": 0, "malicious": 0, "suspicious": 0, ...}
                }
            }
        }

    ``status`` is required. ``stats`` is optional; missing or non-numeric
    counters read as zero.
    """
    payload = _load_json(json_text, "analysis")

    data = payload.get("data")
    if not isinstance(data, dict):
        raise VirusTotalError(
            "No 'data' field in VirusTotal analysis response",
            details={"response_body": json_text[:500]},
        )

    attributes = data.get("attributes")
    if not isinstance(attributes, dict):
        raise VirusTotalError(
            "No 'attributes' field in VirusTotal analysis response",
            details={"response_body": json_text[:500]},
        )

    status = attributes.get("status")
    if not isinstance(status, str):
        raise VirusTotalError(
            "No 'status' field in VirusTotal analysis response",
            details={"response_body": json_text[:500]},
        )

    stats_obj = attributes.get("stats")
    stats = _parse_stats(stats_obj) if isinstance(stats_obj, dict) else None

    response_id = data.get("id")
    return AnalysisResult(
        analysis_id=response_id if isinstance(response_id, str) and response_id else analysis_id,
        status=status,
        stats=stats,
        raw=payload,
    )


def _load_json(json_text: str, endpoint: str) -> dict[str, Any]:
    try:
        payload = json.loads(json_text)
    except ValueError as e:
        raise VirusTotalError(
            f"Failed to parse VirusTotal {endpoint} response JSON: {e}",
            details={"response_body": json_text[:500]},
        ) from e

    if not isinstance(payload, dict):
        raise VirusTotalError(
            f"VirusTotal {endpoint} response is not a JSON object",
            details={"response_body": json_text[:500]},
        )
    return payload


def _parse_stats(stats: dict[str, Any]) -> AnalysisStats:
    return AnalysisStats(
        harmless=_get_count(stats, "harmless"),
        malicious=_get_count(stats, "malicious"),
        suspicious=_get_count(stats, "suspicious"),
        undetected=_get_count(stats, "undetected"),
        timeout=_get_count(stats, "timeout"),
        type_unsupported=_get_count(stats, "type-unsupported"),
        failure=_get_count(stats, "failure"),
    )


def _get_count(stats: dict[str, Any], key: str) -> int:
    """Safely extract an integer counter."""
    value = stats.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)
