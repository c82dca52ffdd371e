"""VirusTotal-specific data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

STATUS_COMPLETED = "completed"


@dataclass
class UploadResult:
    """Result from submitting a file to VirusTotal."""

    analysis_id: str
    object_type: str = "analysis"
    filename: str = ""
    size: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "analysis_id": self.analysis_id,
            "type": self.object_type,
            "filename": self.filename,
            "size": self.size,
        }


@dataclass
class AnalysisStats:
    """Per-engine verdict counters from an analysis report."""

    harmless: int = 0
    malicious: int = 0
    suspicious: int = 0
    undetected: int = 0
    timeout: int = 0
    type_unsupported: int = 0
    failure: int = 0

    @property
    def total(self) -> int:
        return (
            self.harmless
            + self.malicious
            + self.suspicious
            + self.undetected
            + self.timeout
            + self.type_unsupported
            + self.failure
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "harmless": self.harmless,
            "malicious": self.malicious,
            "suspicious": self.suspicious,
            "undetected": self.undetected,
            "timeout": self.timeout,
            "type-unsupported": self.type_unsupported,
            "failure": self.failure,
        }


@dataclass
class AnalysisResult:
    """Raw analysis state from VirusTotal before normalization.

    ``stats`` is None when the service omitted the stats object.
    """

    analysis_id: str
    status: str
    stats: AnalysisStats | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED

    @property
    def is_pending(self) -> bool:
        return not self.is_completed

    @property
    def has_stats(self) -> bool:
        return self.stats is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "analysis_id": self.analysis_id,
            "status": self.status,
            "stats": self.stats.to_dict() if self.stats else None,
            "is_completed": self.is_completed,
        }
