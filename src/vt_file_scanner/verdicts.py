"""Verdict model that normalizes a VirusTotal analysis report."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from vt_file_scanner.virustotal.models import AnalysisResult, AnalysisStats


class Verdict(str, Enum):
    """Top-level scan verdict."""

    ALLOW = "allow"
    BLOCK = "block"
    PENDING = "pending"


class Category(str, Enum):
    """Worst engine verdict observed in the analysis."""

    HARMLESS = "harmless"
    SUSPICIOUS = "suspicious"
    MALICIOUS = "malicious"
    PENDING = "pending"


@dataclass
class ScanVerdict:
    """Result of a finished (or abandoned) file scan.

    ``stats`` is None when VirusTotal reported the analysis complete but
    did not include per-engine counters.
    """

    verdict: Verdict
    category: Category
    analysis_id: str
    status: str
    stats: AnalysisStats | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)
    duration_ms: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_safe(self) -> bool:
        """True if no engine flagged the file."""
        return self.verdict == Verdict.ALLOW

    @property
    def is_blocked(self) -> bool:
        return self.verdict == Verdict.BLOCK

    @property
    def is_pending(self) -> bool:
        return self.verdict == Verdict.PENDING

    @property
    def harmless(self) -> int:
        return self.stats.harmless if self.stats else 0

    @property
    def malicious(self) -> int:
        return self.stats.malicious if self.stats else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "verdict": self.verdict.value,
            "category": self.category.value,
            "analysis_id": self.analysis_id,
            "status": self.status,
            "stats": self.stats.to_dict() if self.stats else None,
            "duration_ms": self.duration_ms,
            "timestamp": self.timestamp.isoformat(),
            "is_safe": self.is_safe,
        }


def verdict_from_analysis(
    result: AnalysisResult,
    raw_response: dict[str, Any] | None = None,
    duration_ms: int = 0,
) -> ScanVerdict:
    """Convert a VirusTotal analysis into a ScanVerdict.

    Any malicious detection blocks. Suspicious detections block as well, but are
    categorized separately. A completed analysis without stats is allowed.
    """
    stats = result.stats

    if not result.is_completed:
        verdict_val, category_val = Verdict.PENDING, Category.PENDING
    elif stats is not None and stats.malicious > 0:
        verdict_val, category_val = Verdict.BLOCK, Category.MALICIOUS
    elif stats is not None and stats.suspicious > 0:
        verdict_val, category_val = Verdict.BLOCK, Category.SUSPICIOUS
    else:
        verdict_val, category_val = Verdict.ALLOW, Category.HARMLESS

    return ScanVerdict(
        verdict=verdict_val,
        category=category_val,
        analysis_id=result.analysis_id,
        status=result.status,
        stats=stats,
        raw_response=raw_response or {},
        duration_ms=duration_ms,
    )
