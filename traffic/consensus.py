# traffic/consensus.py
"""
Majority-vote traffic consensus over a field's most recent reports.

Every view that shows a field's crowding (list badge, detail headline, map
marker) goes through compute_consensus, so the same report snapshot always
renders the same level everywhere.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence, Tuple

from .exceptions import ConsensusUsageError

LOW = "low"
MEDIUM = "medium"
HIGH = "high"
UNKNOWN = "unknown"
OTHER = "other"

LEVELS = (LOW, MEDIUM, HIGH)

# labels written by older clients
LEGACY_LEVELS = {
    "light": LOW,
    "moderate": MEDIUM,
    "crowded": HIGH,
}


def normalize_level(level) -> Optional[str]:
    """Return the canonical level for `level`, or None if it is not a traffic level."""
    if not isinstance(level, str):
        return None
    key = level.strip().lower()
    if key in LEVELS:
        return key
    return LEGACY_LEVELS.get(key)


@dataclass(frozen=True)
class ConsensusResult:
    level: str
    confidence: int
    report_count: int
    last_updated: Optional[datetime] = None
    anomalies: Tuple = field(default_factory=tuple)

    @property
    def has_anomalies(self) -> bool:
        return bool(self.anomalies)

    def as_dict(self):
        return {
            "level": self.level,
            "confidence": self.confidence,
            "report_count": self.report_count,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "anomalies": list(self.anomalies),
        }


EMPTY_CONSENSUS = ConsensusResult(level=UNKNOWN, confidence=0, report_count=0)


def _percent(part: int, whole: int) -> int:
    # half-up rounding, integer only
    return (200 * part + whole) // (2 * whole)


def compute_consensus(reports: Sequence, window_size: int) -> ConsensusResult:
    """
    Reduce newest-first `reports` to a single ConsensusResult.

    Only the first `window_size` reports count. Ties go to the level seen
    first, i.e. the one carried by the most recent report. Levels outside
    the canonical set (after legacy normalization) share an "other" bucket
    that can still win; their raw values come back in `anomalies`.
    """
    if reports is None:
        raise ConsensusUsageError("reports must be a sequence, got None")
    if isinstance(window_size, bool) or not isinstance(window_size, int):
        raise ConsensusUsageError(f"window_size must be an int, got {window_size!r}")
    if window_size < 0:
        raise ConsensusUsageError(f"window_size must be >= 0, got {window_size}")

    window = list(reports)[:window_size]
    if not window:
        return EMPTY_CONSENSUS

    counts = {}
    anomalies = []
    for report in window:
        level = normalize_level(report.level)
        if level is None:
            anomalies.append(report.level)
            level = OTHER
        counts[level] = counts.get(level, 0) + 1

    # dicts keep insertion order, so strict '>' leaves ties with the first seen
    winner, top = None, 0
    for level, count in counts.items():
        if count > top:
            winner, top = level, count

    return ConsensusResult(
        level=winner,
        confidence=_percent(top, len(window)),
        report_count=len(window),
        last_updated=window[0].submitted_at,
        anomalies=tuple(anomalies),
    )
