# traffic/services.py
"""
Report reads and writes around the consensus engine.

Reads always come back as a timestamped ReportSnapshot so a caller can tell
how old the data it rendered is. A read that fails raises ReportFetchError;
an empty snapshot only ever means the field has no reports.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone

from catalog.models import Field
from .consensus import ConsensusResult, compute_consensus, normalize_level
from .exceptions import InvalidTrafficLevel, ReportFetchError
from .models import TrafficReport

logger = logging.getLogger(__name__)


def consensus_window() -> int:
    return settings.TRAFFIC_CONSENSUS_WINDOW


@dataclass(frozen=True)
class ReportSnapshot:
    field_id: int
    reports: tuple
    fetched_at: datetime


def fetch_recent_reports(field_id, limit: int) -> ReportSnapshot:
    """Newest-first reports for one field, at most `limit` of them."""
    try:
        reports = tuple(
            TrafficReport.objects.filter(field_id=field_id).order_by('-submitted_at', '-id')[:limit]
        )
    except DatabaseError as e:
        logger.error(f"Fetching traffic reports for field {field_id} failed: {e}")
        raise ReportFetchError(field_id, e) from e
    return ReportSnapshot(field_id=field_id, reports=reports, fetched_at=timezone.now())


def field_consensus(field_id, window_size: Optional[int] = None) -> Tuple[ConsensusResult, ReportSnapshot]:
    if window_size is None:
        window_size = consensus_window()
    snapshot = fetch_recent_reports(field_id, window_size)
    result = compute_consensus(snapshot.reports, window_size)
    if result.has_anomalies:
        logger.warning(
            f"Field {field_id}: {len(result.anomalies)} report(s) with unrecognised "
            f"traffic level {sorted(set(map(str, result.anomalies)))}"
        )
    return result, snapshot


def submit_report(field: Field, user, level, comment: str = "") -> Tuple[TrafficReport, Optional[ConsensusResult]]:
    """
    Append a traffic report and refresh the field's cached level.

    The append is atomic. The cache refresh that follows is best effort: if
    it fails the report stands and the periodic reconciliation repairs the
    cache, so the consensus comes back as None.
    """
    canonical = normalize_level(level)
    if canonical is None:
        raise InvalidTrafficLevel(level)

    with transaction.atomic():
        report = TrafficReport.objects.create(
            field=field,
            level=canonical,
            comment=(comment or "").strip(),
            submitted_by=user,
        )
    logger.info(f"Traffic report {report.pk} for field {field.pk}: {canonical}")

    try:
        result, _ = field_consensus(field.pk)
        Field.objects.filter(pk=field.pk).update(
            current_traffic=result.level,
            traffic_updated_at=report.submitted_at,
        )
    except (ReportFetchError, DatabaseError) as e:
        logger.warning(f"Cached traffic for field {field.pk} not refreshed after report {report.pk}: {e}")
        return report, None
    return report, result


def _cached_level(field: Field) -> str:
    return normalize_level(field.current_traffic) or field.current_traffic


def reconcile_field_cache(field: Field, window_size: Optional[int] = None) -> bool:
    """
    Bring field.current_traffic in line with a fresh consensus.

    A cache that matches the consensus computed without the newest report is
    one report behind, which is expected under concurrent writes. Anything
    else is drift: it is logged. Returns True when drift was found.
    """
    if window_size is None:
        window_size = consensus_window()
    snapshot = fetch_recent_reports(field.pk, window_size + 1)
    current = compute_consensus(snapshot.reports, window_size)
    lagged = compute_consensus(snapshot.reports[1:], window_size)

    cached = _cached_level(field)
    drifted = cached not in (current.level, lagged.level)
    if drifted:
        logger.warning(
            f"Field {field.pk} cached traffic '{field.current_traffic}' disagrees with "
            f"consensus '{current.level}' ({current.report_count} reports)"
        )
    if cached != current.level:
        Field.objects.filter(pk=field.pk).update(
            current_traffic=current.level,
            traffic_updated_at=current.last_updated,
        )
        field.current_traffic = current.level
        field.traffic_updated_at = current.last_updated
    return drifted


def reconcile_all(window_size: Optional[int] = None) -> Tuple[int, int]:
    """Reconcile every field. Returns (fields checked, fields that had drifted)."""
    checked = drifted = 0
    for field in Field.objects.all().iterator():
        checked += 1
        if reconcile_field_cache(field, window_size):
            drifted += 1
    return checked, drifted
