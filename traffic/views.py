# traffic/views.py
import json
import logging
from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET
from asgiref.sync import sync_to_async

from catalog.models import Field
from .broadcast import broadcast_to_field_async
from .encoding import badge, level_color, traffic_label
from .exceptions import InvalidTrafficLevel, ReportFetchError
from .services import field_consensus, submit_report

logger = logging.getLogger(__name__)

FETCH_FAILED = {"error": "Could not load traffic reports. Please try again."}


def report_as_dict(report):
    return {
        "id": report.id,
        "field_id": report.field_id,
        "level": report.level,
        "label": traffic_label(report.level),
        "color": level_color(report.level),
        "comment": report.comment,
        "submitted_at": report.submitted_at.isoformat(),
    }


def consensus_payload(field_id, result, snapshot):
    payload = badge(result)
    payload["field_id"] = field_id
    payload["computed_at"] = snapshot.fetched_at.isoformat()
    return payload


@require_GET
def field_traffic(request, field_id):
    """Headline consensus plus the most recent reports for one field."""
    field = get_object_or_404(Field, id=field_id)
    try:
        result, snapshot = field_consensus(field.id)
    except ReportFetchError:
        return JsonResponse(FETCH_FAILED, status=503)

    return JsonResponse({
        "consensus": consensus_payload(field.id, result, snapshot),
        "cached_level": field.current_traffic,
        "reports": [report_as_dict(r) for r in snapshot.reports[:settings.TRAFFIC_RECENT_REPORTS]],
    })


@require_GET
def map_markers(request):
    markers = []
    for field in Field.objects.filter(latitude__isnull=False, longitude__isnull=False):
        try:
            result, _ = field_consensus(field.id)
        except ReportFetchError:
            return JsonResponse(FETCH_FAILED, status=503)
        markers.append({
            "field_id": field.id,
            "name": field.name,
            "address": field.address,
            "lat": field.latitude,
            "lon": field.longitude,
            "level": result.level,
            "label": traffic_label(result.level),
            "color": level_color(result.level),
        })
    return JsonResponse({"markers": markers})


@csrf_exempt
async def post_report(request, field_id):
    """
    Async POST endpoint:
    JSON: { "level": "low" | "medium" | "high", "comment": "optional text" }
    The report timestamp is always taken from the server clock.
    """
    if request.method != "POST":
        return JsonResponse({"error": "POST only"}, status=405)

    user = await request.auser()
    if not user.is_authenticated:
        return JsonResponse({"error": "Login required"}, status=401)

    try:
        data = json.loads(request.body.decode())
    except (UnicodeDecodeError, json.JSONDecodeError):
        return JsonResponse({"error": "Invalid JSON"}, status=400)
    if not isinstance(data, dict):
        return JsonResponse({"error": "Invalid JSON"}, status=400)

    level = data.get("level") or data.get("trafficLevel")
    if not level:
        return JsonResponse({"error": "Missing fields"}, status=400)
    comment = data.get("comment") or ""
    if not isinstance(comment, str):
        return JsonResponse({"error": "comment must be a string"}, status=400)

    field = await sync_to_async(get_object_or_404)(Field, id=field_id)

    try:
        report, result = await sync_to_async(submit_report)(field, user, level, comment)
    except InvalidTrafficLevel as e:
        return JsonResponse({"error": str(e)}, status=400)

    payload = {"report": report_as_dict(report), "consensus": None}
    if result is not None:
        payload["consensus"] = badge(result)
        payload["consensus"]["field_id"] = field.id
        # do not fail the request if broadcast fails
        try:
            await broadcast_to_field_async(field.id, payload["consensus"])
        except Exception as e:
            logger.warning(f"Broadcast of field {field.id} traffic failed: {e}")

    return JsonResponse({"status": "ok", "data": payload}, status=201)
