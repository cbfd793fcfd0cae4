# catalog/views.py
import json
import logging
from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from accounts.policy import admin_required, login_required_json
from comments.models import FieldComment
from comments.views import comment_as_dict
from traffic.encoding import badge
from traffic.exceptions import ReportFetchError
from traffic.services import field_consensus
from traffic.views import FETCH_FAILED, report_as_dict
from .exceptions import GeocodingError, SuggestionStateError
from .features import describe_field, field_features
from .models import Field, FieldSuggestion
from .nearby import fields_by_distance, nearest_fields
from .weather import field_weather
from . import services

logger = logging.getLogger(__name__)


def _json_body(request):
    try:
        data = json.loads(request.body.decode() or "{}")
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    return data if isinstance(data, dict) else None


def _optional_float(value):
    if value is None or value == "":
        return None
    return float(value)


def _coordinates(lat_value, lon_value):
    """Parse an optional lat/lon pair. Raises ValueError for non-numbers and out of range values."""
    lat = _optional_float(lat_value)
    lon = _optional_float(lon_value)
    if lat is not None and not -90 <= lat <= 90:
        raise ValueError(f"latitude {lat} is outside [-90, 90]")
    if lon is not None and not -180 <= lon <= 180:
        raise ValueError(f"longitude {lon} is outside [-180, 180]")
    return lat, lon


def _text(data, key, default=""):
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value.strip()


def _field_input(data):
    """Common name/address/surface/amenities/lat/lon payload of suggest and add."""
    name = _text(data, "name")
    address = _text(data, "address")
    surface = _text(data, "surface") or "grass"
    amenities = data.get("amenities")
    if amenities is not None and not isinstance(amenities, (str, list)):
        raise ValueError("amenities must be a list or a comma separated string")
    if not name or not address:
        raise ValueError("Field name and address are required")
    try:
        lat, lon = _coordinates(data.get("lat"), data.get("lon"))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Latitude and longitude must be valid coordinates: {e}") from e
    return name, address, surface, amenities, lat, lon


def _rounded(miles):
    return round(miles, 2) if miles is not None else None


def field_as_dict(field):
    return {
        "id": field.id,
        "name": field.name,
        "address": field.address,
        "lat": field.latitude,
        "lon": field.longitude,
        "surface": field.surface,
        "amenities": field.amenities,
        "cached_level": field.current_traffic,
    }


def suggestion_as_dict(s):
    return {
        "id": s.id,
        "name": s.name,
        "address": s.address,
        "lat": s.latitude,
        "lon": s.longitude,
        "surface": s.surface,
        "amenities": s.amenities,
        "status": s.status,
        "field_id": s.field_id,
        "created_at": s.created_at.isoformat(),
        "processed_at": s.processed_at.isoformat() if s.processed_at else None,
    }


@require_GET
def field_list(request):
    """
    GET ?lat=..&lon=..&limit=..
    With a location fields come closest first (miles); without one, by name.
    """
    try:
        lat, lon = _coordinates(request.GET.get("lat"), request.GET.get("lon"))
        limit = int(request.GET.get("limit", settings.NEARBY_FIELDS_LIMIT))
    except ValueError as e:
        return JsonResponse({"error": f"lat, lon and limit must be valid numbers: {e}"}, status=400)
    if limit < 0:
        return JsonResponse({"error": "limit must not be negative"}, status=400)

    fields = list(Field.objects.all())
    if lat is not None and lon is not None:
        ordered = fields_by_distance(fields, lat, lon, limit)
    else:
        ordered = [(f, None) for f in fields[:limit]]

    results = []
    for field, miles in ordered:
        try:
            result, _ = field_consensus(field.id)
        except ReportFetchError:
            return JsonResponse(FETCH_FAILED, status=503)
        item = field_as_dict(field)
        item["distance_miles"] = _rounded(miles)
        item["traffic"] = badge(result)
        results.append(item)
    return JsonResponse({"fields": results})


@require_GET
def field_detail(request, field_id):
    field = get_object_or_404(Field, id=field_id)
    try:
        result, snapshot = field_consensus(field.id)
    except ReportFetchError:
        return JsonResponse(FETCH_FAILED, status=503)

    nearby = [
        {"id": f.id, "name": f.name, "distance_miles": _rounded(miles), "cached_level": f.current_traffic}
        for f, miles in nearest_fields(field, Field.objects.exclude(pk=field.pk))
    ]
    recent_comments = FieldComment.objects.filter(field=field)[:settings.FIELD_RECENT_COMMENTS]
    data = field_as_dict(field)
    data.update({
        "features": field_features(field),
        "description": describe_field(field, result),
        "traffic": badge(result),
        "computed_at": snapshot.fetched_at.isoformat(),
        "recent_reports": [report_as_dict(r) for r in snapshot.reports[:settings.TRAFFIC_RECENT_REPORTS]],
        "recent_comments": [comment_as_dict(c) for c in recent_comments],
        "nearby": nearby,
        "weather": field_weather(field),
    })
    return JsonResponse(data)


@csrf_exempt
@require_POST
@login_required_json
def suggest_field(request):
    """
    JSON: { "name": "...", "address": "...", "surface": "grass", "amenities": "parking, lights" }
    """
    data = _json_body(request)
    if data is None:
        return JsonResponse({"error": "Invalid JSON"}, status=400)
    try:
        name, address, surface, amenities, lat, lon = _field_input(data)
    except ValueError as e:
        return JsonResponse({"error": str(e)}, status=400)

    suggestion = services.create_suggestion(request.user, name, address, surface, amenities, lat, lon)
    return JsonResponse({"status": "ok", "data": suggestion_as_dict(suggestion)}, status=201)


@require_GET
@admin_required
def suggestion_list(request):
    suggestions = list(FieldSuggestion.objects.all())
    # pending first, newest first within each group
    suggestions.sort(key=lambda s: not s.is_pending)
    return JsonResponse({
        "pending": sum(1 for s in suggestions if s.is_pending),
        "suggestions": [suggestion_as_dict(s) for s in suggestions],
    })


@csrf_exempt
@require_POST
@admin_required
def approve_suggestion(request, suggestion_id):
    suggestion = get_object_or_404(FieldSuggestion, id=suggestion_id)
    try:
        field, warning = services.approve_suggestion(suggestion, request.user)
    except SuggestionStateError as e:
        return JsonResponse({"error": str(e)}, status=409)
    return JsonResponse({"status": "ok", "field": field_as_dict(field), "warning": warning})


@csrf_exempt
@require_POST
@admin_required
def reject_suggestion(request, suggestion_id):
    suggestion = get_object_or_404(FieldSuggestion, id=suggestion_id)
    try:
        suggestion = services.reject_suggestion(suggestion, request.user)
    except SuggestionStateError as e:
        return JsonResponse({"error": str(e)}, status=409)
    return JsonResponse({"status": "ok", "data": suggestion_as_dict(suggestion)})


@csrf_exempt
@require_http_methods(["POST", "DELETE"])
@admin_required
def delete_suggestion(request, suggestion_id):
    suggestion = get_object_or_404(FieldSuggestion, id=suggestion_id)
    suggestion.delete()
    logger.info(f"Suggestion {suggestion_id} deleted by {request.user}")
    return JsonResponse({"status": "ok"})


@csrf_exempt
@require_POST
@admin_required
def add_field(request):
    """
    JSON: { "name", "address", "surface", "amenities", "lat", "lon" }
    Coordinates are optional; without them the address is geocoded.
    """
    data = _json_body(request)
    if data is None:
        return JsonResponse({"error": "Invalid JSON"}, status=400)
    try:
        name, address, surface, amenities, lat, lon = _field_input(data)
    except ValueError as e:
        return JsonResponse({"error": str(e)}, status=400)

    field, warning = services.add_field(request.user, name, address, surface, amenities, lat, lon)
    return JsonResponse({"status": "ok", "field": field_as_dict(field), "warning": warning}, status=201)


@csrf_exempt
@require_POST
@admin_required
def geocode_field(request, field_id):
    field = get_object_or_404(Field, id=field_id)
    try:
        services.geocode_field(field)
    except GeocodingError as e:
        return JsonResponse({"error": str(e)}, status=422)
    return JsonResponse({"status": "ok", "field": field_as_dict(field)})
