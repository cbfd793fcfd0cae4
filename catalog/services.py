# catalog/services.py
"""
Catalog curation: suggestions in, fields out.

Geocoding is optional everywhere. A field whose address cannot be geocoded
is still created, without coordinates, and the caller gets the reason back
as a warning string to show the admin.
"""
import logging
from django.db import transaction
from django.utils import timezone

from .exceptions import GeocodingError, SuggestionStateError
from .features import parse_amenities
from .geocoding import geocode_address
from .models import Field, FieldSuggestion

logger = logging.getLogger(__name__)


def _resolve_coordinates(address, latitude=None, longitude=None, geocoder=None):
    """Returns (latitude, longitude, geocoded, warning)."""
    if latitude is not None and longitude is not None:
        return float(latitude), float(longitude), False, None
    try:
        lat, lon = geocode_address(address, geocoder=geocoder)
    except GeocodingError as e:
        logger.warning(f"Adding '{address}' without coordinates: {e}")
        return None, None, False, "Could not geocode address. Field was added without coordinates."
    return lat, lon, True, None


def create_suggestion(user, name, address, surface="grass", amenities=None, latitude=None, longitude=None):
    return FieldSuggestion.objects.create(
        name=name.strip(),
        address=address.strip(),
        surface=(surface or "grass").strip(),
        amenities=parse_amenities(amenities),
        latitude=latitude,
        longitude=longitude,
        submitted_by=user,
    )


def add_field(admin, name, address, surface="grass", amenities=None, latitude=None, longitude=None,
              geocoder=None, from_suggestion=False):
    lat, lon, geocoded, warning = _resolve_coordinates(address, latitude, longitude, geocoder)
    field = Field.objects.create(
        name=name.strip(),
        address=address.strip(),
        latitude=lat,
        longitude=lon,
        surface=(surface or "grass").strip(),
        amenities=parse_amenities(amenities),
        added_by=admin,
        from_suggestion=from_suggestion,
        geocoded_at=timezone.now() if geocoded else None,
    )
    logger.info(f"Field {field.pk} '{field.name}' added by {admin}")
    return field, warning


def approve_suggestion(suggestion, admin, geocoder=None):
    """Create a field from a pending suggestion. Returns (field, warning)."""
    if not suggestion.is_pending:
        raise SuggestionStateError(suggestion.pk, suggestion.status)

    lat, lon, geocoded, warning = _resolve_coordinates(
        suggestion.address, suggestion.latitude, suggestion.longitude, geocoder
    )
    with transaction.atomic():
        locked = FieldSuggestion.objects.select_for_update().get(pk=suggestion.pk)
        if not locked.is_pending:
            raise SuggestionStateError(locked.pk, locked.status)
        field = Field.objects.create(
            name=locked.name,
            address=locked.address,
            latitude=lat,
            longitude=lon,
            surface=locked.surface or "grass",
            amenities=locked.amenities or [],
            added_by=admin,
            from_suggestion=True,
            geocoded_at=timezone.now() if geocoded else None,
        )
        locked.status = FieldSuggestion.APPROVED
        locked.processed_by = admin
        locked.processed_at = timezone.now()
        locked.field = field
        locked.save(update_fields=["status", "processed_by", "processed_at", "field"])

    logger.info(f"Suggestion {locked.pk} approved by {admin} as field {field.pk}")
    return field, warning


def reject_suggestion(suggestion, admin):
    with transaction.atomic():
        locked = FieldSuggestion.objects.select_for_update().get(pk=suggestion.pk)
        if not locked.is_pending:
            raise SuggestionStateError(locked.pk, locked.status)
        locked.status = FieldSuggestion.REJECTED
        locked.processed_by = admin
        locked.processed_at = timezone.now()
        locked.save(update_fields=["status", "processed_by", "processed_at"])
    logger.info(f"Suggestion {locked.pk} rejected by {admin}")
    return locked


def geocode_field(field, geocoder=None):
    """Look up and store coordinates for an existing field. Raises GeocodingError."""
    lat, lon = geocode_address(field.address, geocoder=geocoder)
    field.latitude, field.longitude = lat, lon
    field.geocoded_at = timezone.now()
    field.save(update_fields=["latitude", "longitude", "geocoded_at"])
    logger.info(f"Field {field.pk} geocoded to ({lat}, {lon})")
    return field
