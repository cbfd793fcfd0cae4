# catalog/geocoding.py
import logging
from django.conf import settings
from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from .exceptions import GeocodingError

logger = logging.getLogger(__name__)


def get_geocoder():
    return Nominatim(user_agent=settings.GEOCODER_USER_AGENT, timeout=settings.GEOCODER_TIMEOUT)


def geocode_address(address: str, geocoder=None):
    """Return (latitude, longitude) for an address or raise GeocodingError."""
    if not address or not address.strip():
        raise GeocodingError(address or "", "empty address")
    geocoder = geocoder or get_geocoder()
    try:
        location = geocoder.geocode(address.strip())
    except GeopyError as e:
        logger.warning(f"Geocoder failed for '{address}': {e}")
        raise GeocodingError(address, str(e)) from e
    if location is None:
        raise GeocodingError(address)
    return location.latitude, location.longitude
