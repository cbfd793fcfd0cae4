# catalog/weather.py
import logging
import math
import requests
from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

from .exceptions import WeatherError

logger = logging.getLogger(__name__)

ICON_URL = "https://openweathermap.org/img/wn/{icon}@2x.png"


def _round_half_up(value) -> int:
    return int(math.floor(value + 0.5))


def weather_cache_key(latitude: float, longitude: float) -> str:
    # neighbouring fields share one entry
    return f"weather:{latitude:.2f}:{longitude:.2f}"


def fetch_weather(latitude: float, longitude: float) -> dict:
    """Current conditions from OpenWeather in imperial units. Raises WeatherError."""
    params = {
        "lat": latitude,
        "lon": longitude,
        "units": "imperial",
        "appid": settings.OPENWEATHER_API_KEY,
    }
    try:
        response = requests.get(settings.OPENWEATHER_URL, params=params, timeout=settings.WEATHER_TIMEOUT)
        response.raise_for_status()
        data = response.json()
    except requests.RequestException as e:
        raise WeatherError(latitude, longitude, str(e)) from e

    try:
        current = data["weather"][0]
        return {
            "temp": _round_half_up(data["main"]["temp"]),
            "condition": current["main"],
            "description": current["description"],
            "icon": ICON_URL.format(icon=current["icon"]),
            "humidity": data["main"]["humidity"],
            "wind_speed": _round_half_up(data["wind"]["speed"]),
        }
    except (KeyError, IndexError, TypeError) as e:
        raise WeatherError(latitude, longitude, f"unexpected response: {e!r}") from e


def field_weather(field):
    """
    Cached current weather for a located field, or None.

    Entries are kept for WEATHER_CACHE_SECONDS and carry the time they were
    fetched. A missing API key or a failed call gives None and a warning.
    """
    if not field.has_location:
        return None
    if not settings.OPENWEATHER_API_KEY:
        logger.warning(f"OPENWEATHER_API_KEY is not set, no weather for field {field.pk}")
        return None

    key = weather_cache_key(field.latitude, field.longitude)
    entry = cache.get(key)
    if entry is None:
        try:
            data = fetch_weather(field.latitude, field.longitude)
        except WeatherError as e:
            logger.warning(f"Weather for field {field.pk} unavailable: {e}")
            return None
        entry = {"data": data, "fetched_at": timezone.now().isoformat()}
        cache.set(key, entry, settings.WEATHER_CACHE_SECONDS)
    return dict(entry["data"], fetched_at=entry["fetched_at"])
