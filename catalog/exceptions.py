# catalog/exceptions.py

class CatalogError(Exception):
    """Base exception for field catalog errors."""
    pass


class GeocodingError(CatalogError):
    """Raised when an address cannot be turned into coordinates."""
    def __init__(self, address: str, reason: str = "no match"):
        self.address = address
        self.reason = reason
        super().__init__(f"Could not geocode '{address}': {reason}")


class SuggestionStateError(CatalogError):
    """Raised when a suggestion is approved or rejected after it was already processed."""
    def __init__(self, suggestion_id, status: str):
        self.suggestion_id = suggestion_id
        self.status = status
        super().__init__(f"Suggestion {suggestion_id} is already {status}.")


class WeatherError(CatalogError):
    """Raised when current weather for a location cannot be fetched."""
    def __init__(self, latitude: float, longitude: float, reason: str):
        self.latitude = latitude
        self.longitude = longitude
        self.reason = reason
        super().__init__(f"No weather for ({latitude}, {longitude}): {reason}")
