# catalog/nearby.py
from geopy.distance import geodesic


def distance_miles(origin, destination) -> float:
    return geodesic(origin, destination).miles


def fields_by_distance(fields, lat, lon, limit=None):
    """
    [(field, miles)] closest first. Fields without coordinates follow with a
    distance of None, in their original order.
    """
    located, unlocated = [], []
    for f in fields:
        if f.has_location:
            located.append((f, distance_miles((lat, lon), (f.latitude, f.longitude))))
        else:
            unlocated.append((f, None))
    located.sort(key=lambda pair: pair[1])
    ordered = located + unlocated
    return ordered[:limit] if limit is not None else ordered


def nearest_fields(field, candidates, limit=3):
    """Closest located fields to `field`, excluding itself. Empty if it has no location."""
    if not field.has_location:
        return []
    others = [c for c in candidates if c.pk != field.pk and c.has_location]
    return fields_by_distance(others, field.latitude, field.longitude, limit)
