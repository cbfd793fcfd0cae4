# catalog/features.py
AMENITY_FEATURES = [
    (("parking",), "Parking Available"),
    (("light", "lit"), "Field Lighting"),
    (("bathroom", "restroom", "toilet"), "Restrooms"),
    (("bench", "seating"), "Seating/Benches"),
    (("water", "fountain"), "Water Fountain"),
    (("shade", "tree"), "Shaded Areas"),
]


def _capitalize_first(text):
    return text[:1].upper() + text[1:] if text else ""


def parse_amenities(value):
    """Accept a list of tags or a comma separated string; drop blanks."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(item).strip() for item in value if str(item).strip()]


def field_features(field):
    features = []
    if field.surface:
        features.append(f"{_capitalize_first(field.surface)} Surface")
    for amenity in field.amenities or []:
        lowered = amenity.lower().strip()
        for keywords, name in AMENITY_FEATURES:
            if any(k in lowered for k in keywords):
                features.append(name)
                break
        else:
            features.append(_capitalize_first(amenity))
    return features


def describe_field(field, consensus=None):
    description = f"{field.name} is a soccer field located at {field.address}."
    if field.surface:
        description += f" The field features a {field.surface} playing surface."
    amenities = field.amenities or []
    if len(amenities) == 1:
        description += f" The facility offers {amenities[0]}."
    elif amenities:
        description += f" The facility offers {', '.join(amenities[:-1])}, and {amenities[-1]}."
    if consensus is not None and consensus.report_count > 0:
        description += (
            f" Based on {consensus.report_count} reports, the field typically "
            f"experiences {consensus.level} traffic."
        )
    return description
