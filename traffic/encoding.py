# traffic/encoding.py
from .consensus import normalize_level, LOW, MEDIUM, HIGH

COLORS = {
    LOW: "green",
    MEDIUM: "yellow",
    HIGH: "red",
}
NEUTRAL = "gray"


def level_color(level):
    """Marker/badge color for a traffic level. Legacy labels map like their canonical level."""
    return COLORS.get(normalize_level(level), NEUTRAL)


def traffic_label(level):
    canonical = normalize_level(level)
    return canonical.capitalize() if canonical else "Unknown"


def badge(consensus):
    """Payload shared by list badges, detail headline and map markers."""
    data = consensus.as_dict()
    data["color"] = level_color(consensus.level)
    data["label"] = traffic_label(consensus.level)
    return data
