# comments/categorize.py
"""
Keyword rules that file a free-text comment under a category.

Rules are checked top to bottom and the first one with a keyword contained
in the lower-cased text wins, so the order below is user visible.
"""

GENERAL = "general"

CATEGORIES = [
    ("conditions", "Field Conditions"),
    ("players", "Players & Games"),
    ("facilities", "Facilities"),
    ("parking", "Parking"),
    ("safety", "Safety"),
    (GENERAL, "General"),
]
CATEGORY_LABELS = dict(CATEGORIES)

CATEGORY_RULES = [
    (("mud", "grass", "turf", "condition"), "conditions"),
    (("game", "player", "team", "match"), "players"),
    (("bathroom", "toilet", "water", "bench"), "facilities"),
    (("park", "car", "lot"), "parking"),
    (("safe", "light", "danger", "secure"), "safety"),
]


def detect_category(text: str) -> str:
    lowered = (text or "").lower()
    for keywords, category in CATEGORY_RULES:
        if any(k in lowered for k in keywords):
            return category
    return GENERAL


def resolve_category(text: str, selected: str = GENERAL) -> str:
    """Keep an explicit choice; only 'general' (or nothing valid) triggers detection."""
    if selected in CATEGORY_LABELS and selected != GENERAL:
        return selected
    return detect_category(text)
