# accounts/activity.py
from collections import Counter

from comments.models import FieldComment
from traffic.models import TrafficReport

RECENT_LIMIT = 5
TOP_FIELDS = 3


def user_activity(user, limit=RECENT_LIMIT):
    """
    Recent comments and traffic reports of one user, merged newest first,
    plus the counters and favorite fields shown on the dashboard.
    """
    comments = list(FieldComment.objects.filter(author=user).select_related("field")[:limit])
    reports = list(TrafficReport.objects.filter(submitted_by=user).select_related("field")[:limit])

    items = [
        {
            "type": "comment",
            "field_id": c.field_id,
            "field_name": c.field.name,
            "text": c.text,
            "category": c.category,
            "timestamp": c.created_at,
        }
        for c in comments
    ] + [
        {
            "type": "traffic",
            "field_id": r.field_id,
            "field_name": r.field.name,
            "level": r.level,
            "timestamp": r.submitted_at,
        }
        for r in reports
    ]
    items.sort(key=lambda item: item["timestamp"], reverse=True)

    names = {item["field_id"]: item["field_name"] for item in items}
    # most_common keeps first-seen order on ties, i.e. the most recently touched field
    counts = Counter(item["field_id"] for item in items)
    favorites = [
        {"id": field_id, "name": names[field_id], "count": count}
        for field_id, count in counts.most_common(TOP_FIELDS)
    ]

    return {
        "recent": items[:limit],
        "stats": {
            "total_reports": TrafficReport.objects.filter(submitted_by=user).count(),
            "total_comments": FieldComment.objects.filter(author=user).count(),
            "fields_rated": TrafficReport.objects.filter(submitted_by=user).values("field").distinct().count(),
        },
        "favorite_fields": favorites,
    }
