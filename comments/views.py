# comments/views.py
import json
import logging
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from catalog.models import Field
from .categorize import CATEGORIES, CATEGORY_LABELS, GENERAL, resolve_category
from .models import FieldComment

logger = logging.getLogger(__name__)

COMMENTS_LIMIT = 50


def display_name(user):
    name = user.get_full_name().strip()
    if name:
        return name
    if user.email:
        return user.email.split("@")[0]
    return user.get_username()


def comment_as_dict(comment):
    return {
        "id": comment.id,
        "field_id": comment.field_id,
        "text": comment.text,
        "category": comment.category,
        "category_label": CATEGORY_LABELS.get(comment.category, CATEGORY_LABELS[GENERAL]),
        "author_name": comment.author_name or "Anonymous",
        "created_at": comment.created_at.isoformat(),
    }


@require_GET
def categories(request):
    return JsonResponse({"categories": [{"id": cid, "label": label} for cid, label in CATEGORIES]})


@csrf_exempt
@require_http_methods(["GET", "POST"])
def field_comments(request, field_id):
    """
    GET  ?category=<id>  newest-first comments, optionally one category
    POST { "text": "...", "category": "general" }  login required
    """
    field = get_object_or_404(Field, id=field_id)

    if request.method == "GET":
        qs = FieldComment.objects.filter(field=field)
        category = request.GET.get("category")
        if category and category != "all":
            qs = qs.filter(category=category)
        return JsonResponse({"comments": [comment_as_dict(c) for c in qs[:COMMENTS_LIMIT]]})

    if not request.user.is_authenticated:
        return JsonResponse({"error": "Login required"}, status=401)
    try:
        data = json.loads(request.body.decode())
    except (UnicodeDecodeError, json.JSONDecodeError):
        return JsonResponse({"error": "Invalid JSON"}, status=400)
    if not isinstance(data, dict):
        return JsonResponse({"error": "Invalid JSON"}, status=400)

    text = data.get("text") or data.get("comment") or ""
    category = data.get("category") or GENERAL
    if not isinstance(text, str) or not isinstance(category, str):
        return JsonResponse({"error": "text and category must be strings"}, status=400)
    text = text.strip()
    if not text:
        return JsonResponse({"error": "Comment text is required"}, status=400)

    comment = FieldComment.objects.create(
        field=field,
        text=text,
        category=resolve_category(text, category),
        author=request.user,
        author_name=display_name(request.user),
    )
    logger.info(f"Comment {comment.pk} on field {field.pk} filed under {comment.category}")
    return JsonResponse({"status": "ok", "data": comment_as_dict(comment)}, status=201)
