# accounts/policy.py
"""
Who may curate the field catalog.

Every admin check in the project goes through get_admin_policy(); the
allow-list lives in the FOOTY_ADMIN_EMAILS setting and nowhere else.
"""
from functools import wraps

from django.conf import settings
from django.http import JsonResponse


class AdminPolicy:
    def __init__(self, emails=()):
        self.emails = frozenset(e.strip().lower() for e in emails if e and e.strip())

    def is_admin(self, user) -> bool:
        if user is None or not user.is_authenticated:
            return False
        if user.is_staff or user.is_superuser:
            return True
        email = (getattr(user, "email", "") or "").strip().lower()
        return bool(email) and email in self.emails


def get_admin_policy() -> AdminPolicy:
    return AdminPolicy(settings.FOOTY_ADMIN_EMAILS)


def login_required_json(view):
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({"error": "Login required"}, status=401)
        return view(request, *args, **kwargs)
    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({"error": "Login required"}, status=401)
        if not get_admin_policy().is_admin(request.user):
            return JsonResponse({"error": "You don't have permission to access this page."}, status=403)
        return view(request, *args, **kwargs)
    return wrapper
