# accounts/views.py
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from .activity import user_activity
from .policy import get_admin_policy, login_required_json


@require_GET
@login_required_json
def dashboard(request):
    user = request.user
    activity = user_activity(user)
    for item in activity["recent"]:
        item["timestamp"] = item["timestamp"].isoformat()
    return JsonResponse({
        "user": {
            "username": user.get_username(),
            "email": user.email,
            "is_admin": get_admin_policy().is_admin(user),
        },
        **activity,
    })
