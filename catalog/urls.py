#catalog/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path("", views.field_list, name="field_list"),
    path("<int:field_id>/", views.field_detail, name="field_detail"),
    path("suggest/", views.suggest_field, name="suggest_field"),
    path("admin/add/", views.add_field, name="add_field"),
    path("admin/<int:field_id>/geocode/", views.geocode_field, name="geocode_field"),
    path("admin/suggestions/", views.suggestion_list, name="suggestion_list"),
    path("admin/suggestions/<int:suggestion_id>/approve/", views.approve_suggestion, name="approve_suggestion"),
    path("admin/suggestions/<int:suggestion_id>/reject/", views.reject_suggestion, name="reject_suggestion"),
    path("admin/suggestions/<int:suggestion_id>/delete/", views.delete_suggestion, name="delete_suggestion"),
]
