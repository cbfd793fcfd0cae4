#traffic/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path("fields/<int:field_id>/", views.field_traffic, name="field_traffic"),
    path("fields/<int:field_id>/reports/", views.post_report, name="post_report"),
    path("map/", views.map_markers, name="map_markers"),
]
