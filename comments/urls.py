from django.urls import path
from . import views

urlpatterns = [
    path("categories/", views.categories, name="categories"),
    path("field/<int:field_id>/", views.field_comments, name="field_comments"),
]
