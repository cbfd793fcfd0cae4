from django.urls import re_path
from traffic.consumers import FieldTrafficConsumer

websocket_urlpatterns = [
    re_path(r'ws/fields/(?P<field_id>\d+)/traffic/$', FieldTrafficConsumer.as_asgi()),
]
