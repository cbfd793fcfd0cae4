import json

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from catalog.models import Field
from comments.models import FieldComment


class FieldCommentsViewTest(TestCase):

    def setUp(self):
        self.user = get_user_model().objects.create_user("sam", "sam.keeper@example.com", "pw")
        self.field = Field.objects.create(name="Central", address="1 Park Ave")
        self.url = reverse("comments:field_comments", args=[self.field.id])

    def post(self, payload):
        return self.client.post(self.url, data=json.dumps(payload), content_type="application/json")

    def test_post_detects_category(self):
        self.client.force_login(self.user)
        response = self.post({"text": "  Turf is in great shape  "})
        self.assertEqual(response.status_code, 201)
        data = response.json()["data"]
        self.assertEqual(data["category"], "conditions")
        self.assertEqual(data["text"], "Turf is in great shape")
        self.assertEqual(data["author_name"], "sam.keeper")

    def test_post_keeps_explicit_category(self):
        self.client.force_login(self.user)
        data = self.post({"text": "Turf is fine", "category": "players"}).json()["data"]
        self.assertEqual(data["category"], "players")

    def test_empty_comment_rejected(self):
        self.client.force_login(self.user)
        self.assertEqual(self.post({"text": "   "}).status_code, 400)
        self.assertFalse(FieldComment.objects.exists())

    def test_non_string_values_rejected(self):
        self.client.force_login(self.user)
        self.assertEqual(self.post({"text": "muddy", "category": ["x"]}).status_code, 400)
        self.assertEqual(self.post({"text": 42}).status_code, 400)
        self.assertFalse(FieldComment.objects.exists())

    def test_login_required(self):
        self.assertEqual(self.post({"text": "hello"}).status_code, 401)

    def test_list_newest_first_and_filter(self):
        FieldComment.objects.create(field=self.field, text="old", category="parking")
        FieldComment.objects.create(field=self.field, text="new", category="safety")
        body = self.client.get(self.url).json()
        self.assertEqual([c["text"] for c in body["comments"]], ["new", "old"])
        body = self.client.get(self.url, {"category": "parking"}).json()
        self.assertEqual([c["text"] for c in body["comments"]], ["old"])
        body = self.client.get(self.url, {"category": "all"}).json()
        self.assertEqual(len(body["comments"]), 2)

    def test_categories(self):
        body = self.client.get(reverse("comments:categories")).json()
        self.assertEqual(body["categories"][-1], {"id": "general", "label": "General"})
        self.assertEqual(len(body["categories"]), 6)
