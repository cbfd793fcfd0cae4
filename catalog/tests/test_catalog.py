from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import SimpleTestCase, TestCase, override_settings
from geopy.exc import GeocoderTimedOut

from catalog import services
from catalog.exceptions import GeocodingError, SuggestionStateError
from catalog.features import describe_field, field_features, parse_amenities
from catalog.geocoding import geocode_address
from catalog.models import Field, FieldSuggestion
from catalog.nearby import distance_miles, fields_by_distance, nearest_fields
from catalog.tasks import notify_admins_of_suggestion
from traffic.consensus import ConsensusResult


class GeocodingTest(SimpleTestCase):

    def test_returns_coordinates(self):
        geocoder = MagicMock()
        geocoder.geocode.return_value = SimpleNamespace(latitude=51.5, longitude=-0.12)
        self.assertEqual(geocode_address(" 10 Downing St ", geocoder=geocoder), (51.5, -0.12))
        geocoder.geocode.assert_called_once_with("10 Downing St")

    def test_no_match(self):
        geocoder = MagicMock()
        geocoder.geocode.return_value = None
        with self.assertRaises(GeocodingError):
            geocode_address("nowhere at all", geocoder=geocoder)

    def test_service_failure(self):
        geocoder = MagicMock()
        geocoder.geocode.side_effect = GeocoderTimedOut("slow")
        with self.assertLogs("catalog.geocoding", level="WARNING"):
            with self.assertRaises(GeocodingError) as ctx:
                geocode_address("1 Main St", geocoder=geocoder)
        self.assertIn("slow", ctx.exception.reason)

    def test_empty_address(self):
        with self.assertRaises(GeocodingError):
            geocode_address("   ", geocoder=MagicMock())


class NearbyTest(SimpleTestCase):

    def make(self, pk, name, lat=None, lon=None):
        return Field(pk=pk, name=name, address=name, latitude=lat, longitude=lon)

    def test_distance_in_miles(self):
        # one degree of latitude is roughly 69 miles
        self.assertAlmostEqual(distance_miles((40.0, -74.0), (41.0, -74.0)), 69.0, delta=0.5)

    def test_closest_first_then_unlocated(self):
        far = self.make(1, "far", 41.0, -74.0)
        near = self.make(2, "near", 40.01, -74.0)
        unknown = self.make(3, "unknown")
        ordered = fields_by_distance([far, unknown, near], 40.0, -74.0)
        self.assertEqual([f.name for f, _ in ordered], ["near", "far", "unknown"])
        self.assertIsNone(ordered[-1][1])

    def test_limit(self):
        fields = [self.make(i, f"f{i}", 40.0 + i / 100, -74.0) for i in range(5)]
        self.assertEqual(len(fields_by_distance(fields, 40.0, -74.0, limit=3)), 3)

    def test_nearest_excludes_self(self):
        home = self.make(1, "home", 40.0, -74.0)
        others = [home, self.make(2, "a", 40.1, -74.0), self.make(3, "b", 40.02, -74.0), self.make(4, "c")]
        self.assertEqual([f.name for f, _ in nearest_fields(home, others)], ["b", "a"])

    def test_nearest_without_location(self):
        self.assertEqual(nearest_fields(self.make(1, "x"), [self.make(2, "y", 1, 1)]), [])


class FeaturesTest(SimpleTestCase):

    def test_parse_amenities(self):
        self.assertEqual(parse_amenities("parking, lights , ,water"), ["parking", "lights", "water"])
        self.assertEqual(parse_amenities(["bench", " "]), ["bench"])
        self.assertEqual(parse_amenities(None), [])

    def test_features(self):
        field = Field(name="A", address="B", surface="turf", amenities=["Free parking", "Night lights", "goals"])
        self.assertEqual(
            field_features(field),
            ["Turf Surface", "Parking Available", "Field Lighting", "Goals"],
        )

    def test_description_with_traffic(self):
        field = Field(name="Riverside", address="2 River Rd", surface="grass", amenities=["parking", "restrooms"])
        text = describe_field(field, ConsensusResult(level="medium", confidence=60, report_count=10))
        self.assertEqual(
            text,
            "Riverside is a soccer field located at 2 River Rd. The field features a grass playing "
            "surface. The facility offers parking, and restrooms. Based on 10 reports, the field "
            "typically experiences medium traffic.",
        )

    def test_description_without_reports(self):
        field = Field(name="Lot", address="3 St", surface="", amenities=["bench"])
        text = describe_field(field, ConsensusResult(level="unknown", confidence=0, report_count=0))
        self.assertEqual(text, "Lot is a soccer field located at 3 St. The facility offers bench.")


class CurationServicesTest(TestCase):

    def setUp(self):
        users = get_user_model().objects
        self.admin = users.create_user("curator", "curator@example.com", "pw")
        self.user = users.create_user("player", "player@example.com", "pw")

    def suggest(self, **kwargs):
        data = {"name": "Hillside", "address": "4 Hill Rd", "amenities": "parking, benches"}
        data.update(kwargs)
        return services.create_suggestion(self.user, **data)

    def test_create_suggestion(self):
        suggestion = self.suggest()
        self.assertEqual(suggestion.status, FieldSuggestion.PENDING)
        self.assertEqual(suggestion.amenities, ["parking", "benches"])
        self.assertEqual(suggestion.surface, "grass")

    @patch("catalog.services.geocode_address", return_value=(34.1, -118.3))
    def test_approve_geocodes_missing_coordinates(self, geocode):
        suggestion = self.suggest()
        field, warning = services.approve_suggestion(suggestion, self.admin)
        self.assertIsNone(warning)
        self.assertEqual((field.latitude, field.longitude), (34.1, -118.3))
        self.assertIsNotNone(field.geocoded_at)
        self.assertTrue(field.from_suggestion)
        self.assertEqual(field.current_traffic, "unknown")
        suggestion.refresh_from_db()
        self.assertEqual(suggestion.status, FieldSuggestion.APPROVED)
        self.assertEqual(suggestion.processed_by, self.admin)
        self.assertEqual(suggestion.field, field)

    @patch("catalog.services.geocode_address")
    def test_approve_keeps_given_coordinates(self, geocode):
        field, _ = services.approve_suggestion(self.suggest(latitude=1.5, longitude=2.5), self.admin)
        geocode.assert_not_called()
        self.assertEqual((field.latitude, field.longitude), (1.5, 2.5))
        self.assertIsNone(field.geocoded_at)

    @patch("catalog.services.geocode_address", side_effect=GeocodingError("4 Hill Rd"))
    def test_approve_without_coordinates_when_geocoding_fails(self, geocode):
        with self.assertLogs("catalog.services", level="WARNING"):
            field, warning = services.approve_suggestion(self.suggest(), self.admin)
        self.assertIsNotNone(warning)
        self.assertFalse(field.has_location)

    @patch("catalog.services.geocode_address", return_value=(0.0, 0.0))
    def test_processed_suggestion_cannot_change(self, geocode):
        suggestion = self.suggest()
        services.reject_suggestion(suggestion, self.admin)
        suggestion.refresh_from_db()
        self.assertEqual(suggestion.status, FieldSuggestion.REJECTED)
        with self.assertRaises(SuggestionStateError):
            services.approve_suggestion(suggestion, self.admin)
        with self.assertRaises(SuggestionStateError):
            services.reject_suggestion(suggestion, self.admin)
        self.assertFalse(Field.objects.exists())

    @patch("catalog.services.geocode_address", return_value=(10.0, 20.0))
    def test_geocode_field(self, geocode):
        field = Field.objects.create(name="X", address="5 Road")
        services.geocode_field(field)
        field.refresh_from_db()
        self.assertEqual((field.latitude, field.longitude), (10.0, 20.0))
        self.assertIsNotNone(field.geocoded_at)


@override_settings(FOOTY_ADMIN_EMAILS=["curator@example.com"])
class SuggestionNotificationTest(TestCase):

    def test_new_suggestion_queues_notification(self):
        with patch("catalog.tasks.notify_admins_of_suggestion.delay") as delay:
            with self.captureOnCommitCallbacks(execute=True):
                suggestion = FieldSuggestion.objects.create(name="Hillside", address="4 Hill Rd")
        delay.assert_called_once_with(suggestion.pk)

    def test_broker_outage_is_logged(self):
        with patch("catalog.tasks.notify_admins_of_suggestion.delay", side_effect=OSError("no broker")):
            with self.assertLogs("catalog.signals", level="WARNING"):
                with self.captureOnCommitCallbacks(execute=True):
                    FieldSuggestion.objects.create(name="Hillside", address="4 Hill Rd")

    def test_task_mails_admins(self):
        get_user_model().objects.create_user("staff", "Staff@Example.com", "pw", is_staff=True)
        with patch("catalog.tasks.notify_admins_of_suggestion.delay"):
            suggestion = FieldSuggestion.objects.create(name="Hillside", address="4 Hill Rd", amenities=["parking"])
        sent = notify_admins_of_suggestion(suggestion.pk)
        self.assertEqual(sent, 1)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["curator@example.com", "staff@example.com"])
        self.assertIn("Hillside", mail.outbox[0].subject)

    def test_task_for_missing_suggestion(self):
        self.assertEqual(notify_admins_of_suggestion(12345), 0)
        self.assertEqual(len(mail.outbox), 0)
