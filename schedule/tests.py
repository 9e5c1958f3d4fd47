import json
from datetime import date, timedelta
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.db import OperationalError
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from accounts.tokens import create_access_token
from core.errors import InvalidInputError, NotFoundError
from schedule import services
from schedule.models import Booking, Coach, Course
from schedule.slots import COURSE_SCHEDULE, generate_slots, parse_slot_datetime, sunday_based_weekday


def make_member(email="membre@example.com"):
    return get_user_model().objects.create_user(username=email, email=email, password="Str0ng-Passw0rd!x")


def auth(user):
    return {"HTTP_AUTHORIZATION": f"Bearer {create_access_token(user)}"}


class SlotGenerationTests(TestCase):
    def test_same_day_same_slots(self):
        today = date(2026, 3, 10)
        self.assertEqual(generate_slots("Boxe", today), generate_slots("Boxe", today))

    def test_every_course_lands_on_its_weekday_one_week_apart(self):
        today = date(2026, 3, 10)
        for name, sched in COURSE_SCHEDULE.items():
            slots = generate_slots(name, today)
            self.assertEqual(len(slots), 3)
            days = [timezone.localtime(s.start_at).date() for s in slots]
            for day in days:
                self.assertEqual(sunday_based_weekday(day), sched.weekday)
                self.assertGreaterEqual(day, today)
            self.assertEqual(days[1] - days[0], timedelta(days=7))
            self.assertEqual(days[2] - days[1], timedelta(days=7))
            self.assertLess(days[0] - today, timedelta(days=7))

    def test_boxe_from_tuesday_is_next_thursday(self):
        tuesday = date(2026, 3, 10)
        slots = generate_slots("Boxe", tuesday)
        self.assertEqual(slots[0].date, "12/03/2026")
        self.assertEqual(slots[0].time, "18:00")
        self.assertEqual(slots[0].coach, "Paul")
        self.assertEqual([s.id for s in slots], [1, 2, 3])

    def test_first_slot_is_today_on_the_course_day(self):
        saturday = date(2026, 3, 14)
        slots = generate_slots("MMA", saturday)
        self.assertEqual(slots[0].date, "14/03/2026")

    def test_unknown_course_gives_no_slots(self):
        self.assertEqual(generate_slots("Yoga", date(2026, 3, 10)), [])

    def test_parse_rejects_bad_date(self):
        with self.assertRaises(InvalidInputError) as ctx:
            parse_slot_datetime("2026-03-12", "18:00")
        self.assertEqual(ctx.exception.field, "date")


class ConfirmBookingTests(TestCase):
    def setUp(self):
        self.user = make_member()
        self.slot = generate_slots("MMA")[0]

    def test_confirm_creates_course_with_catalogue_coach(self):
        result = services.confirm_booking(self.user, "MMA", self.slot.date, self.slot.time, "120")

        self.assertTrue(result.created)
        course = Course.objects.get(pk=result.course_id)
        self.assertEqual(course.coach.name, "Lucas")
        self.assertEqual(course.duration_min, 120)
        self.assertEqual(course.start_at, self.slot.start_at)
        self.assertTrue(Booking.objects.filter(user=self.user, course=course).exists())

    def test_second_member_reuses_the_course(self):
        other = make_member("autre@example.com")
        first = services.confirm_booking(self.user, "MMA", self.slot.date, self.slot.time, "120")
        second = services.confirm_booking(other, "MMA", self.slot.date, self.slot.time, "120")

        self.assertEqual(first.course_id, second.course_id)
        self.assertEqual(Course.objects.count(), 1)
        self.assertEqual(Booking.objects.count(), 2)

    def test_repeated_confirm_is_idempotent(self):
        first = services.confirm_booking(self.user, "MMA", self.slot.date, self.slot.time, "120")
        again = services.confirm_booking(self.user, "MMA", self.slot.date, self.slot.time, "120")

        self.assertFalse(again.created)
        self.assertEqual(first.course_id, again.course_id)
        self.assertEqual(Booking.objects.count(), 1)

    def test_concurrent_course_creation_keeps_one_row(self):
        coach = Coach.objects.create(name="Lucas")
        existing = Course.objects.create(name="MMA", start_at=self.slot.start_at, coach=coach)

        # the lookup misses, as if the other request inserted right after it
        with patch("schedule.services._find_course", side_effect=[None, existing]):
            result = services.confirm_booking(self.user, "MMA", self.slot.date, self.slot.time, "120")

        self.assertEqual(result.course_id, existing.id)
        self.assertEqual(Course.objects.filter(name="MMA").count(), 1)
        self.assertTrue(Booking.objects.filter(user=self.user, course=existing).exists())

    def test_reconcile_shows_booked_slot(self):
        result = services.confirm_booking(self.user, "MMA", self.slot.date, self.slot.time, "120")
        rows, rec = services.slot_states(self.user, "MMA")

        self.assertEqual(rec.booked_course_ids, {result.course_id})
        self.assertTrue(rows[0]["booked"])
        self.assertEqual(rows[0]["course_id"], result.course_id)
        self.assertFalse(rows[1]["booked"])

    def test_other_course_same_time_is_not_booked(self):
        services.confirm_booking(self.user, "MMA", self.slot.date, self.slot.time, "120")
        rows, rec = services.slot_states(self.user, "Boxe")
        self.assertEqual(rec.booked_course_ids, set())
        self.assertFalse(any(r["booked"] for r in rows))

    def test_cancel_missing_booking_is_not_found(self):
        with self.assertRaises(NotFoundError):
            services.cancel_booking(self.user, 999)


class BookingApiTests(TestCase):
    def setUp(self):
        self.user = make_member()
        self.headers = auth(self.user)
        self.slot = generate_slots("Boxe")[0]

    def _book(self, **overrides):
        body = {
            "courseName": "Boxe",
            "date": self.slot.date,
            "time": self.slot.time,
            "duration": "120",
        }
        body.update(overrides)
        return self.client.post(
            reverse("schedule:book"),
            data=json.dumps(body),
            content_type="application/json",
            **self.headers,
        )

    def test_confirm_cancel_read_round_trip(self):
        response = self._book()
        self.assertEqual(response.status_code, 201)
        course_id = response.json()["course_id"]

        slots = self.client.get(reverse("schedule:slots", args=["Boxe"]), **self.headers).json()
        self.assertEqual(slots["booked_course_ids"], [course_id])
        self.assertTrue(slots["slots"][0]["booked"])

        response = self.client.delete(reverse("schedule:cancel", args=[course_id]), **self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Inscription annulée avec succès")

        slots = self.client.get(reverse("schedule:slots", args=["Boxe"]), **self.headers).json()
        self.assertEqual(slots["booked_course_ids"], [])
        self.assertFalse(any(s["booked"] for s in slots["slots"]))
        self.assertTrue(Course.objects.filter(pk=course_id).exists())

    def test_repeated_confirm_returns_200(self):
        self._book()
        response = self._book()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(Booking.objects.count(), 1)

    def test_missing_field_writes_nothing(self):
        response = self._book(duration="")
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["error"], "INVALID_INPUT")
        self.assertEqual(body["field"], "duration")
        self.assertFalse(body["retryable"])
        self.assertEqual(Course.objects.count(), 0)
        self.assertEqual(Booking.objects.count(), 0)

    def test_unknown_course_name(self):
        response = self._book(courseName="Yoga")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["field"], "courseName")
        self.assertEqual(Course.objects.count(), 0)

    def test_cancel_missing_booking_is_404(self):
        response = self.client.delete(reverse("schedule:cancel", args=[12345]), **self.headers)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Inscription non trouvée")

    def test_missing_token_is_401(self):
        response = self.client.post(
            reverse("schedule:book"),
            data=json.dumps({"courseName": "Boxe"}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(Course.objects.count(), 0)

    def test_bad_token_is_403(self):
        response = self.client.get(
            reverse("schedule:previous_courses"),
            HTTP_AUTHORIZATION="Bearer not-a-jwt",
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"], "INVALID_TOKEN")

    def test_expired_token_is_403(self):
        token = create_access_token(self.user, expires_delta=timedelta(seconds=-1))
        response = self.client.get(reverse("schedule:previous_courses"), HTTP_AUTHORIZATION=f"Bearer {token}")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["message"], "Token expiré")

    def test_previous_courses_newest_first(self):
        slots = generate_slots("Boxe")
        for slot in slots[:2]:
            self._book(date=slot.date)

        response = self.client.get(reverse("schedule:previous_courses"), **self.headers)
        self.assertEqual(response.status_code, 200)
        courses = response.json()["courses"]
        self.assertEqual(len(courses), 2)
        self.assertEqual(set(courses[0]), {"course_name", "course_datetime", "course_id"})
        self.assertEqual(courses[0]["course_name"], "Boxe")
        self.assertGreater(courses[0]["course_datetime"], courses[1]["course_datetime"])

    def test_store_outage_is_retryable_503(self):
        with patch("schedule.services.previous_courses", side_effect=OperationalError("gone away")):
            response = self.client.get(reverse("schedule:slots", args=["Boxe"]), **self.headers)
        self.assertEqual(response.status_code, 503)
        self.assertTrue(response.json()["retryable"])

    def test_wrong_method_is_405(self):
        response = self.client.get(reverse("schedule:book"), **self.headers)
        self.assertEqual(response.status_code, 405)

    def test_catalog_is_public(self):
        response = self.client.get(reverse("schedule:catalog"))
        self.assertEqual(response.status_code, 200)
        names = [c["course_name"] for c in response.json()["courses"]]
        self.assertEqual(names, list(COURSE_SCHEDULE))
