from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from django.db import IntegrityError, transaction

from core.errors import ConflictError, InvalidInputError, NotFoundError

from .models import Booking, Coach, Course
from .slots import COURSE_SCHEDULE, Slot, generate_slots, parse_slot_datetime


logger = logging.getLogger(__name__)

COURSE_DURATION_MIN = 120
COURSE_PRICE = Decimal("0.00")


@dataclass
class Reconciliation:
    booked_course_ids: set[int] = field(default_factory=set)
    slot_course_ids: dict[str, int] = field(default_factory=dict)

    def course_id_for(self, slot: Slot) -> int | None:
        return self.slot_course_ids.get(slot.key)


@dataclass(frozen=True)
class BookingResult:
    course_id: int
    created: bool


def previous_courses(user) -> list[Course]:
    """Every course the member is booked on, newest first."""
    return list(
        Course.objects
        .filter(bookings__user=user)
        .order_by("-start_at")
    )


def reconcile_slots(user, course_name: str, slots: list[Slot]) -> Reconciliation:
    """Match locally generated slots against the member's bookings.

    Matching is on course name and the aware start datetime, never on
    formatted strings. Store errors propagate to the caller.
    """
    booked = {
        (c.name, c.start_at): c.id
        for c in previous_courses(user)
    }

    result = Reconciliation()
    for slot in slots:
        course_id = booked.get((course_name, slot.start_at))
        if course_id is None:
            continue
        result.slot_course_ids[slot.key] = course_id
        result.booked_course_ids.add(course_id)
    return result


def slot_states(user, course_name: str, today: date | None = None) -> tuple[list[dict], Reconciliation]:
    slots = generate_slots(course_name, today)
    rec = reconcile_slots(user, course_name, slots)
    rows = []
    for slot in slots:
        course_id = rec.course_id_for(slot)
        rows.append({**slot.as_dict(), "booked": course_id is not None, "course_id": course_id})
    return rows, rec


def _find_course(name: str, start_at: datetime) -> Course | None:
    return Course.objects.filter(name=name, start_at=start_at).first()


def get_or_create_course(name: str, start_at: datetime) -> Course:
    """Lookup-or-create under the (name, start_at) unique constraint.

    When a concurrent booker inserts the same slot first, the insert fails
    on the constraint and the row they created is reused.
    """
    course = _find_course(name, start_at)
    if course is not None:
        return course

    schedule = COURSE_SCHEDULE.get(name)
    if schedule is None:
        raise InvalidInputError("Nom de cours invalide", field="courseName")

    coach, _ = Coach.objects.get_or_create(name=schedule.coach)
    try:
        with transaction.atomic():
            course = Course.objects.create(
                name=name,
                start_at=start_at,
                duration_min=COURSE_DURATION_MIN,
                price=COURSE_PRICE,
                coach=coach,
            )
    except IntegrityError:
        course = _find_course(name, start_at)
        if course is None:
            raise ConflictError("Le créneau est en cours de création, réessayez")
        logger.info("Course %s at %s created concurrently, reusing #%s", name, start_at.isoformat(), course.id)
        return course

    logger.info("Course #%s created: %s at %s", course.id, name, start_at.isoformat())
    return course


def _book(user, course: Course) -> tuple[Booking, bool]:
    existing = Booking.objects.filter(user=user, course=course).first()
    if existing is not None:
        return existing, False
    try:
        with transaction.atomic():
            return Booking.objects.create(user=user, course=course), True
    except IntegrityError:
        # double clic : l'autre requête a déjà inscrit ce membre
        return Booking.objects.get(user=user, course=course), False


def validate_booking_request(course_name, date_str, time_str, duration) -> tuple[str, datetime]:
    for field_name, value in (
        ("courseName", course_name),
        ("date", date_str),
        ("time", time_str),
        ("duration", duration),
    ):
        if not str(value or "").strip():
            raise InvalidInputError(
                "Données manquantes : courseName, date, time, ou duration requis",
                field=field_name,
            )

    course_name = str(course_name).strip()
    if course_name not in COURSE_SCHEDULE:
        raise InvalidInputError("Nom de cours invalide", field="courseName")

    return course_name, parse_slot_datetime(str(date_str), str(time_str))


def confirm_booking(user, course_name: str, date_str: str, time_str: str, duration: str) -> BookingResult:
    """Turn a confirmed slot into a Course (created on first booking) plus a Booking.

    Everything is validated before the first query; both writes share one
    transaction. ``duration`` is required but the stored course duration is
    always the catalogue one.
    """
    course_name, start_at = validate_booking_request(course_name, date_str, time_str, duration)

    with transaction.atomic():
        course = get_or_create_course(course_name, start_at)
        booking, created = _book(user, course)

    if created:
        logger.info("Member %s booked course #%s", user.pk, course.id)
    else:
        logger.info("Member %s already booked on course #%s", user.pk, course.id)
    return BookingResult(course_id=booking.course_id, created=created)


def cancel_booking(user, course_id: int) -> None:
    """Hard-delete the member's booking; the Course row stays."""
    deleted, _ = Booking.objects.filter(user=user, course_id=course_id).delete()
    if not deleted:
        logger.info("No booking to cancel for member %s on course #%s", user.pk, course_id)
        raise NotFoundError("Inscription non trouvée")
    logger.info("Member %s cancelled course #%s", user.pk, course_id)
