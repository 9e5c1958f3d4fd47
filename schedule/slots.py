"""Weekly candidate slots for the catalogue courses.

Slots are not stored: they are recomputed from "today" on every request and
only become a Course row once somebody books them.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from django.utils import timezone

from core.errors import InvalidInputError


SLOTS_AHEAD = 3
DATE_FORMAT = "%d/%m/%Y"
TIME_FORMAT = "%H:%M"


@dataclass(frozen=True)
class CourseSchedule:
    weekday: int  # 0 = dimanche … 6 = samedi
    time: str
    coach: str


COURSE_SCHEDULE = {
    "Cours Collectifs": CourseSchedule(weekday=1, time="18:00", coach="Anna"),
    "Pole Dance": CourseSchedule(weekday=2, time="18:00", coach="Marc"),
    "Crosstraining": CourseSchedule(weekday=3, time="18:00", coach="Léa"),
    "Boxe": CourseSchedule(weekday=4, time="18:00", coach="Paul"),
    "Haltérophilie": CourseSchedule(weekday=5, time="18:00", coach="Sophie"),
    "MMA": CourseSchedule(weekday=6, time="18:00", coach="Lucas"),
}


@dataclass(frozen=True)
class Slot:
    id: int
    date: str
    time: str
    coach: str
    start_at: datetime

    @property
    def key(self) -> str:
        return f"{self.date}_{self.time}"

    def as_dict(self) -> dict:
        return {"id": self.id, "date": self.date, "time": self.time, "coach": self.coach}


def sunday_based_weekday(day: date) -> int:
    return day.isoweekday() % 7


def slot_start(day: date, time_str: str) -> datetime:
    """Aware datetime of a slot, in the club's timezone."""
    hh, mm = (int(x) for x in time_str.split(":"))
    return timezone.make_aware(datetime.combine(day, time(hour=hh, minute=mm)), timezone.get_current_timezone())


def parse_slot_datetime(date_str: str, time_str: str) -> datetime:
    """Parse the client's ``DD/MM/YYYY`` + ``HH:MM`` pair into one aware datetime."""
    try:
        day = datetime.strptime((date_str or "").strip(), DATE_FORMAT).date()
    except ValueError:
        raise InvalidInputError("Date invalide, format attendu JJ/MM/AAAA", field="date")
    try:
        clock = datetime.strptime((time_str or "").strip(), TIME_FORMAT).time()
    except ValueError:
        raise InvalidInputError("Heure invalide, format attendu HH:MM", field="time")
    return timezone.make_aware(datetime.combine(day, clock), timezone.get_current_timezone())


def generate_slots(course_name: str, today: date | None = None) -> list[Slot]:
    """Next three weekly occurrences of ``course_name`` starting from ``today``.

    If today is the course's weekday, the first slot is today. Unknown course
    names give an empty list.
    """
    schedule = COURSE_SCHEDULE.get(course_name)
    if schedule is None:
        return []

    today = today or timezone.localdate()
    offset = (schedule.weekday - sunday_based_weekday(today) + 7) % 7

    slots = []
    for i in range(SLOTS_AHEAD):
        day = today + timedelta(days=offset + i * 7)
        slots.append(
            Slot(
                id=i + 1,
                date=day.strftime(DATE_FORMAT),
                time=schedule.time,
                coach=schedule.coach,
                start_at=slot_start(day, schedule.time),
            )
        )
    return slots
