from django.http import JsonResponse
from django.utils import timezone

from core.api import api_view, parse_json

from . import services
from .slots import COURSE_SCHEDULE


def _course_row(course) -> dict:
    return {
        "course_name": course.name,
        "course_datetime": timezone.localtime(course.start_at).isoformat(),
        "course_id": course.id,
    }


@api_view(["GET"])
def course_catalog(request):
    courses = [
        {"course_name": name, "weekday": s.weekday, "time": s.time, "coach": s.coach}
        for name, s in COURSE_SCHEDULE.items()
    ]
    return JsonResponse({"courses": courses})


@api_view(["GET"], auth=True)
def previous_courses(request):
    courses = services.previous_courses(request.member)
    return JsonResponse({
        "message": "Inscriptions récupérées avec succès",
        "courses": [_course_row(c) for c in courses],
    })


@api_view(["GET"], auth=True)
def course_slots(request, course_name: str):
    """Candidate slots of a course with the caller's booked state (ground truth)."""
    rows, rec = services.slot_states(request.member, course_name)
    return JsonResponse({
        "course_name": course_name,
        "slots": rows,
        "booked_course_ids": sorted(rec.booked_course_ids),
    })


@api_view(["POST"], auth=True)
def create_booking(request):
    data = parse_json(request)
    result = services.confirm_booking(
        request.member,
        data.get("courseName"),
        data.get("date"),
        data.get("time"),
        data.get("duration"),
    )
    if result.created:
        return JsonResponse({"message": "Réservation enregistrée", "course_id": result.course_id}, status=201)
    return JsonResponse({"message": "Vous êtes déjà inscrit à ce cours", "course_id": result.course_id})


@api_view(["DELETE"], auth=True)
def cancel_course(request, course_id: int):
    services.cancel_booking(request.member, course_id)
    return JsonResponse({"message": "Inscription annulée avec succès"})
