from django.db import connection
from django.http import JsonResponse

from schedule.models import Coach
from schedule.slots import COURSE_SCHEDULE

from .api import api_view


@api_view(["GET"])
def home(request):
    return JsonResponse({"message": "Bienvenue sur l'API FitnessDev !"})


@api_view(["GET"])
def health(request):
    # OperationalError remonte jusqu'au décorateur → 503
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")
    return JsonResponse({"status": "ok"})


@api_view(["GET"])
def trainers(request):
    """Coachs du club et les cours qu'ils animent."""
    courses_by_coach: dict[str, list[str]] = {}
    for course_name, sched in COURSE_SCHEDULE.items():
        courses_by_coach.setdefault(sched.coach, []).append(course_name)

    names = set(courses_by_coach) | set(Coach.objects.values_list("name", flat=True))
    return JsonResponse({
        "trainers": [
            {"name": name, "courses": courses_by_coach.get(name, [])}
            for name in sorted(names)
        ]
    })
