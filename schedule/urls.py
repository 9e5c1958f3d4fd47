from django.urls import path
from . import views

app_name = "schedule"

urlpatterns = [
    path("schedule/courses/", views.course_catalog, name="catalog"),
    path("schedule/<str:course_name>/slots/", views.course_slots, name="slots"),

    path("bookings/", views.create_booking, name="book"),

    # côté profil : historique et annulation
    path("user/previous-courses/", views.previous_courses, name="previous_courses"),
    path("user/course/<int:course_id>/", views.cancel_course, name="cancel"),
]
