from django.contrib import admin

from .models import Booking, Coach, Course


@admin.register(Coach)
class CoachAdmin(admin.ModelAdmin):
    search_fields = ("name",)
    list_display = ("id", "name")
    ordering = ("name", "id")


class BookingInline(admin.TabularInline):
    model = Booking
    extra = 0
    autocomplete_fields = ("user",)
    readonly_fields = ("created_at",)
    fields = ("user", "created_at")


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "start_at", "duration_min", "coach", "booked_count")
    list_filter = ("name", "coach")
    search_fields = ("name", "coach__name")
    date_hierarchy = "start_at"
    ordering = ("-start_at",)
    inlines = [BookingInline]

    @admin.display(description="Inscrits")
    def booked_count(self, obj):
        return obj.bookings.count()


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "course", "created_at")
    list_filter = ("course__name",)
    search_fields = ("user__email", "user__last_name", "course__name")
    autocomplete_fields = ("user", "course")
    ordering = ("-created_at",)
