from django.contrib import admin

from .models import Membership, SubscriptionType


@admin.register(SubscriptionType)
class SubscriptionTypeAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "monthly_price")
    search_fields = ("name",)


@admin.register(Membership)
class MembershipAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "user",
        "subscription_type",
        "duration_months",
        "start_date",
        "end_date",
        "price",
        "is_active",
        "created_at",
    )
    list_filter = ("subscription_type", "is_active")
    search_fields = ("user__email", "user__first_name", "user__last_name", "subscription_type__name")
    ordering = ("-created_at",)
