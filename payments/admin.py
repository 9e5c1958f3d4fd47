from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "paid_on", "user", "amount", "method", "order", "membership")
    list_filter = ("method",)
    search_fields = ("user__email", "user__last_name")
    ordering = ("-paid_on", "-id")
