from django.contrib import admin
from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "created_at", "user", "shipping_method", "shipping_cost", "total")
    list_filter = ("shipping_method",)
    inlines = [OrderItemInline]
