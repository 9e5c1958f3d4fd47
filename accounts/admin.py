from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import User


@admin.register(User)
class MemberAdmin(UserAdmin):
    list_display = ("id", "email", "last_name", "first_name", "phone", "member_type", "date_joined")
    search_fields = ("email", "last_name", "first_name", "phone")
    ordering = ("-date_joined",)
    fieldsets = UserAdmin.fieldsets + (
        ("Inscrit", {"fields": ("civility", "phone", "address", "birth_date", "member_type")}),
    )
