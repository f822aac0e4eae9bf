# apps/members/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from apps.members.models import Member


@admin.register(Member)
class MemberAdmin(UserAdmin):
    list_display = ("id", "email", "name", "account", "role", "is_active")
    list_filter = ("role", "is_active", "gender")
    search_fields = ("email", "name", "account", "phone")
    ordering = ("-id",)
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Perfil", {"fields": ("account", "name", "phone", "gender", "birth", "address", "avatar")}),
        ("Permisos", {"fields": ("role", "is_active", "is_staff", "is_superuser", "firebase_uid")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "password1", "password2", "role")}),
    )
