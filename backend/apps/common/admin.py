# apps/common/admin.py

from django.contrib import admin
from apps.common.models import Delivery, InvoiceType, Location, Payment, Sport, Status


@admin.register(Sport)
class SportAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "icon_key")
    search_fields = ("name",)


@admin.register(Location, Status, Payment, Delivery, InvoiceType)
class ReferenceAdmin(admin.ModelAdmin):
    list_display = ("id", "name")
    search_fields = ("name",)
    ordering = ("id",)
