# apps/course/admin.py
from django.contrib import admin

from apps.course.models import Booking, Coach, Lesson


@admin.register(Coach)
class CoachAdmin(admin.ModelAdmin):
    list_display = ("id", "member")
    search_fields = ("member__name", "member__email")


@admin.register(Lesson)
class LessonAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "sport", "coach", "day_of_week", "current_count", "max_capacity")
    list_filter = ("sport", "day_of_week")
    search_fields = ("title",)


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "member", "lesson", "price", "status", "invoice_number", "created_at")
    list_filter = ("status",)
    search_fields = ("member__email", "lesson__title", "invoice_number")
