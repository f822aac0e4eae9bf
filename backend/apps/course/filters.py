# apps/course/filters.py

import django_filters

from apps.common.filters import ArenaFilterSet
from apps.course.models import Booking, Lesson


class LessonFilter(ArenaFilterSet):
    keyword_fields = ("title", "court__name", "sport__name", "coach__member__name")
    orderby_map = {
        **ArenaFilterSet.orderby_map,
        "price_asc": ("price", "id"),
        "price_desc": ("-price", "-id"),
        "start_asc": ("start_date", "id"),
        "start_desc": ("-start_date", "-id"),
    }

    sportId = django_filters.NumberFilter(field_name="sport_id")
    coachId = django_filters.NumberFilter(field_name="coach_id")

    class Meta:
        model = Lesson
        fields = []


class BookingFilter(ArenaFilterSet):
    keyword_fields = ("member__name", "lesson__title", "status__name", "invoice_number")
    orderby_map = {
        **ArenaFilterSet.orderby_map,
        "created_asc": ("created_at", "id"),
        "created_desc": ("-created_at", "-id"),
        "price_asc": ("price", "id"),
        "price_desc": ("-price", "-id"),
    }

    memberId = django_filters.NumberFilter(field_name="member_id")
    lessonId = django_filters.NumberFilter(field_name="lesson_id")

    class Meta:
        model = Booking
        fields = []
