# apps/venue/filters.py

import django_filters

from apps.common.filters import ArenaFilterSet
from apps.venue.models import Center, CenterSport, Court, CourtTimeSlot, Reservation, TimeSlot


class CenterFilter(ArenaFilterSet):
    keyword_fields = ("name", "location__name")
    orderby_map = {
        **ArenaFilterSet.orderby_map,
        "name_asc": ("name", "id"),
        "name_desc": ("-name", "-id"),
        "rating_desc": ("-average_rating", "-id"),
    }

    locationId = django_filters.NumberFilter(field_name="location_id")
    sportId = django_filters.NumberFilter(method="filter_sport")
    minRating = django_filters.NumberFilter(field_name="average_rating", lookup_expr="gte")

    class Meta:
        model = Center
        fields = []

    def filter_sport(self, queryset, name, value):
        # subquery: un join directo multiplicaría las filas del Avg/Count
        return queryset.filter(
            id__in=CenterSport.objects.filter(sport_id=value).values("center_id")
        )


class CourtFilter(ArenaFilterSet):
    keyword_fields = ("name", "center__name", "sport__name")

    centerId = django_filters.NumberFilter(field_name="center_id")
    sportId = django_filters.NumberFilter(field_name="sport_id")

    class Meta:
        model = Court
        fields = []


class TimeSlotFilter(ArenaFilterSet):
    keyword_fields = ("label", "time_period__name")
    orderby_map = {
        **ArenaFilterSet.orderby_map,
        "start_asc": ("start_time", "id"),
        "start_desc": ("-start_time", "-id"),
    }
    default_ordering = ("start_time", "id")

    timePeriodId = django_filters.NumberFilter(field_name="time_period_id")

    class Meta:
        model = TimeSlot
        fields = []


class CourtTimeSlotFilter(ArenaFilterSet):
    keyword_fields = ("court__name", "court__center__name", "time_slot__label")
    orderby_map = {
        **ArenaFilterSet.orderby_map,
        "price_asc": ("price", "id"),
        "price_desc": ("-price", "-id"),
    }

    courtId = django_filters.NumberFilter(field_name="court_id")
    timeSlotId = django_filters.NumberFilter(field_name="time_slot_id")
    centerId = django_filters.NumberFilter(field_name="court__center_id")
    sportId = django_filters.NumberFilter(field_name="court__sport_id")
    timePeriodId = django_filters.NumberFilter(field_name="time_slot__time_period_id")

    class Meta:
        model = CourtTimeSlot
        fields = []


class ReservationFilter(ArenaFilterSet):
    keyword_fields = (
        "member__name",
        "court_time_slots__court__name",
        "court_time_slots__time_slot__label",
        "status__name",
    )
    orderby_map = {
        **ArenaFilterSet.orderby_map,
        "date_asc": ("date", "id"),
        "date_desc": ("-date", "-id"),
        "price_asc": ("price", "id"),
        "price_desc": ("-price", "-id"),
    }

    memberId = django_filters.NumberFilter(field_name="member_id")
    date = django_filters.DateFilter(field_name="date")
    locationId = django_filters.NumberFilter(method="filter_slot_field")
    centerId = django_filters.NumberFilter(method="filter_slot_field")
    sportId = django_filters.NumberFilter(method="filter_slot_field")
    timePeriodId = django_filters.NumberFilter(method="filter_slot_field")

    slot_lookups = {
        "locationId": "court_time_slots__court__center__location_id",
        "centerId": "court_time_slots__court__center_id",
        "sportId": "court_time_slots__court__sport_id",
        "timePeriodId": "court_time_slots__time_slot__time_period_id",
    }

    class Meta:
        model = Reservation
        fields = []

    def filter_slot_field(self, queryset, name, value):
        return queryset.filter(**{self.slot_lookups[name]: value}).distinct()
