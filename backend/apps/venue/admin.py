# apps/venue/admin.py
from django.contrib import admin

from apps.venue.models import (
    Center,
    CenterImage,
    CenterRating,
    Court,
    CourtTimeSlot,
    Reservation,
    ReservationCourtTimeSlot,
    TimePeriod,
    TimeSlot,
)


class CenterImageInline(admin.TabularInline):
    model = CenterImage
    extra = 0


@admin.register(Center)
class CenterAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "location", "address")
    list_filter = ("location",)
    search_fields = ("name", "address")
    inlines = [CenterImageInline]


@admin.register(CenterRating)
class CenterRatingAdmin(admin.ModelAdmin):
    list_display = ("id", "center", "member", "rating", "created_at")
    list_filter = ("rating",)


@admin.register(Court)
class CourtAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "center", "sport")
    list_filter = ("center", "sport")
    search_fields = ("name",)


admin.site.register(TimePeriod)


@admin.register(TimeSlot)
class TimeSlotAdmin(admin.ModelAdmin):
    list_display = ("id", "label", "time_period")
    list_filter = ("time_period",)


@admin.register(CourtTimeSlot)
class CourtTimeSlotAdmin(admin.ModelAdmin):
    list_display = ("id", "court", "time_slot", "price")
    list_filter = ("court__center",)


class ReservationCourtTimeSlotInline(admin.TabularInline):
    model = ReservationCourtTimeSlot
    extra = 0
    raw_id_fields = ("court_time_slot",)


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = ("id", "member", "date", "price", "status", "invoice_number")
    list_filter = ("status", "date")
    search_fields = ("member__email", "member__name", "invoice_number")
    inlines = [ReservationCourtTimeSlotInline]
