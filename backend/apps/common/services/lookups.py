# apps/common/services/lookups.py
# ------------------------------------------------------------------------------
# Listas livianas (id + nombre) para selects del frontend: /api/common/<name>
# Cada builder recibe los query params y devuelve un queryset de .values().
# ------------------------------------------------------------------------------
from django.apps import apps
from django.db.models import F

from apps.common.params import int_param


def _model(label):
    return apps.get_model(label)


def _sport(params):
    qs = _model("common.Sport").objects.all()
    center_id = int_param(params, "centerId")
    if center_id:
        qs = qs.filter(center_sports__center_id=center_id)
    return qs.values("id", "name", iconKey=F("icon_key"))


def _member(params):
    return _model("members.Member").objects.values("id", "name", "email")


def _simple(label):
    def builder(params):
        return _model(label).objects.values("id", "name")
    return builder


def _center(params):
    qs = _model("venue.Center").objects.all()
    location_id = int_param(params, "locationId")
    if location_id:
        qs = qs.filter(location_id=location_id)
    return qs.values("id", "name", locationId=F("location_id"))


def _court(params):
    qs = _model("venue.Court").objects.all()
    center_id = int_param(params, "centerId")
    sport_id = int_param(params, "sportId")
    if center_id:
        qs = qs.filter(center_id=center_id)
    if sport_id:
        qs = qs.filter(sport_id=sport_id)
    return qs.values("id", "name", centerId=F("center_id"), sportId=F("sport_id"))


def _time_slot(params):
    qs = _model("venue.TimeSlot").objects.all()
    time_period_id = int_param(params, "timePeriodId")
    if time_period_id:
        qs = qs.filter(time_period_id=time_period_id)
    return qs.values("id", "label", timePeriodId=F("time_period_id"))


def _court_time_slot(params):
    qs = _model("venue.CourtTimeSlot").objects.all()
    court_id = int_param(params, "courtId")
    time_slot_id = int_param(params, "timeSlotId")
    if court_id:
        qs = qs.filter(court_id=court_id)
    if time_slot_id:
        qs = qs.filter(time_slot_id=time_slot_id)
    return qs.values(
        "id", "price",
        courtId=F("court_id"), timeSlotId=F("time_slot_id"),
        courtName=F("court__name"), timeLabel=F("time_slot__label"),
    )


def _coach(params):
    return _model("course.Coach").objects.values("id", name=F("member__name"))


LOOKUPS = {
    "sport": _sport,
    "member": _member,
    "status": _simple("common.Status"),
    "delivery": _simple("common.Delivery"),
    "payment": _simple("common.Payment"),
    "invoice": _simple("common.InvoiceType"),
    "location": _simple("common.Location"),
    "center": _center,
    "court": _court,
    "time-period": _simple("venue.TimePeriod"),
    "time-slot": _time_slot,
    "court-time-slot": _court_time_slot,
    "brand": _simple("shop.Brand"),
    "coach": _coach,
}


def lookup_rows(name, params):
    """Retorna list[dict] ordenada por id, o None si `name` no existe."""
    builder = LOOKUPS.get(name)
    if builder is None:
        return None
    return list(builder(params).order_by("id"))
