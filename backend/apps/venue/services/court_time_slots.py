# apps/venue/services/court_time_slots.py
# ------------------------------------------------------------------------------
# Disponibilidad de slots por fecha / rango y seteo masivo de precios.
# ------------------------------------------------------------------------------
from datetime import timedelta
import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from apps.venue.models import Court, CourtTimeSlot, ReservationCourtTimeSlot, TimeSlot

logger = logging.getLogger(__name__)

STATUS_AVAILABLE = "available"
STATUS_RESERVED = "reserved"


def _slots_for(center_id, sport_id):
    return (
        CourtTimeSlot.objects
        .filter(court__center_id=center_id, court__sport_id=sport_id)
        .select_related("court", "time_slot", "time_slot__time_period")
        .order_by("time_slot__start_time", "court__name", "id")
    )


def _reserved_ids(slot_ids, dates, exclude_reservation_id=None):
    qs = ReservationCourtTimeSlot.objects.filter(court_time_slot_id__in=slot_ids, date__in=dates)
    if exclude_reservation_id:
        qs = qs.exclude(reservation_id=exclude_reservation_id)
    return qs.values_list("court_time_slot_id", "date")


def availability_for_date(center_id, sport_id, date, exclude_reservation_id=None):
    """
    Todos los slots de las canchas del centro/deporte, marcando cuáles están
    reservados en `date`. Los links de `exclude_reservation_id` no cuentan
    (edición de una reserva existente).

    Retorna:
      - {"rows": [...], "totalSlots", "availableSlots", "reservedSlots"}
    """
    slots = list(_slots_for(center_id, sport_id))
    reserved = {cts_id for cts_id, _ in _reserved_ids([s.id for s in slots], [date], exclude_reservation_id)}

    rows = []
    for s in slots:
        is_available = s.id not in reserved
        rows.append({
            "id": s.id,
            "courtId": s.court_id,
            "courtName": s.court.name,
            "timeSlotId": s.time_slot_id,
            "timeLabel": s.time_slot.label,
            "startTime": s.time_slot.start_time.strftime("%H:%M"),
            "endTime": s.time_slot.end_time.strftime("%H:%M"),
            "timePeriodName": s.time_slot.time_period.name,
            "price": s.price,
            "date": date.isoformat(),
            "isAvailable": is_available,
            "status": STATUS_AVAILABLE if is_available else STATUS_RESERVED,
        })

    available = sum(1 for r in rows if r["isAvailable"])
    return {
        "rows": rows,
        "totalSlots": len(rows),
        "availableSlots": available,
        "reservedSlots": len(rows) - available,
    }


def availability_range(center_id, sport_id, start_date=None, days=30):
    """
    Cantidad de slots libres por día en [start_date, start_date + days).

    Retorna:
      - list[{"date", "totalSlots", "availableCount"}]
    """
    start_date = start_date or timezone.localdate()
    dates = [start_date + timedelta(days=i) for i in range(days)]
    slot_ids = list(_slots_for(center_id, sport_id).values_list("id", flat=True))

    reserved_per_day = {}
    for _, day in _reserved_ids(slot_ids, dates):
        reserved_per_day[day] = reserved_per_day.get(day, 0) + 1

    return [
        {
            "date": day.isoformat(),
            "totalSlots": len(slot_ids),
            "availableCount": len(slot_ids) - reserved_per_day.get(day, 0),
        }
        for day in dates
    ]


def batch_set_price(*, price, court_ids=None, center_id=None, sport_id=None, location_id=None,
                    time_slot_ids=None, time_period_id=None):
    """
    Upsert del precio en cada par cancha × franja seleccionado.

    Selección:
      - Canchas: court_ids y filtros center/sport/location combinados con AND
        (404 si no hay canchas).
      - Franjas: time_slot_ids y time_period_id combinados; sin filtros, todas
        (404 si no hay).

    Idempotencia:
      - bulk_create(update_conflicts=True) sobre unique (court, time_slot).

    Retorna:
      - int: cantidad de pares afectados.
    """
    courts = Court.objects.all()
    if court_ids:
        courts = courts.filter(id__in=court_ids)
    if center_id:
        courts = courts.filter(center_id=center_id)
    if sport_id:
        courts = courts.filter(sport_id=sport_id)
    if location_id:
        courts = courts.filter(center__location_id=location_id)
    court_pks = list(courts.values_list("id", flat=True))
    if not court_pks:
        raise NotFound("No courts match the selection.")

    slots = TimeSlot.objects.all()
    if time_slot_ids:
        slots = slots.filter(id__in=time_slot_ids)
    if time_period_id:
        slots = slots.filter(time_period_id=time_period_id)
    slot_pks = list(slots.values_list("id", flat=True))
    if not slot_pks:
        raise NotFound("No time slots match the selection.")

    rows = [
        CourtTimeSlot(court_id=c, time_slot_id=t, price=price)
        for c in court_pks
        for t in slot_pks
    ]
    with transaction.atomic():
        CourtTimeSlot.objects.bulk_create(
            rows,
            update_conflicts=True,
            unique_fields=["court", "time_slot"],
            update_fields=["price"],
        )

    logger.info(
        "[court_time_slots.batch_price] price=%s courts=%s slots=%s affected=%s",
        price, len(court_pks), len(slot_pks), len(rows),
    )
    return len(rows)


def generate_court_time_slots(default_price, court_ids=None):
    """
    Crea los pares cancha × franja faltantes con `default_price`.

    Idempotencia:
      - SW: pre-filtra pares existentes.
      - DB: bulk_create(ignore_conflicts=True).

    Retorna:
      - int: cantidad de pares nuevos intentados.
    """
    courts = Court.objects.all()
    if court_ids:
        courts = courts.filter(id__in=court_ids)
    court_pks = list(courts.values_list("id", flat=True))
    slot_pks = list(TimeSlot.objects.values_list("id", flat=True))

    existing = set(
        CourtTimeSlot.objects.filter(court_id__in=court_pks).values_list("court_id", "time_slot_id")
    )
    to_create = [
        CourtTimeSlot(court_id=c, time_slot_id=t, price=default_price)
        for c in court_pks
        for t in slot_pks
        if (c, t) not in existing
    ]
    CourtTimeSlot.objects.bulk_create(to_create, ignore_conflicts=True)
    logger.info(
        "[court_time_slots.generate] courts=%s slots=%s ya_existian=%s a_crear=%s",
        len(court_pks), len(slot_pks), len(existing), len(to_create),
    )
    return len(to_create)
