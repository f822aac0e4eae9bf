# apps/venue/services/reservations.py
# ------------------------------------------------------------------------------
# Reserva de slots de cancha por fecha.
# - Chequeo previo de conflictos (software) -> 409 con conflictIds
# - Inserción en una transacción; el UniqueConstraint (court_time_slot, date)
#   es la garantía final ante carreras -> IntegrityError = 409
# ------------------------------------------------------------------------------
import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from apps.common.exceptions import Conflict
from apps.common.models import Status
from apps.common.services.invoices import create_invoice_number
from apps.venue.models import CourtTimeSlot, Reservation, ReservationCourtTimeSlot

logger = logging.getLogger(__name__)


def find_conflicts(court_time_slot_ids, date, exclude_reservation_id=None):
    """ids de CourtTimeSlot ya reservados para `date`."""
    qs = ReservationCourtTimeSlot.objects.filter(court_time_slot_id__in=court_time_slot_ids, date=date)
    if exclude_reservation_id:
        qs = qs.exclude(reservation_id=exclude_reservation_id)
    return sorted(set(qs.values_list("court_time_slot_id", flat=True)))


def _load_slots(court_time_slot_ids):
    ids = list(dict.fromkeys(court_time_slot_ids))
    if not ids:
        raise ValidationError({"courtTimeSlotIds": ["Select at least one time slot."]})
    slots = list(CourtTimeSlot.objects.filter(id__in=ids))
    missing = sorted(set(ids) - {s.id for s in slots})
    if missing:
        raise ValidationError({"courtTimeSlotIds": [f"Unknown court time slots: {missing}"]})
    return slots


def _default_status():
    status = Status.objects.filter(pk=settings.RESERVATION_DEFAULT_STATUS_ID).first()
    if status is None:
        raise ValidationError({"statusId": ["Default reservation status is not configured."]})
    return status


def _raise_if_conflicts(ids, date, exclude_reservation_id=None):
    conflict_ids = find_conflicts(ids, date, exclude_reservation_id)
    if conflict_ids:
        logger.info(
            "[reservations.check][conflict] date=%s conflictIds=%s exclude=%s",
            date, conflict_ids, exclude_reservation_id,
        )
        raise Conflict("Some time slots are already reserved.", conflictIds=conflict_ids)


def create_reservation(*, member, court_time_slot_ids, date, payment, invoice,
                       status=None, tax=None, carrier=None):
    """
    Crea una reserva con uno o más slots para `date`.

    Reglas:
      - ids deduplicados; al menos uno; todos deben existir (400).
      - Si alguno ya está reservado ese día -> 409 con conflictIds.
      - price = suma de precios de los slots.

    Retorna:
      - Reservation creada.
    """
    slots = _load_slots(court_time_slot_ids)
    ids = [s.id for s in slots]
    _raise_if_conflicts(ids, date)

    try:
        with transaction.atomic():
            reservation = Reservation.objects.create(
                member=member,
                date=date,
                price=sum(s.price for s in slots),
                status=status or _default_status(),
                payment=payment,
                invoice=invoice,
                invoice_number=create_invoice_number(),
                tax=tax or None,
                carrier=carrier or None,
            )
            ReservationCourtTimeSlot.objects.bulk_create([
                ReservationCourtTimeSlot(reservation=reservation, court_time_slot=s, date=date)
                for s in slots
            ])
    except IntegrityError as e:
        logger.warning("[reservations.create][integrity] date=%s ids=%s err=%s", date, ids, e)
        raise Conflict("Some time slots are already reserved.", conflictIds=find_conflicts(ids, date))

    logger.info(
        "[reservations.create] id=%s member_id=%s date=%s slots=%s price=%s",
        reservation.id, member.id, date, ids, reservation.price,
    )
    return reservation


def update_reservation(reservation, *, member, court_time_slot_ids, date, payment, invoice,
                       status=None, tax=None, carrier=None):
    """
    Reemplaza slots y datos de la reserva. El chequeo de conflictos ignora la
    propia reserva; el precio se recalcula.
    """
    slots = _load_slots(court_time_slot_ids)
    ids = [s.id for s in slots]
    _raise_if_conflicts(ids, date, exclude_reservation_id=reservation.id)

    try:
        with transaction.atomic():
            reservation.member = member
            reservation.date = date
            reservation.price = sum(s.price for s in slots)
            reservation.payment = payment
            reservation.invoice = invoice
            if status is not None:
                reservation.status = status
            reservation.tax = tax or None
            reservation.carrier = carrier or None
            reservation.save()

            reservation.slot_links.all().delete()
            ReservationCourtTimeSlot.objects.bulk_create([
                ReservationCourtTimeSlot(reservation=reservation, court_time_slot=s, date=date)
                for s in slots
            ])
    except IntegrityError as e:
        logger.warning("[reservations.update][integrity] id=%s err=%s", reservation.id, e)
        raise Conflict(
            "Some time slots are already reserved.",
            conflictIds=find_conflicts(ids, date, exclude_reservation_id=reservation.id),
        )

    logger.info("[reservations.update] id=%s date=%s slots=%s", reservation.id, date, ids)
    return reservation
