# apps/course/services/bookings.py
# ------------------------------------------------------------------------------
# Inscripciones a cursos con control de cupo.
# - La fila del curso se bloquea (select_for_update) durante el alta/baja
#   para que dos inscripciones concurrentes no superen max_capacity.
# ------------------------------------------------------------------------------
import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F
from rest_framework.exceptions import NotFound, ValidationError

from apps.common.models import Status
from apps.common.services.invoices import create_invoice_number
from apps.course.models import Booking, Lesson

logger = logging.getLogger(__name__)


def _default_status():
    status = Status.objects.filter(pk=settings.BOOKING_DEFAULT_STATUS_ID).first()
    if status is None:
        raise ValidationError({"statusId": ["Default booking status is not configured."]})
    return status


def create_booking(*, member, lesson_id, payment, invoice, status=None, tax=None, carrier=None):
    """
    Inscribe a `member` en el curso `lesson_id`.

    Reglas:
      - Curso inexistente -> 404.
      - Curso lleno (current_count >= max_capacity) -> 400.
      - Inscripción duplicada (member, lesson) -> 400.
      - En una transacción: lock del curso, alta, current_count + 1.

    Retorna:
      - Booking creado.
    """
    with transaction.atomic():
        lesson = Lesson.objects.select_for_update().filter(pk=lesson_id).first()
        if lesson is None:
            raise NotFound("Lesson not found.")
        if lesson.is_full:
            logger.info("[bookings.create][full] lesson_id=%s member_id=%s", lesson.id, member.id)
            raise ValidationError({"lessonId": ["This lesson is full."]})
        if Booking.objects.filter(member=member, lesson=lesson).exists():
            raise ValidationError({"lessonId": ["You have already booked this lesson."]})

        try:
            with transaction.atomic():
                booking = Booking.objects.create(
                    member=member,
                    lesson=lesson,
                    price=lesson.price,
                    status=status or _default_status(),
                    payment=payment,
                    invoice=invoice,
                    invoice_number=create_invoice_number(),
                    tax=tax or None,
                    carrier=carrier or None,
                )
        except IntegrityError:
            raise ValidationError({"lessonId": ["You have already booked this lesson."]})

        Lesson.objects.filter(pk=lesson.pk).update(current_count=F("current_count") + 1)

    logger.info(
        "[bookings.create] id=%s lesson_id=%s member_id=%s price=%s",
        booking.id, lesson.id, member.id, booking.price,
    )
    return booking


def cancel_booking(booking):
    """Borra la inscripción y libera el cupo (current_count nunca baja de 0)."""
    with transaction.atomic():
        lesson = Lesson.objects.select_for_update().get(pk=booking.lesson_id)
        booking.delete()
        if lesson.current_count > 0:
            Lesson.objects.filter(pk=lesson.pk).update(current_count=F("current_count") - 1)
    logger.info("[bookings.cancel] lesson_id=%s member_id=%s", lesson.id, booking.member_id)
