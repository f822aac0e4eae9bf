# apps/common/services/invoices.py

import logging
import random
import string

from django.apps import apps

from apps.common.exceptions import ServerError

logger = logging.getLogger(__name__)

# Modelos que comparten el espacio de números de factura
INVOICE_MODELS = ("shop.Order", "venue.Reservation", "course.Booking")


def _candidate():
    letters = "".join(random.choices(string.ascii_uppercase, k=2))
    digits = "".join(random.choices(string.digits, k=8))
    return f"{letters}{digits}"


def create_invoice_number(max_attempts=20):
    """
    Genera un número de factura AA12345678 único entre órdenes, reservas y
    inscripciones a cursos.

    Retorna:
      - str con el número libre.
    """
    models = [apps.get_model(label) for label in INVOICE_MODELS]
    for attempt in range(1, max_attempts + 1):
        number = _candidate()
        if not any(m.objects.filter(invoice_number=number).exists() for m in models):
            return number
        logger.info("[invoices.create][retry] colisión number=%s intento=%s", number, attempt)

    logger.error("[invoices.create][fail] sin número libre tras %s intentos", max_attempts)
    raise ServerError("Could not generate a unique invoice number.")
