# apps/common/management/commands/seed_reference_data.py
from pathlib import Path
import logging

import yaml
from django.apps import apps
from django.core.management.base import BaseCommand, CommandError
from django.core.management.color import no_style
from django.db import connection, transaction

logger = logging.getLogger(__name__)

DEFAULT_FIXTURE = Path(__file__).resolve().parents[2] / "fixtures" / "reference_data.yaml"

# sección YAML -> modelo (orden de carga)
SECTIONS = [
    ("locations", "common.Location"),
    ("sports", "common.Sport"),
    ("statuses", "common.Status"),
    ("payments", "common.Payment"),
    ("deliveries", "common.Delivery"),
    ("invoice_types", "common.InvoiceType"),
    ("time_periods", "venue.TimePeriod"),
    ("levels", "team.Level"),
]


def load_reference_data(path=DEFAULT_FIXTURE):
    """
    Carga/actualiza tablas de referencia desde YAML.

    Idempotencia:
      - update_or_create por id: re-ejecutar no duplica filas.

    Retorna:
      - dict {sección: (creados, actualizados)}
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    summary = {}
    loaded = []
    with transaction.atomic():
        for section, label in SECTIONS:
            model = apps.get_model(label)
            created = updated = 0
            for row in raw.get(section, []):
                row = dict(row)
                pk = row.pop("id")
                _, was_created = model.objects.update_or_create(id=pk, defaults=row)
                created += int(was_created)
                updated += int(not was_created)
            summary[section] = (created, updated)
            loaded.append(model)
            logger.info("[seed.reference] %s creados=%s actualizados=%s", section, created, updated)

        # ids explícitos: re-sincronizar secuencias (Postgres)
        with connection.cursor() as cursor:
            for sql in connection.ops.sequence_reset_sql(no_style(), loaded):
                cursor.execute(sql)
    return summary


class Command(BaseCommand):
    help = "Carga estados, pagos, envíos, facturas, ubicaciones, deportes, franjas y niveles."

    def add_arguments(self, parser):
        parser.add_argument("--file", default=str(DEFAULT_FIXTURE), help="Ruta al YAML de datos de referencia.")

    def handle(self, *args, **opts):
        path = Path(opts["file"])
        if not path.exists():
            raise CommandError(f"No existe el archivo {path}")

        summary = load_reference_data(path)
        for section, (created, updated) in summary.items():
            self.stdout.write(f"{section}: +{created} ~{updated}")
        self.stdout.write(self.style.SUCCESS("[seed] datos de referencia OK"))
