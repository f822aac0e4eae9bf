# apps/venue/management/commands/generate_court_time_slots.py
from django.core.management.base import BaseCommand, CommandError

from apps.venue.services.court_time_slots import generate_court_time_slots


class Command(BaseCommand):
    help = "Crea un CourtTimeSlot por cada cancha × franja con un precio por defecto."

    def add_arguments(self, parser):
        parser.add_argument("--price", type=int, default=500, help="Precio por defecto de cada slot.")
        parser.add_argument("--court", type=int, action="append", dest="courts",
                            help="Limitar a estas canchas (repetible).")

    def handle(self, *args, **opts):
        if opts["price"] <= 0:
            raise CommandError("--price debe ser positivo")

        created = generate_court_time_slots(opts["price"], court_ids=opts.get("courts"))
        self.stdout.write(self.style.SUCCESS(f"[court_time_slots] creados={created}"))
