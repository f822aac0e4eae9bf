# apps/members/management/commands/bootstrap_arena.py
from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.db import transaction
import logging

from apps.common.management.commands.seed_reference_data import load_reference_data

logger = logging.getLogger(__name__)
Member = get_user_model()


class Command(BaseCommand):
    help = "Bootstrap Arena: migraciones, datos de referencia y admin inicial."

    def add_arguments(self, parser):
        parser.add_argument("--admin-email", default="admin@arena.local")
        parser.add_argument("--admin-pass", default="admin123")
        parser.add_argument("--admin-name", default="Admin")
        parser.add_argument("--skip-migrate", action="store_true", help="No ejecutar 'migrate' antes del bootstrap.")
        parser.add_argument("--skip-seed", action="store_true", help="No cargar datos de referencia.")

    def handle(self, *args, **opts):
        # 0) Migraciones (fuera de transacciones)
        if not opts["skip_migrate"]:
            self.stdout.write(self.style.WARNING("[bootstrap] Ejecutando 'migrate'..."))
            call_command("migrate", interactive=False, verbosity=1)
            self.stdout.write(self.style.SUCCESS("[bootstrap] migrate OK"))

        # 1) Tablas de referencia
        if not opts["skip_seed"]:
            load_reference_data()
            self.stdout.write(self.style.SUCCESS("[bootstrap] datos de referencia OK"))

        # 2) Admin
        with transaction.atomic():
            email = opts["admin_email"].strip().lower()
            admin = Member.objects.filter(email=email).first()
            if admin is None:
                admin = Member.objects.create_superuser(
                    email=email, password=opts["admin_pass"], name=opts["admin_name"],
                )
                logger.info("[bootstrap] Admin creado id=%s email=%s", admin.id, email)
            elif admin.role != Member.ROLE_ADMIN:
                admin.role = Member.ROLE_ADMIN
                admin.save(update_fields=["role"])
                logger.info("[bootstrap] Admin existente promovido id=%s", admin.id)
            else:
                logger.info("[bootstrap] Admin existente email=%s", email)

        self.stdout.write(self.style.SUCCESS(f"[bootstrap] listo (admin={email})"))
