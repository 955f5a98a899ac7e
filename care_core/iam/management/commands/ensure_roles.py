# care_core/iam/management/commands/ensure_roles.py

from django.core.management.base import BaseCommand

from care_core.iam.services import ensure_role_groups


class Command(BaseCommand):
    help = "Ensure one auth Group exists per role (idempotent)."

    def handle(self, *args, **options):
        created = ensure_role_groups()
        self.stdout.write(self.style.SUCCESS(f"Roles ensured. Newly created: {created}"))
