from django.core.management.base import BaseCommand
from django.utils import timezone
from orders.models import IdempotencyKey


class Command(BaseCommand):
    help = "Delete idempotency keys whose replay window has expired"

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Only report how many keys would be deleted")

    def handle(self, *args, **options):
        expired = IdempotencyKey.objects.filter(expires_at__lt=timezone.now())
        count = expired.count()
        if options["dry_run"]:
            self.stdout.write(f"{count} expired idempotency keys would be deleted.")
            return
        expired.delete()
        self.stdout.write(self.style.SUCCESS(f"Deleted {count} expired idempotency keys."))
