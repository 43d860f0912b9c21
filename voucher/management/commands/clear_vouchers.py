from django.core.management.base import BaseCommand

from voucher.models import Voucher

EXAMPLE_CODES = ["WELCOME10", "SAVE5", "FREESHIP"]


class Command(BaseCommand):
    help = "Delete vouchers. With --examples-only, only the seeded sample codes are removed."

    def add_arguments(self, parser):
        parser.add_argument("--examples-only", action="store_true")

    def handle(self, *args, **opts):
        qs = Voucher.objects.all()
        if opts["examples_only"]:
            qs = qs.filter(code__in=EXAMPLE_CODES)
        deleted, _ = qs.delete()
        self.stdout.write(self.style.SUCCESS(f"Deleted {deleted} voucher(s)."))
