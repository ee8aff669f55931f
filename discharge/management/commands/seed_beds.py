# discharge/management/commands/seed_beds.py
from django.core.management.base import BaseCommand
from django.db import transaction

from discharge.models import Bed

WARDS = ("A", "B", "C")
BEDS_PER_WARD = 5


class Command(BaseCommand):
    help = "Create the default ward beds when the bed table is empty (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--database", default="default")

    def handle(self, *args, **opts):
        using = opts["database"]
        if Bed.objects.using(using).exists():
            self.stdout.write("beds already present, nothing to do")
            return
        with transaction.atomic(using=using):
            Bed.objects.using(using).bulk_create([
                Bed(ward=ward, bed_number=f"{ward}-{i}", status=Bed.STATUS_AVAILABLE)
                for ward in WARDS
                for i in range(1, BEDS_PER_WARD + 1)
            ])
        self.stdout.write(self.style.SUCCESS(f"Created {len(WARDS) * BEDS_PER_WARD} beds."))
