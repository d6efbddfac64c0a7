from django.core.management.base import BaseCommand

from accounts.services import OTPService


class Command(BaseCommand):
    help = "Delete one-time codes whose expiry time has passed."

    def handle(self, *args, **options):
        deleted = OTPService.purge_expired()
        self.stdout.write(self.style.SUCCESS(f"Expired OTPs purged. deleted={deleted}"))
