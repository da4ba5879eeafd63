from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from core.exceptions import ExternalServiceError
from media.services import get_storage_service


class Command(BaseCommand):
    help = "Create the upload bucket if missing and apply its public-read policy"

    def handle(self, *args, **options) -> None:
        storage = get_storage_service()
        try:
            created = storage.ensure_bucket()
        except ExternalServiceError as e:
            raise CommandError(f"Object storage unavailable: {e.message}") from e

        if created:
            self.stdout.write(self.style.SUCCESS(f"Created bucket {storage.bucket_name}"))
        else:
            self.stdout.write(f"Bucket {storage.bucket_name} already exists")
