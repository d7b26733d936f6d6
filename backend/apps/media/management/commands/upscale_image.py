from django.core.management.base import BaseCommand, CommandError

from apps.api.exceptions import ApplicationError
from apps.media.container import build_upscale_service
from apps.media.staging import InvalidStagedFile, StagingArea
from apps.media.upscaler import ALLOWED_SCALES


class Command(BaseCommand):
    help = "Upscale an image (URL or local path) with the configured Replicate model."

    def add_arguments(self, parser):
        parser.add_argument("source", help="Image URL or path to a local image file")
        parser.add_argument("--scale", type=int, choices=ALLOWED_SCALES, default=2)
        parser.add_argument("--email", default="cli", help="Recorded as the admin in media history")

    def handle(self, *args, **options):
        source = options["source"]
        service = build_upscale_service()
        with StagingArea(prefix="cli") as area:
            try:
                if source.startswith(("http://", "https://")):
                    item = area.stage_url(source)
                else:
                    with open(source, "rb") as handle:
                        item = area.stage_file(source.rsplit("/", 1)[-1], handle)
            except (OSError, InvalidStagedFile) as exc:
                raise CommandError(str(exc)) from exc

            self.stdout.write(
                f"Upscaling {item.name} {options['scale']}x "
                f"(up to {service.policy.max_attempts} status checks)..."
            )
            try:
                result = service.upscale(item, scale=options["scale"], admin_email=options["email"])
            except ApplicationError as exc:
                raise CommandError(f"{exc.code}: {exc.message}") from exc

        self.stdout.write(self.style.SUCCESS(f"{result.name}: {result.output_url}"))
