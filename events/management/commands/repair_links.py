import logging
import typing as t

from django.core.management.base import BaseCommand, CommandError

from events.domain.errors import DomainError
from events.services import get_link_coordinator

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Find and repair Event/Speaker links recorded on only one side.

    Asymmetric links are left behind when an assign or unassign stops between
    its two writes, or when a retraction leg fails. Re-running is safe: every
    repair is an idempotent link update.
    """

    help = "Report and repair one-sided Event/Speaker links."

    def add_arguments(self, parser) -> None:
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Only report asymmetric links without writing.",
        )

    def handle(self, *args: t.Any, **options: t.Any) -> None:
        coordinator = get_link_coordinator()
        try:
            links = coordinator.find_asymmetric_links()
            for link in links:
                self.stdout.write(
                    f"event={link.event_id} speaker={link.speaker_id} missing={link.missing_side.value}"
                )
            if options["dry_run"]:
                self.stdout.write(f"{len(links)} asymmetric link(s) found")
                return

            outcomes = coordinator.repair_links()
        except DomainError as exc:
            raise CommandError(str(exc)) from exc

        failed = [outcome for outcome in outcomes if not outcome.succeeded]
        logger.info("Repaired %d link(s), %d failed", len(outcomes) - len(failed), len(failed))
        self.stdout.write(self.style.SUCCESS(f"Repaired {len(outcomes) - len(failed)} link(s)"))
        if failed:
            raise CommandError(f"{len(failed)} link(s) could not be repaired; run again")
