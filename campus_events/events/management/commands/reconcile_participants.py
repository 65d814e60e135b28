from __future__ import annotations

from django.core.management.base import BaseCommand
from django.core.management.base import CommandParser

from campus_events.events.services import reconcile_participant_counts


class Command(BaseCommand):
    help = "Recompute Event.current_participants from confirmed/attended registrations"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--event",
            dest="event_ids",
            action="append",
            type=int,
            help="Limit to this event id (repeatable). Defaults to every event.",
        )

    def handle(self, *args, **options) -> None:
        corrected = reconcile_participant_counts(options.get("event_ids"))
        self.stdout.write(
            self.style.SUCCESS(f"Corrected {corrected} participant counter(s)."),
        )
