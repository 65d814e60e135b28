from celery import shared_task

from campus_events.events.services import reconcile_participant_counts


@shared_task(name="events.reconcile_participant_counts")
def reconcile_participant_counts_task(event_ids: list[int] | None = None) -> int:
    """Recompute stored participant counters from counted registrations."""
    return reconcile_participant_counts(event_ids)
