"""Asynchronous tasks of the core module."""

from typing import Dict, Optional

import structlog
from celery import shared_task
from django.conf import settings

from modules.core.models import EventStatus, OutboxEvent
from shared.domain.events import event_class_for
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


@shared_task(name="core.relay_outbox_events")
def relay_outbox_events(batch_size: Optional[int] = None) -> Dict[str, int]:
    """Publish pending outbox events on the in-process event bus, oldest first.

    Each event is marked PUBLISHED or FAILED on its own, so one bad row does
    not block the rest of the batch.
    """
    limit = batch_size or settings.OUTBOX_RELAY_BATCH_SIZE
    pending = list(
        OutboxEvent.objects.filter(status=EventStatus.PENDING).order_by(
            "created_at", "id"
        )[:limit]
    )

    published = failed = 0
    for outbox_event in pending:
        log = logger.bind(
            outbox_id=str(outbox_event.id),
            event_type=outbox_event.event_type,
            aggregate_id=outbox_event.aggregate_id,
        )
        try:
            event_class = event_class_for(outbox_event.event_type)
            event_bus.publish(event_class.from_payload(outbox_event.payload))
        except Exception as exc:
            log.exception("outbox.relay_failed")
            outbox_event.mark_as_failed(str(exc))
            failed += 1
            continue
        outbox_event.mark_as_published()
        published += 1

    if pending:
        logger.info("outbox.relayed", published=published, failed=failed)
    return {"published": published, "failed": failed}
