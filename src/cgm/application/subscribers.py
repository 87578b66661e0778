"""
CGM event subscribers
Post-commit reactions to CgmLink lifecycle events
"""
from __future__ import annotations

from shared.infrastructure.messaging.event_bus import EventDispatcher
from shared.infrastructure.observability.logger import get_logger
from cgm.application.ports import ReadingPurger
from cgm.domain.events import CgmUnlinked

logger = get_logger(__name__)


class PurgeReadingsOnUnlink:
    """Delete the user's stored readings when an unlink asked for it."""

    def __init__(self, purger: ReadingPurger) -> None:
        self.purger = purger

    async def __call__(self, event: CgmUnlinked) -> None:
        if not event.data_purged:
            return
        await self.purger.purge_readings(event.user_id)
        logger.info(
            "CGM readings purged",
            extra={"user_id": str(event.user_id), "link_id": str(event.link_id)},
        )


def register_cgm_subscribers(dispatcher: EventDispatcher, purger: ReadingPurger) -> None:
    dispatcher.subscribe(CgmUnlinked, PurgeReadingsOnUnlink(purger))
