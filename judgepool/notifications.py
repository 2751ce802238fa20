import logging

from judgepool import schemas

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Hands judging events to whatever delivers alerts and digests.

    Delivery lives outside this service. The default implementation only logs, deployments
    replace `dispatcher` with one that forwards to their queue or email system.
    """

    async def send(self, event: schemas.NotificationEvent) -> None:
        logger.info(
            "Judging event %s in group %s for submission %s (mentions: %s)",
            event.type.value,
            event.group_id,
            event.submission_id,
            ", ".join(event.mentions) or "none",
        )

    async def dispatch(self, event: schemas.NotificationEvent) -> None:
        # Fire-and-forget: a failing delivery never fails the request that produced the event
        try:
            await self.send(event)
        except Exception:
            logger.exception("Failed to dispatch %s event", event.type.value)


dispatcher = NotificationDispatcher()


def set_dispatcher(new_dispatcher: NotificationDispatcher) -> None:
    global dispatcher
    dispatcher = new_dispatcher


def get_dispatcher() -> NotificationDispatcher:
    return dispatcher
