"""
Notification hook

Workflow events fan out to the configured channels. Delivery is best
effort: a failing channel is logged and skipped, and never undoes the
status change that triggered it.
"""
from typing import Any, Dict, List, Optional

from fastapi.encoders import jsonable_encoder
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.crud import user_crud
from app.models.notification import Notification, NotificationEvent


class _Blank(dict):
    """format_map source that renders unknown keys as empty strings"""

    def __missing__(self, key):
        return ""


TEMPLATES: Dict[str, tuple] = {
    NotificationEvent.APPLICATION_SUBMITTED.value: (
        "Application Submitted Successfully",
        'Your application for "{internship_title}" has been submitted and is awaiting mentor approval.',
    ),
    NotificationEvent.APPLICATION_APPROVED.value: (
        "Application Approved!",
        'Your mentor has approved your application for "{internship_title}". '
        "It is now forwarded to the employer.",
    ),
    NotificationEvent.APPLICATION_REJECTED.value: (
        "Application Status Update",
        'Your application for "{internship_title}" was not approved by your mentor. {notes}',
    ),
    NotificationEvent.APPLICATION_STATUS_CHANGED.value: (
        "Application Status Update",
        'Your application for "{internship_title}" moved from {from_status} to {to_status}.',
    ),
    NotificationEvent.STEP_COMPLETED.value: (
        "Application Progress",
        'The step "{step}" of your application has been completed.',
    ),
    NotificationEvent.INTERVIEW_SCHEDULED.value: (
        "Interview Scheduled",
        'Your interview for "{internship_title}" has been scheduled for {scheduled_datetime}.',
    ),
    NotificationEvent.INTERVIEW_UPDATED.value: (
        "Interview Update",
        "Your interview status is now {status}.",
    ),
    NotificationEvent.OFFER_RECEIVED.value: (
        "Congratulations! Offer Received",
        'You have received an offer for "{internship_title}". '
        "Please review the offer details and respond by {response_deadline}.",
    ),
    NotificationEvent.OFFER_UPDATED.value: (
        "Offer Update",
        "Your offer status is now {status}.",
    ),
    NotificationEvent.FEEDBACK_RECORDED.value: (
        "Feedback Recorded",
        "Feedback with rating {rating}/5 has been recorded for your internship.",
    ),
}


def render(event_type: str, payload: Dict[str, Any]) -> tuple:
    """Title and message for an event"""
    title, message = TEMPLATES.get(event_type, ("Notification", "{event_type}"))
    values = _Blank(payload)
    values.setdefault("event_type", event_type)
    return title, message.format_map(values).strip()


class NotificationChannel:
    """One delivery channel"""

    name = "base"

    async def send(
        self,
        db: AsyncSession,
        recipient_id: str,
        event_type: str,
        title: str,
        message: str,
        payload: Dict[str, Any],
    ) -> None:
        raise NotImplementedError


class InAppChannel(NotificationChannel):
    """
    Stores the notification in the request session

    The insert runs in a savepoint so a bad row fails here and is rolled
    back on its own, leaving the rest of the request intact.
    """

    name = "in_app"

    async def send(self, db, recipient_id, event_type, title, message, payload):
        async with db.begin_nested():
            db.add(Notification(
                user_id=recipient_id,
                event_type=event_type,
                title=title,
                message=message,
                data=payload,
            ))


class EmailChannel(NotificationChannel):
    """Mock mail transport: logs the message it would send"""

    name = "email"

    def __init__(self, sender: Optional[str] = None):
        self.sender = sender or settings.email_sender

    async def send(self, db, recipient_id, event_type, title, message, payload):
        user = await user_crud.get(db, recipient_id)
        if user is None or not user.email:
            logger.warning(f"[email] no address for user {recipient_id}, skipping {event_type}")
            return
        logger.info(f"[email] {self.sender} -> {user.email} | {title} | {message}")


CHANNELS = {
    InAppChannel.name: InAppChannel,
    EmailChannel.name: EmailChannel,
}


class NotificationHook:
    """Fan-out over the enabled channels"""

    def __init__(self, channels: Optional[List[NotificationChannel]] = None):
        if channels is None:
            channels = [
                CHANNELS[name]() for name in settings.notification_channels if name in CHANNELS
            ]
        self.channels = channels

    async def notify(
        self,
        db: AsyncSession,
        recipient_id: Optional[str],
        event_type: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not recipient_id:
            return

        payload = jsonable_encoder(payload or {})
        title, message = render(event_type, payload)
        logger.info(f"Notify {recipient_id}: {event_type}")

        for channel in self.channels:
            try:
                await channel.send(db, recipient_id, event_type, title, message, payload)
            except Exception:
                logger.exception(f"Notification channel {channel.name} failed for {event_type}")


notification_hook = NotificationHook()
