"""
Service layer
"""
from .notifications import NotificationHook, InAppChannel, EmailChannel, notification_hook
from .tracking import TrackingLedger, tracking_ledger
from .workflow import ApplicationWorkflow, TRANSITIONS, application_workflow
from . import records

__all__ = [
    # Notifications
    "NotificationHook",
    "InAppChannel",
    "EmailChannel",
    "notification_hook",
    # Tracking ledger
    "TrackingLedger",
    "tracking_ledger",
    # Workflow
    "ApplicationWorkflow",
    "TRANSITIONS",
    "application_workflow",
    # Interviews, offers, feedback
    "records",
]
