"""
CRUD operations
"""
from .user import user_crud
from .internship import internship_crud
from .application import application_crud
from .tracking import tracking_crud
from .interview import interview_crud
from .offer import offer_crud
from .feedback import feedback_crud
from .notification import notification_crud

__all__ = [
    "user_crud",
    "internship_crud",
    "application_crud",
    "tracking_crud",
    "interview_crud",
    "offer_crud",
    "feedback_crud",
    "notification_crud",
]
