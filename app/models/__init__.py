"""
SQLModel models

SQLModel unifies the ORM tables and their Pydantic schemas
"""
from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse
from .user import User, UserRole, UserCreate, UserResponse
from .internship import Internship, InternshipCreate, InternshipUpdate, InternshipResponse
from .application import (
    Application, ApplicationStatus, ApplicationCreate, ApplicationTransition,
    MentorDecision, ApplicationComplete, ApplicationResponse, ApplicationDetailResponse,
)
from .tracking import TrackingStep, StepStatus, TrackingStepName, TRACKING_STEPS, TrackingStepResponse
from .interview import Interview, InterviewMode, InterviewStatus, InterviewType, InterviewResponse
from .offer import Offer, OfferStatus, OfferType, OfferResponse
from .feedback import Feedback, FeedbackResponse
from .notification import Notification, NotificationEvent, NotificationResponse

__all__ = [
    # Base
    "SQLModelBase",
    "TimestampMixin",
    "IDMixin",
    "TimestampResponse",
    # User
    "User",
    "UserRole",
    "UserCreate",
    "UserResponse",
    # Internship
    "Internship",
    "InternshipCreate",
    "InternshipUpdate",
    "InternshipResponse",
    # Application
    "Application",
    "ApplicationStatus",
    "ApplicationCreate",
    "ApplicationTransition",
    "MentorDecision",
    "ApplicationComplete",
    "ApplicationResponse",
    "ApplicationDetailResponse",
    # Tracking
    "TrackingStep",
    "StepStatus",
    "TrackingStepName",
    "TRACKING_STEPS",
    "TrackingStepResponse",
    # Interview
    "Interview",
    "InterviewMode",
    "InterviewStatus",
    "InterviewType",
    "InterviewResponse",
    # Offer
    "Offer",
    "OfferStatus",
    "OfferType",
    "OfferResponse",
    # Feedback
    "Feedback",
    "FeedbackResponse",
    # Notification
    "Notification",
    "NotificationEvent",
    "NotificationResponse",
]
