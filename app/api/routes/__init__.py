"""
API route modules
"""
from . import users, internships, applications, tracking, offers, notifications

__all__ = [
    "users",
    "internships",
    "applications",
    "tracking",
    "offers",
    "notifications",
]
