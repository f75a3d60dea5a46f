"""
API routes
"""
from fastapi import APIRouter

from .routes import users, internships, applications, tracking, offers, notifications

# Main router
api_router = APIRouter()

api_router.include_router(
    users.router,
    prefix="/users",
    tags=["Users"]
)
api_router.include_router(
    internships.router,
    prefix="/internships",
    tags=["Internships"]
)
api_router.include_router(
    applications.router,
    prefix="/applications",
    tags=["Applications"]
)
api_router.include_router(
    tracking.router,
    prefix="/tracking",
    tags=["Tracking"]
)
api_router.include_router(
    offers.router,
    prefix="/offers",
    tags=["Offers"]
)
api_router.include_router(
    notifications.router,
    prefix="/notifications",
    tags=["Notifications"]
)
