"""
Notification API routes
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.response import (
    success_response,
    paged_response,
    ResponseModel,
    PagedResponseModel,
)
from app.core.exceptions import NotFoundException
from app.core.security import CurrentUser, get_current_user
from app.crud import notification_crud
from app.models.notification import NotificationResponse

router = APIRouter()


@router.get("", summary="List my notifications", response_model=PagedResponseModel[NotificationResponse])
async def get_notifications(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Page size"),
    unread_only: bool = Query(False, description="Only unread notifications"),
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(get_current_user),
):
    skip = (page - 1) * page_size
    notifications = await notification_crud.get_by_user(
        db, actor.id, unread_only=unread_only, skip=skip, limit=page_size
    )
    total = await notification_crud.count_by_user(db, actor.id, unread_only=unread_only)

    items = [NotificationResponse.model_validate(n).model_dump() for n in notifications]
    return paged_response(items, total, page, page_size)


@router.put("/{notification_id}/read", summary="Mark notification read", response_model=ResponseModel[NotificationResponse])
async def mark_notification_read(
    notification_id: str,
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(get_current_user),
):
    notification = await notification_crud.get(db, notification_id)
    # Other users' notifications are reported as missing
    if not notification or notification.user_id != actor.id:
        raise NotFoundException(f"Notification not found: {notification_id}")

    notification = await notification_crud.mark_read(db, db_obj=notification)
    return success_response(data=NotificationResponse.model_validate(notification).model_dump())
