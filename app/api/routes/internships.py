"""
Internship posting API routes
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.response import (
    success_response,
    paged_response,
    ResponseModel,
    PagedResponseModel,
)
from app.core.exceptions import ForbiddenException
from app.core.security import CurrentUser, get_current_user, require_roles
from app.crud import internship_crud, application_crud
from app.models.internship import (
    Internship,
    InternshipCreate,
    InternshipUpdate,
    InternshipResponse,
)
from app.models.user import UserRole

router = APIRouter()

POSTING_ROLES = (UserRole.EMPLOYER.value, UserRole.STAFF.value)


async def _to_response(db: AsyncSession, internship: Internship) -> dict:
    response = InternshipResponse.model_validate(internship)
    response.application_count = await application_crud.count_by_internship(db, internship.id)
    return response.model_dump()


async def _get_owned(db: AsyncSession, internship_id: str, actor: CurrentUser) -> Internship:
    internship = await internship_crud.get_or_raise(db, internship_id)
    if actor.role != UserRole.STAFF.value and internship.posted_by != actor.id:
        raise ForbiddenException("Employers can only manage their own postings")
    return internship


@router.get("", summary="List internships", response_model=PagedResponseModel[InternshipResponse])
async def get_internships(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Page size"),
    keyword: Optional[str] = Query(None, description="Search title and company"),
    posted_by: Optional[str] = Query(None, description="Filter by posting user"),
    include_inactive: bool = Query(False, description="Include deactivated postings (staff and employers)"),
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(get_current_user),
):
    """
    List postings; students only ever see active ones
    """
    skip = (page - 1) * page_size
    active_only = not include_inactive or actor.role not in POSTING_ROLES

    internships = await internship_crud.get_filtered(
        db, active_only=active_only, posted_by=posted_by, keyword=keyword,
        skip=skip, limit=page_size,
    )
    total = await internship_crud.count_filtered(
        db, active_only=active_only, posted_by=posted_by, keyword=keyword,
    )

    items = [await _to_response(db, internship) for internship in internships]
    return paged_response(items, total, page, page_size)


@router.post("", summary="Create internship", response_model=ResponseModel[InternshipResponse])
async def create_internship(
    data: InternshipCreate,
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(require_roles(*POSTING_ROLES)),
):
    values = data.model_dump()
    values["posted_by"] = actor.id
    internship = await internship_crud.create(db, obj_in=values)
    return success_response(
        data=await _to_response(db, internship),
        message="Internship created"
    )


@router.get("/{internship_id}", summary="Get internship", response_model=ResponseModel[InternshipResponse])
async def get_internship(
    internship_id: str,
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(get_current_user),
):
    internship = await internship_crud.get_or_raise(db, internship_id)
    return success_response(data=await _to_response(db, internship))


@router.patch("/{internship_id}", summary="Update internship", response_model=ResponseModel[InternshipResponse])
async def update_internship(
    internship_id: str,
    data: InternshipUpdate,
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(require_roles(*POSTING_ROLES)),
):
    internship = await _get_owned(db, internship_id, actor)
    internship = await internship_crud.update(db, db_obj=internship, obj_in=data)
    return success_response(
        data=await _to_response(db, internship),
        message="Internship updated"
    )


@router.delete("/{internship_id}", summary="Deactivate internship", response_model=ResponseModel[InternshipResponse])
async def delete_internship(
    internship_id: str,
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(require_roles(*POSTING_ROLES)),
):
    """
    Postings are deactivated rather than deleted so their applications stay intact
    """
    internship = await _get_owned(db, internship_id, actor)
    internship = await internship_crud.deactivate(db, db_obj=internship)
    return success_response(
        data=await _to_response(db, internship),
        message="Internship deactivated"
    )
