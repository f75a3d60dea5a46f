"""
User directory API routes
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.response import success_response, ResponseModel
from app.core.exceptions import NotFoundException, ConflictException
from app.core.security import CurrentUser, get_current_user, require_roles
from app.crud import user_crud
from app.models.user import UserCreate, UserResponse, UserRole

router = APIRouter()


@router.post("", summary="Create user", response_model=ResponseModel[UserResponse])
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(require_roles(UserRole.STAFF.value)),
):
    """
    Register a student, mentor, employer or staff member
    """
    if await user_crud.get_by_username(db, data.username):
        raise ConflictException(f"Username already taken: {data.username}")

    user = await user_crud.create(db, obj_in=data.model_dump())
    return success_response(
        data=UserResponse.model_validate(user).model_dump(),
        message="User created"
    )


@router.get("/me", summary="Current user profile", response_model=ResponseModel[UserResponse])
async def get_me(
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(get_current_user),
):
    user = await user_crud.get(db, actor.id)
    if not user:
        raise NotFoundException("User profile not found")
    return success_response(data=UserResponse.model_validate(user).model_dump())


@router.get("/{user_id}", summary="Get user", response_model=ResponseModel[UserResponse])
async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(require_roles(UserRole.STAFF.value, UserRole.MENTOR.value)),
):
    user = await user_crud.get_or_raise(db, user_id)
    return success_response(data=UserResponse.model_validate(user).model_dump())
