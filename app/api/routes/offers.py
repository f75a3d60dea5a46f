"""
Offer API routes
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.response import success_response, ResponseModel
from app.core.security import CurrentUser, require_roles
from app.models.offer import OfferResponse
from app.models.user import UserRole
from app.schemas.tracking import OfferDecision
from app.services import records

router = APIRouter()


@router.post("/{offer_id}/respond", summary="Respond to offer", response_model=ResponseModel[OfferResponse])
async def respond_to_offer(
    offer_id: str,
    data: OfferDecision,
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(require_roles(UserRole.STUDENT.value)),
):
    """
    Accept or reject an extended offer; the application follows
    """
    offer = await records.respond_to_offer(db, actor, offer_id, data.response, data.reason)
    message = "Offer accepted" if data.response == "ACCEPTED" else "Offer rejected"
    return success_response(data=OfferResponse.model_validate(offer).model_dump(), message=message)
