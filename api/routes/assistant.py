"""Cooking assistant routes: one recipe at a time for the current fridge"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from domain.models import get_db_session, AppUser
from domain.schemas.matching_schemas import AssistantNextRequest, AssistantNextResponse
from services.assistant_service import AssistantService
from api.dependencies import get_current_user
from api.responses import MessageResponse

router = APIRouter(prefix="/assistant", tags=["Assistant"])
logger = logging.getLogger("chefos.api.assistant")


@router.post("/next", response_model=AssistantNextResponse)
def next_recipe(
    payload: AssistantNextRequest = AssistantNextRequest(),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    """
    Best recipe the caller has not seen yet.

    ``code`` is OK, NO_RECIPES_FOR_FRIDGE or ALL_RECIPES_VIEWED; the last two
    come with ``recipe: null`` and a 200 status.
    """
    return AssistantService.next_recipe(db, user.user_id, payload.exclude_recipe_ids)


@router.post("/reset", response_model=MessageResponse)
def reset_viewed(
    user: AppUser = Depends(get_current_user), db: Session = Depends(get_db_session)
):
    cleared = AssistantService.reset_viewed(db, user.user_id)
    return MessageResponse(message="Viewed recipes cleared", data={"cleared": cleared})
