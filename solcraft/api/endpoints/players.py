from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from solcraft.api.dependencies import get_db
from solcraft.schemas import player_schemas
from solcraft.services import player_service

router = APIRouter()

@router.get("/{user_id}/profile", response_model=player_schemas.PlayerProfileRead)
async def get_player_profile_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
):
    return player_service.get_player_profile_or_404(db=db, user_id=user_id)
