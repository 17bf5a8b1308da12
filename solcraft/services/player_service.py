from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from solcraft.models import player_profile as player_profile_model

def get_player_profile(db: Session, user_id: int) -> Optional[player_profile_model.PlayerProfile]:
    return db.query(player_profile_model.PlayerProfile).filter(player_profile_model.PlayerProfile.user_id == user_id).first()

def get_player_profile_or_404(db: Session, user_id: int) -> player_profile_model.PlayerProfile:
    profile = get_player_profile(db, user_id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Player profile not found")
    return profile
