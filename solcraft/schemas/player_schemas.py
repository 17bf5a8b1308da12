from pydantic import BaseModel

from solcraft.models.enums import PlayerRanking

class PlayerProfileRead(BaseModel):
    id: int
    user_id: int
    ranking: PlayerRanking
    tournaments_played: int
    win_rate: float

    class Config:
        from_attributes = True
