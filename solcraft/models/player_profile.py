from sqlalchemy import Column, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from solcraft.core.database import Base

class PlayerProfile(Base):
    __tablename__ = "player_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, index=True)
    ranking = Column(String, nullable=False) # one of PlayerRanking's values
    tournaments_played = Column(Integer, default=0, nullable=False)
    win_rate = Column(Float, default=0.0, nullable=False) # fraction, 0.0 - 1.0

    user = relationship("User", back_populates="player_profile")
