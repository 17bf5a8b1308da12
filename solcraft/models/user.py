from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import relationship
from solcraft.core.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String)
    email = Column(String, unique=True, index=True)
    wallet_address = Column(String, nullable=True, unique=True)
    is_admin = Column(Boolean, default=False, nullable=False) # settlement signals are admin-only

    player_profile = relationship("PlayerProfile", back_populates="user", uselist=False)
    created_tournaments = relationship("Tournament", back_populates="creator")
    investments = relationship("TournamentInvestment", back_populates="investor")
