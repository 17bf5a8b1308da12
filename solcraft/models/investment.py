from sqlalchemy import Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship
from solcraft.core.database import Base
from solcraft.models.tournament import AMOUNT, _utcnow

class TournamentInvestment(Base):
    __tablename__ = "tournament_investments"

    id = Column(Integer, primary_key=True, index=True)
    tournament_id = Column(Integer, ForeignKey("tournaments.id"), index=True, nullable=False)
    investor_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    amount = Column(AMOUNT, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    # Append-only: rows are never updated after insert
    tournament = relationship("Tournament", back_populates="investments")
    investor = relationship("User", back_populates="investments")
