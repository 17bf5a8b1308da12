import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from solcraft.core.database import Base
from solcraft.models.enums import TournamentStatus

# Amounts are SOL; nine decimals would match lamports but six keep fee arithmetic readable
AMOUNT = Numeric(24, 6)
PERCENTAGE = Numeric(6, 4)


def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc)


class Tournament(Base):
    __tablename__ = "tournaments"

    id = Column(Integer, primary_key=True, index=True)
    creator_user_id = Column(Integer, ForeignKey("users.id"), index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    game_type = Column(String, default="Poker", nullable=False)

    target_pool_amount = Column(AMOUNT, nullable=False)
    current_pool_amount = Column(AMOUNT, default=0, nullable=False)
    tournament_buy_in = Column(AMOUNT, nullable=True)
    external_tournament_url = Column(String, nullable=True)

    # Fixed at creation from the creator's ranking, never recomputed
    player_ranking_at_creation = Column(String, nullable=False)
    initial_platform_fee_pct = Column(PERCENTAGE, nullable=False)
    initial_platform_fee_amount = Column(AMOUNT, nullable=False)
    initial_platform_fee_paid = Column(Boolean, default=False, nullable=False)
    player_guarantee_pct = Column(PERCENTAGE, nullable=False)
    player_guarantee_amount_required = Column(AMOUNT, nullable=False)
    player_guarantee_paid = Column(Boolean, default=False, nullable=False)

    funding_end_time = Column(DateTime(timezone=True), nullable=True)
    # Stored as free text; parsed into TournamentStatus by the status machine
    status = Column(String, default=TournamentStatus.PENDING_INITIAL_PAYMENT.value, nullable=False, index=True)

    winnings_amount = Column(AMOUNT, nullable=True)
    result_notes = Column(Text, nullable=True)
    results_reported_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    creator = relationship("User", back_populates="created_tournaments")
    investments = relationship("TournamentInvestment", back_populates="tournament", order_by="TournamentInvestment.created_at")
