from pydantic import BaseModel, Field, HttpUrl, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal

from solcraft.models.enums import PlayerRanking, TournamentOutcome, TournamentStatus

class TournamentBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    game_type: str = "Poker"
    target_pool_amount: Decimal = Field(..., gt=0, decimal_places=6, allow_inf_nan=False)
    tournament_buy_in: Optional[Decimal] = Field(None, ge=0, decimal_places=6, allow_inf_nan=False)
    external_tournament_url: Optional[HttpUrl] = None
    funding_end_time: Optional[datetime] = None

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Tournament name is required')
        return v.strip()

class TournamentCreate(TournamentBase):
    # The ranking used for fees is always read from the creator's profile on the server.
    # Clients may echo the ranking they displayed; a mismatch is rejected.
    player_ranking: Optional[PlayerRanking] = None

class TournamentRead(BaseModel):
    id: int
    creator_user_id: int
    name: str
    description: Optional[str] = None
    game_type: str
    target_pool_amount: float
    current_pool_amount: float
    tournament_buy_in: Optional[float] = None
    external_tournament_url: Optional[str] = None
    player_ranking_at_creation: PlayerRanking
    initial_platform_fee_pct: float # fraction, e.g. 0.07
    initial_platform_fee_amount: float
    initial_platform_fee_paid: bool
    player_guarantee_pct: float # fraction
    player_guarantee_amount_required: float
    player_guarantee_paid: bool
    funding_end_time: Optional[datetime] = None
    status: TournamentStatus
    winnings_amount: Optional[float] = None
    result_notes: Optional[str] = None
    results_reported_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True

class TournamentEnvelope(BaseModel):
    """Response body of every mutating tournament endpoint."""
    tournament: TournamentRead

class InitialPaymentRequest(BaseModel):
    tournament_id: int
    amount: Decimal = Field(..., gt=0, decimal_places=6, allow_inf_nan=False)
    transaction_signature: Optional[str] = None # on-chain reference, stored in logs only

class GuaranteePaymentRequest(InitialPaymentRequest):
    pass

class InvestRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, decimal_places=6, allow_inf_nan=False)
    transaction_signature: Optional[str] = None

class ReportResultsRequest(BaseModel):
    tournament_id: int
    outcome: TournamentOutcome
    winnings_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=6, allow_inf_nan=False)
    notes: Optional[str] = None

class StatusUpdateRequest(BaseModel):
    # Plain text on purpose: parsed by the status machine so unknown values get a clear 400
    status: str
