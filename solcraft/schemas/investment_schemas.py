from pydantic import BaseModel
from typing import List
from datetime import datetime

class InvestmentRead(BaseModel):
    id: int
    tournament_id: int
    investor_id: int
    amount: float
    created_at: datetime

    class Config:
        from_attributes = True

class PortfolioSummary(BaseModel):
    investor_id: int
    investments: List[InvestmentRead]
    total_invested: float
    tournaments_backed: int
