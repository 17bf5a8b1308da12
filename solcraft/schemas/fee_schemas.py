from pydantic import BaseModel
from typing import Optional, Union

class FeeQuoteRequest(BaseModel):
    # Loosely typed: the calculator itself decides what counts as a valid tier or amount
    ranking: str
    target_pool_amount: Optional[Union[str, float]] = None

class FeeQuote(BaseModel):
    ranking: str
    target_pool_amount: float
    initial_fee_amount: float
    initial_fee_pct: float # x100, e.g. 7.0
    guarantee_amount: float
    guarantee_pct: float # x100
