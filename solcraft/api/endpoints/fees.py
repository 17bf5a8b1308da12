from fastapi import APIRouter, HTTPException, status

from solcraft.schemas import fee_schemas
from solcraft.services import fee_service

router = APIRouter()

@router.post("/quote", response_model=fee_schemas.FeeQuote)
async def quote_fees(quote_in: fee_schemas.FeeQuoteRequest):
    """
    Previews the initial platform fee and guarantee for a ranking and target pool,
    without creating anything.
    """
    fees = fee_service.calculate_fees(quote_in.ranking, quote_in.target_pool_amount)
    if fees is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A known ranking tier and a positive target pool amount are required",
        )
    return fee_schemas.FeeQuote(
        ranking=fee_service.parse_ranking(quote_in.ranking).value,
        target_pool_amount=fee_service.parse_amount(quote_in.target_pool_amount),
        initial_fee_amount=fees.initial_fee_amount,
        initial_fee_pct=fees.initial_fee_pct,
        guarantee_amount=fees.guarantee_amount,
        guarantee_pct=fees.guarantee_pct,
    )
