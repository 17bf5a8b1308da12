from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from solcraft.api.dependencies import get_current_user, get_db
from solcraft.models import user as user_model
from solcraft.schemas import investment_schemas
from solcraft.services import investment_service

router = APIRouter()

@router.get("/me", response_model=investment_schemas.PortfolioSummary)
async def read_my_portfolio(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    return investment_service.get_portfolio(db=db, investor_id=current_user.id)
