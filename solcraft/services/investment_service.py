from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from solcraft.models import investment as investment_model
from solcraft.schemas import investment_schemas
from solcraft.services import tournament_service

def list_investments(db: Session, tournament_id: int) -> List[investment_model.TournamentInvestment]:
    # Ensure tournament exists
    tournament_service.get_tournament_or_404(db, tournament_id)
    return db.query(investment_model.TournamentInvestment)\
        .filter(investment_model.TournamentInvestment.tournament_id == tournament_id)\
        .order_by(investment_model.TournamentInvestment.created_at.asc(), investment_model.TournamentInvestment.id.asc())\
        .all()

def get_user_investments_in_tournament(db: Session, tournament_id: int, user_id: int) -> List[investment_model.TournamentInvestment]:
    tournament_service.get_tournament_or_404(db, tournament_id)
    return db.query(investment_model.TournamentInvestment).filter(
        investment_model.TournamentInvestment.tournament_id == tournament_id,
        investment_model.TournamentInvestment.investor_id == user_id
    ).order_by(investment_model.TournamentInvestment.id.asc()).all()

def get_portfolio(db: Session, investor_id: int) -> investment_schemas.PortfolioSummary:
    investments = db.query(investment_model.TournamentInvestment)\
        .filter(investment_model.TournamentInvestment.investor_id == investor_id)\
        .order_by(investment_model.TournamentInvestment.created_at.desc(), investment_model.TournamentInvestment.id.desc())\
        .all()

    total = sum((Decimal(str(inv.amount)) for inv in investments), Decimal("0"))
    return investment_schemas.PortfolioSummary(
        investor_id=investor_id,
        investments=[investment_schemas.InvestmentRead.model_validate(inv) for inv in investments],
        total_invested=total,
        tournaments_backed=len({inv.tournament_id for inv in investments}),
    )
