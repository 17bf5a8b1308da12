from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session

from solcraft.api.dependencies import get_current_user, get_db
from solcraft.models import user as user_model
from solcraft.schemas import investment_schemas, tournament_schemas
from solcraft.services import investment_service, status_machine, tournament_service

router = APIRouter()

@router.get("", response_model=List[tournament_schemas.TournamentRead], summary="List Tournaments")
async def list_tournaments_endpoint(
    status_filter: Optional[str] = Query(None, alias="status", description="Only tournaments in this status"),
    creator_id: Optional[int] = Query(None, description="Only tournaments created by this user"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """
    Lists tournaments, newest first. Publicly accessible.
    """
    parsed_status = None
    if status_filter is not None:
        try:
            parsed_status = status_machine.parse_status(status_filter)
        except status_machine.UnknownStatusError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return tournament_service.list_tournaments(
        db=db, status_filter=parsed_status, creator_id=creator_id, skip=skip, limit=limit
    )

@router.get("/open", response_model=List[tournament_schemas.TournamentRead], summary="List Tournaments Open For Funding")
async def list_open_tournaments_endpoint(db: Session = Depends(get_db)):
    return tournament_service.get_open_tournaments(db=db)

@router.get("/mine", response_model=List[tournament_schemas.TournamentRead], summary="List Tournaments Created By Current User")
async def list_my_tournaments_endpoint(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    return tournament_service.get_tournaments_by_creator(db=db, user_id=current_user.id)

@router.post("", response_model=tournament_schemas.TournamentEnvelope, status_code=status.HTTP_201_CREATED, summary="Create Tournament")
async def create_tournament_endpoint(
    tournament_in: tournament_schemas.TournamentCreate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    """
    Creates a tournament in `pending_initial_payment`.

    The initial platform fee and the guarantee are computed from the creator's
    current ranking and stored on the tournament; they never change afterwards.
    """
    tournament = tournament_service.create_tournament(db=db, tournament=tournament_in, creator_id=current_user.id)
    return {"tournament": tournament}

@router.post("/pay_initial_fee", response_model=tournament_schemas.TournamentEnvelope, summary="Pay Initial Platform Fee")
async def pay_initial_fee_endpoint(
    payment: tournament_schemas.InitialPaymentRequest,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    tournament = tournament_service.pay_initial_fee(db=db, payment=payment, user_id=current_user.id)
    return {"tournament": tournament}

@router.post("/pay_guarantee", response_model=tournament_schemas.TournamentEnvelope, summary="Deposit Guarantee")
async def pay_guarantee_endpoint(
    payment: tournament_schemas.GuaranteePaymentRequest,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    tournament = tournament_service.pay_guarantee(db=db, payment=payment, user_id=current_user.id)
    return {"tournament": tournament}

@router.post("/report_results", response_model=tournament_schemas.TournamentEnvelope, summary="Report Tournament Results")
async def report_results_endpoint(
    report: tournament_schemas.ReportResultsRequest,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    tournament = tournament_service.report_results(db=db, report=report, user_id=current_user.id)
    return {"tournament": tournament}

@router.get("/{tournament_id}", response_model=tournament_schemas.TournamentRead, summary="Get Tournament")
async def get_tournament_endpoint(
    tournament_id: int = Path(..., description="The ID of the tournament to retrieve."),
    db: Session = Depends(get_db),
):
    return tournament_service.get_tournament_or_404(db=db, tournament_id=tournament_id)

@router.post("/{tournament_id}/invest", response_model=tournament_schemas.TournamentEnvelope, summary="Invest In Tournament")
async def invest_endpoint(
    investment: tournament_schemas.InvestRequest,
    tournament_id: int = Path(..., description="The ID of the tournament to invest in."),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    """
    Adds to the pool of a `funding_open` tournament. Reaching the target pool
    exactly closes funding (`funding_complete`); overfilling is rejected.
    """
    tournament = tournament_service.invest_in_tournament(
        db=db, tournament_id=tournament_id, investor_id=current_user.id, amount=investment.amount
    )
    return {"tournament": tournament}

@router.patch("/{tournament_id}/status", response_model=tournament_schemas.TournamentEnvelope, summary="Advance Tournament Status")
async def update_tournament_status_endpoint(
    status_data: tournament_schemas.StatusUpdateRequest,
    tournament_id: int = Path(..., description="The ID of the tournament whose status is to be updated."),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    """
    Settlement and early-exit transitions. Admins may move a funded tournament through
    `funds_transferred_to_player`, `in_progress` and `awaiting_results`, or mark funding
    as failed; the creator may cancel their own tournament.
    """
    tournament = tournament_service.advance_status(
        db=db, tournament_id=tournament_id, new_status=status_data.status, current_user=current_user
    )
    return {"tournament": tournament}

@router.get("/{tournament_id}/investments", response_model=List[investment_schemas.InvestmentRead], summary="List Tournament Investments")
async def list_investments_endpoint(
    tournament_id: int = Path(..., description="The ID of the tournament."),
    db: Session = Depends(get_db),
):
    return investment_service.list_investments(db=db, tournament_id=tournament_id)

@router.get("/{tournament_id}/investments/me", response_model=List[investment_schemas.InvestmentRead], summary="List Current User's Investments In Tournament")
async def list_my_investments_endpoint(
    tournament_id: int = Path(..., description="The ID of the tournament."),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    return investment_service.get_user_investments_in_tournament(db=db, tournament_id=tournament_id, user_id=current_user.id)
