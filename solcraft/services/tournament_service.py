import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from solcraft.core.logging import get_logger
from solcraft.models import investment as investment_model
from solcraft.models import tournament as tournament_model
from solcraft.models import user as user_model
from solcraft.models.enums import TournamentOutcome, TournamentStatus
from solcraft.schemas import tournament_schemas
from solcraft.services import fee_service, player_service, status_machine
from solcraft.services.status_machine import PaymentStage

logger = get_logger(__name__)

# Matches the scale of the Numeric amount columns
AMOUNT_QUANTUM = Decimal("0.000001")

_STAGE_REQUIRED_AMOUNT = {
    PaymentStage.INITIAL_FEE: "initial_platform_fee_amount",
    PaymentStage.GUARANTEE: "player_guarantee_amount_required",
}

_STAGE_LABEL = {
    PaymentStage.INITIAL_FEE: "initial platform fee",
    PaymentStage.GUARANTEE: "guarantee",
}


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)

def _as_utc(value: datetime.datetime) -> datetime.datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value

def _quantize(amount) -> Decimal:
    return Decimal(str(amount)).quantize(AMOUNT_QUANTUM)

def _sol_text(amount: Decimal) -> str:
    return format(amount.normalize(), "f")


def create_tournament(db: Session, tournament: tournament_schemas.TournamentCreate, creator_id: int) -> tournament_model.Tournament:
    profile = player_service.get_player_profile(db, creator_id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Complete your player profile before creating a tournament")

    ranking = fee_service.parse_ranking(profile.ranking)
    if ranking is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown ranking tier: {profile.ranking}")
    if tournament.player_ranking is not None and tournament.player_ranking != ranking:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Ranking mismatch: your current ranking is {ranking.value}",
        )

    if tournament.funding_end_time is not None and _as_utc(tournament.funding_end_time) <= _utcnow():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Funding end time must be in the future")

    fees = fee_service.calculate_fees(ranking, tournament.target_pool_amount)
    if fees is None: # target_pool_amount is already validated as positive by the schema
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid target pool amount")
    initial_fee_amount = _quantize(fees.initial_fee_amount)
    guarantee_amount = _quantize(fees.guarantee_amount)
    if initial_fee_amount <= 0 or guarantee_amount <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Target pool amount is too small: the initial fee and guarantee must be at least 0.000001 SOL",
        )

    db_tournament = tournament_model.Tournament(
        creator_user_id=creator_id,
        name=tournament.name,
        description=tournament.description,
        game_type=tournament.game_type,
        target_pool_amount=tournament.target_pool_amount,
        current_pool_amount=Decimal("0"),
        tournament_buy_in=tournament.tournament_buy_in,
        external_tournament_url=str(tournament.external_tournament_url) if tournament.external_tournament_url else None,
        player_ranking_at_creation=ranking.value,
        initial_platform_fee_pct=fees.initial_fee_fraction,
        initial_platform_fee_amount=initial_fee_amount,
        initial_platform_fee_paid=False,
        player_guarantee_pct=fees.guarantee_fraction,
        player_guarantee_amount_required=guarantee_amount,
        player_guarantee_paid=False,
        funding_end_time=tournament.funding_end_time,
        status=TournamentStatus.PENDING_INITIAL_PAYMENT.value,
    )
    db.add(db_tournament)
    db.commit()
    db.refresh(db_tournament)
    logger.info(
        "tournament_created",
        tournament_id=db_tournament.id,
        creator_id=creator_id,
        ranking=ranking.value,
        target_pool_amount=str(tournament.target_pool_amount),
    )
    return db_tournament

def get_tournament(db: Session, tournament_id: int) -> Optional[tournament_model.Tournament]:
    return db.query(tournament_model.Tournament).filter(tournament_model.Tournament.id == tournament_id).first()

def get_tournament_or_404(db: Session, tournament_id: int) -> tournament_model.Tournament:
    tournament = get_tournament(db, tournament_id)
    if not tournament:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tournament not found")
    return tournament

def list_tournaments(
    db: Session,
    status_filter: Optional[TournamentStatus] = None,
    creator_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[tournament_model.Tournament]:
    query = db.query(tournament_model.Tournament)
    if status_filter is not None:
        query = query.filter(tournament_model.Tournament.status == status_filter.value)
    if creator_id is not None:
        query = query.filter(tournament_model.Tournament.creator_user_id == creator_id)
    return query\
        .order_by(tournament_model.Tournament.created_at.desc(), tournament_model.Tournament.id.desc())\
        .offset(skip)\
        .limit(limit)\
        .all()

def get_open_tournaments(db: Session) -> List[tournament_model.Tournament]:
    return list_tournaments(db, status_filter=TournamentStatus.FUNDING_OPEN)

def get_tournaments_by_creator(db: Session, user_id: int) -> List[tournament_model.Tournament]:
    return list_tournaments(db, creator_id=user_id)


def _get_tournament_for_update(db: Session, tournament_id: int) -> tournament_model.Tournament:
    # Row lock where the backend supports it (no-op on SQLite)
    tournament = db.query(tournament_model.Tournament)\
        .filter(tournament_model.Tournament.id == tournament_id)\
        .with_for_update()\
        .first()
    if not tournament:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tournament not found")
    return tournament

def _require_creator(tournament: tournament_model.Tournament, user_id: int, action: str):
    if tournament.creator_user_id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Only the tournament creator can {action}")

def _move_to(tournament: tournament_model.Tournament, target: TournamentStatus) -> TournamentStatus:
    previous = status_machine.parse_status(tournament.status)
    try:
        status_machine.ensure_transition(previous, target)
    except status_machine.InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    tournament.status = target.value
    logger.info("tournament_status_changed", tournament_id=tournament.id, previous=previous.value, current=target.value)
    return previous


def _pay_stage(db: Session, stage: PaymentStage, tournament_id: int, amount: Decimal, user_id: int) -> tournament_model.Tournament:
    label = _STAGE_LABEL[stage]
    tournament = _get_tournament_for_update(db, tournament_id)
    _require_creator(tournament, user_id, f"pay the {label}")

    if getattr(tournament, stage.paid_flag):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"The {label} has already been paid")

    current = status_machine.parse_status(tournament.status)
    if current != stage.pending_status:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Tournament is not awaiting the {label} (status: {current.value})",
        )

    required = _quantize(getattr(tournament, _STAGE_REQUIRED_AMOUNT[stage]))
    if _quantize(amount) != required:
        logger.warning("payment_amount_mismatch", tournament_id=tournament_id, stage=stage.value, amount=str(amount), required=str(required))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Payment must equal the required {label} of {_sol_text(required)} SOL",
        )

    setattr(tournament, stage.paid_flag, True)
    _move_to(tournament, stage.next_status)
    db.commit()
    db.refresh(tournament)
    logger.info("tournament_payment_recorded", tournament_id=tournament_id, stage=stage.value, amount=str(required))
    return tournament

def pay_initial_fee(db: Session, payment: tournament_schemas.InitialPaymentRequest, user_id: int) -> tournament_model.Tournament:
    return _pay_stage(db, PaymentStage.INITIAL_FEE, payment.tournament_id, payment.amount, user_id)

def pay_guarantee(db: Session, payment: tournament_schemas.GuaranteePaymentRequest, user_id: int) -> tournament_model.Tournament:
    return _pay_stage(db, PaymentStage.GUARANTEE, payment.tournament_id, payment.amount, user_id)


def invest_in_tournament(db: Session, tournament_id: int, investor_id: int, amount: Decimal) -> tournament_model.Tournament:
    tournament = _get_tournament_for_update(db, tournament_id)

    current = status_machine.parse_status(tournament.status)
    if current != TournamentStatus.FUNDING_OPEN:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Tournament is not open for funding (status: {current.value})",
        )
    if tournament.funding_end_time is not None and _as_utc(tournament.funding_end_time) <= _utcnow():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="The funding window for this tournament has closed")

    amount = _quantize(amount)
    target = _quantize(tournament.target_pool_amount)
    pool = _quantize(tournament.current_pool_amount)
    remaining = target - pool
    if amount <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Investment amount must be positive")
    if amount > remaining:
        logger.warning("investment_exceeds_pool", tournament_id=tournament_id, amount=str(amount), remaining=str(remaining))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Investment exceeds the remaining pool capacity of {_sol_text(remaining)} SOL",
        )

    db.add(investment_model.TournamentInvestment(
        tournament_id=tournament.id,
        investor_id=investor_id,
        amount=amount,
    ))
    tournament.current_pool_amount = pool + amount
    if pool + amount == target:
        _move_to(tournament, TournamentStatus.FUNDING_COMPLETE)

    db.commit()
    db.refresh(tournament)
    logger.info(
        "tournament_investment_recorded",
        tournament_id=tournament.id,
        investor_id=investor_id,
        amount=str(amount),
        pool=str(tournament.current_pool_amount),
    )
    return tournament


def report_results(db: Session, report: tournament_schemas.ReportResultsRequest, user_id: int) -> tournament_model.Tournament:
    tournament = _get_tournament_for_update(db, report.tournament_id)
    _require_creator(tournament, user_id, "report results")

    current = status_machine.parse_status(tournament.status)
    if current != TournamentStatus.AWAITING_RESULTS:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Tournament is not awaiting results (status: {current.value})",
        )
    if report.outcome == TournamentOutcome.LOST and report.winnings_amount:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Winnings can only be reported for a won tournament")

    target = TournamentStatus.COMPLETED_WON if report.outcome == TournamentOutcome.WON else TournamentStatus.COMPLETED_LOST
    _move_to(tournament, target)
    # Winnings are recorded as reported; settling the winnings fee happens elsewhere
    tournament.winnings_amount = report.winnings_amount
    tournament.result_notes = report.notes
    tournament.results_reported_at = _utcnow()
    db.commit()
    db.refresh(tournament)
    return tournament


def advance_status(db: Session, tournament_id: int, new_status: str, current_user: user_model.User) -> tournament_model.Tournament:
    """
    Applies a settlement-side transition (funds transferred, in progress, awaiting results)
    or an early exit (funding failed, cancelled).

    Payment and result statuses cannot be set here; they have their own operations.
    Cancelling is open to the creator and to admins, everything else is admin-only.
    """
    try:
        target = status_machine.parse_status(new_status)
    except status_machine.UnknownStatusError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if target not in status_machine.SETTLEMENT_TARGETS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Status '{target.value}' is set by payments or result reports, not directly",
        )

    tournament = _get_tournament_for_update(db, tournament_id)
    is_creator = tournament.creator_user_id == current_user.id
    if not current_user.is_admin and not (target == TournamentStatus.CANCELLED and is_creator):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to change this tournament's status")

    _move_to(tournament, target)
    db.commit()
    db.refresh(tournament)
    return tournament
