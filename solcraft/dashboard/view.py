"""
View models behind the player and investor dashboards.

Nothing here renders anything. A card says what a tournament row should show
(label, colour, progress, fee lines, which payment form is available); the
dashboards hold the last fetched list and refetch it after every successful action.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from solcraft.client.tournament_client import ActionResult, TournamentClient, TournamentClientError
from solcraft.models.enums import TournamentStatus
from solcraft.schemas.player_schemas import PlayerProfileRead
from solcraft.schemas.tournament_schemas import TournamentRead
from solcraft.services import fee_service, status_machine
from solcraft.services.status_machine import PaymentStage


@dataclass(frozen=True)
class TournamentCard:
    tournament_id: int
    name: str
    status: TournamentStatus
    status_label: str
    status_color: str
    ranking: str
    target_pool_amount: float
    current_pool_amount: float
    progress_pct: float
    initial_fee_amount: float
    initial_fee_pct: float # x100
    initial_fee_paid: bool
    guarantee_amount: float
    guarantee_pct: float # x100
    guarantee_paid: bool
    show_initial_fee_form: bool
    show_guarantee_form: bool
    show_report_results: bool


def build_card(tournament: TournamentRead) -> TournamentCard:
    tournament_status = status_machine.parse_status(tournament.status)
    display = status_machine.status_display(tournament_status)
    return TournamentCard(
        tournament_id=tournament.id,
        name=tournament.name,
        status=tournament_status,
        status_label=display.label,
        status_color=display.color,
        ranking=tournament.player_ranking_at_creation.value,
        target_pool_amount=tournament.target_pool_amount,
        current_pool_amount=tournament.current_pool_amount,
        progress_pct=status_machine.pool_progress_pct(tournament.current_pool_amount, tournament.target_pool_amount),
        initial_fee_amount=tournament.initial_platform_fee_amount,
        initial_fee_pct=round(tournament.initial_platform_fee_pct * 100, 2),
        initial_fee_paid=tournament.initial_platform_fee_paid,
        guarantee_amount=tournament.player_guarantee_amount_required,
        guarantee_pct=round(tournament.player_guarantee_pct * 100, 2),
        guarantee_paid=tournament.player_guarantee_paid,
        show_initial_fee_form=status_machine.is_payment_form_visible(tournament, PaymentStage.INITIAL_FEE),
        show_guarantee_form=status_machine.is_payment_form_visible(tournament, PaymentStage.GUARANTEE),
        show_report_results=tournament_status == TournamentStatus.AWAITING_RESULTS,
    )


def creation_fee_preview(profile: Optional[PlayerProfileRead], target_pool_amount) -> Optional[fee_service.FeeBreakdown]:
    """Fee and guarantee shown on the creation form before submitting; None until both inputs are usable."""
    if profile is None:
        return None
    return fee_service.calculate_fees(profile.ranking, target_pool_amount)


@dataclass
class _DashboardState:
    tournaments: List[TournamentRead] = field(default_factory=list)
    message: Optional[str] = None # informational, e.g. not logged in / nothing yet
    error: Optional[str] = None


class PlayerDashboard:
    """Tournaments created by the logged-in player, with their payment actions."""

    EMPTY_MESSAGE = "You have not created any tournaments yet."
    LOGGED_OUT_MESSAGE = "You must be logged in to see your tournaments."

    def __init__(self, client: TournamentClient):
        self.client = client
        self.state = _DashboardState()

    @property
    def cards(self) -> List[TournamentCard]:
        return [build_card(t) for t in self.state.tournaments]

    def _find(self, tournament_id: int) -> Optional[TournamentRead]:
        return next((t for t in self.state.tournaments if t.id == tournament_id), None)

    def refresh(self) -> List[TournamentCard]:
        if not self.client.is_authenticated:
            self.state = _DashboardState(message=self.LOGGED_OUT_MESSAGE)
            return []
        try:
            tournaments = self.client.list_my_tournaments()
        except TournamentClientError as e:
            # Keep what was shown before; only surface the error
            self.state.error = e.message
            return self.cards
        self.state = _DashboardState(
            tournaments=tournaments,
            message=None if tournaments else self.EMPTY_MESSAGE,
        )
        return self.cards

    def _after(self, result: ActionResult) -> ActionResult:
        if result.success:
            self.refresh()
        else:
            self.state.error = result.error
        return result

    def _pay(self, tournament_id: int, stage: PaymentStage) -> ActionResult:
        if not self.client.is_authenticated:
            return ActionResult(success=False, error=self.LOGGED_OUT_MESSAGE)
        tournament = self._find(tournament_id)
        if tournament is None or not status_machine.is_payment_form_visible(tournament, stage):
            return ActionResult(success=False, error="This payment is not available for the tournament right now.")

        if stage == PaymentStage.INITIAL_FEE:
            result = self.client.pay_initial_fee(tournament_id, tournament.initial_platform_fee_amount)
        else:
            result = self.client.pay_guarantee(tournament_id, tournament.player_guarantee_amount_required)
        return self._after(result)

    def pay_initial_fee(self, tournament_id: int) -> ActionResult:
        return self._pay(tournament_id, PaymentStage.INITIAL_FEE)

    def pay_guarantee(self, tournament_id: int) -> ActionResult:
        return self._pay(tournament_id, PaymentStage.GUARANTEE)

    def report_results(self, tournament_id: int, outcome, winnings_amount=None, notes: Optional[str] = None) -> ActionResult:
        if not self.client.is_authenticated:
            return ActionResult(success=False, error=self.LOGGED_OUT_MESSAGE)
        tournament = self._find(tournament_id)
        if tournament is None or tournament.status != TournamentStatus.AWAITING_RESULTS:
            return ActionResult(success=False, error="This tournament is not awaiting results.")
        return self._after(self.client.report_results(tournament_id, outcome, winnings_amount=winnings_amount, notes=notes))


class InvestorDashboard:
    """Tournaments open for funding and the invest action."""

    EMPTY_MESSAGE = "No tournaments are open for investment right now."

    def __init__(self, client: TournamentClient):
        self.client = client
        self.state = _DashboardState()

    @property
    def cards(self) -> List[TournamentCard]:
        return [build_card(t) for t in self.state.tournaments]

    def refresh(self) -> List[TournamentCard]:
        try:
            tournaments = self.client.list_open_tournaments()
        except TournamentClientError as e:
            self.state.error = e.message
            return self.cards
        self.state = _DashboardState(
            tournaments=tournaments,
            message=None if tournaments else self.EMPTY_MESSAGE,
        )
        return self.cards

    def invest(self, tournament_id: int, amount) -> ActionResult:
        if not self.client.is_authenticated:
            return ActionResult(success=False, error="You must be logged in to invest.")
        result = self.client.invest_in_tournament(tournament_id, amount)
        if result.success:
            self.refresh()
        else:
            self.state.error = result.error
        return result
