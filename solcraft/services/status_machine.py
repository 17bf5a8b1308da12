"""
Tournament funding lifecycle.

    pending_initial_payment -> pending_guarantee -> funding_open -> funding_complete
        -> funds_transferred_to_player -> in_progress -> awaiting_results
        -> completed_won | completed_lost

funding_failed and cancelled can be reached from every non-terminal status.
Status values are stored and transmitted as plain text; parse_status is the
only way text becomes a TournamentStatus.
"""
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, NamedTuple, Union

from solcraft.models.enums import TournamentStatus


class UnknownStatusError(ValueError):
    pass


class InvalidTransitionError(ValueError):
    def __init__(self, current: TournamentStatus, target: TournamentStatus):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move tournament from '{current.value}' to '{target.value}'")


TERMINAL_STATUSES: FrozenSet[TournamentStatus] = frozenset({
    TournamentStatus.COMPLETED_WON,
    TournamentStatus.COMPLETED_LOST,
    TournamentStatus.FUNDING_FAILED,
    TournamentStatus.CANCELLED,
})

# Forward edges only; the early exits are added below for every non-terminal status
_FORWARD: Dict[TournamentStatus, FrozenSet[TournamentStatus]] = {
    TournamentStatus.PENDING_INITIAL_PAYMENT: frozenset({TournamentStatus.PENDING_GUARANTEE}),
    TournamentStatus.PENDING_GUARANTEE: frozenset({TournamentStatus.FUNDING_OPEN}),
    TournamentStatus.FUNDING_OPEN: frozenset({TournamentStatus.FUNDING_COMPLETE}),
    TournamentStatus.FUNDING_COMPLETE: frozenset({TournamentStatus.FUNDS_TRANSFERRED_TO_PLAYER}),
    TournamentStatus.FUNDS_TRANSFERRED_TO_PLAYER: frozenset({TournamentStatus.IN_PROGRESS}),
    TournamentStatus.IN_PROGRESS: frozenset({TournamentStatus.AWAITING_RESULTS}),
    TournamentStatus.AWAITING_RESULTS: frozenset({
        TournamentStatus.COMPLETED_WON,
        TournamentStatus.COMPLETED_LOST,
    }),
}

_EARLY_EXITS = frozenset({TournamentStatus.FUNDING_FAILED, TournamentStatus.CANCELLED})

TRANSITIONS: Dict[TournamentStatus, FrozenSet[TournamentStatus]] = {
    status: (_FORWARD.get(status, frozenset()) | _EARLY_EXITS) if status not in TERMINAL_STATUSES else frozenset()
    for status in TournamentStatus
}

# Transitions driven by the settlement side rather than by a payment or a result report
SETTLEMENT_TARGETS: FrozenSet[TournamentStatus] = frozenset({
    TournamentStatus.FUNDS_TRANSFERRED_TO_PLAYER,
    TournamentStatus.IN_PROGRESS,
    TournamentStatus.AWAITING_RESULTS,
    TournamentStatus.FUNDING_FAILED,
    TournamentStatus.CANCELLED,
})


def parse_status(value: Union[str, TournamentStatus]) -> TournamentStatus:
    if isinstance(value, TournamentStatus):
        return value
    try:
        return TournamentStatus(value)
    except ValueError:
        raise UnknownStatusError(f"Unknown tournament status: {value!r}")


def is_terminal(status: Union[str, TournamentStatus]) -> bool:
    return parse_status(status) in TERMINAL_STATUSES


def can_transition(current: Union[str, TournamentStatus], target: Union[str, TournamentStatus]) -> bool:
    return parse_status(target) in TRANSITIONS[parse_status(current)]


def ensure_transition(current: Union[str, TournamentStatus], target: Union[str, TournamentStatus]) -> TournamentStatus:
    """Returns the parsed target status, or raises InvalidTransitionError."""
    current_status = parse_status(current)
    target_status = parse_status(target)
    if target_status not in TRANSITIONS[current_status]:
        raise InvalidTransitionError(current_status, target_status)
    return target_status


# --- Payment stages ---

class PaymentStage(str, Enum):
    INITIAL_FEE = "initial_fee"
    GUARANTEE = "guarantee"

    @property
    def pending_status(self) -> TournamentStatus:
        return _STAGE_PENDING_STATUS[self]

    @property
    def paid_flag(self) -> str:
        return _STAGE_PAID_FLAG[self]

    @property
    def next_status(self) -> TournamentStatus:
        return _STAGE_NEXT_STATUS[self]


_STAGE_PENDING_STATUS = {
    PaymentStage.INITIAL_FEE: TournamentStatus.PENDING_INITIAL_PAYMENT,
    PaymentStage.GUARANTEE: TournamentStatus.PENDING_GUARANTEE,
}
_STAGE_PAID_FLAG = {
    PaymentStage.INITIAL_FEE: "initial_platform_fee_paid",
    PaymentStage.GUARANTEE: "player_guarantee_paid",
}
_STAGE_NEXT_STATUS = {
    PaymentStage.INITIAL_FEE: TournamentStatus.PENDING_GUARANTEE,
    PaymentStage.GUARANTEE: TournamentStatus.FUNDING_OPEN,
}


def is_payment_form_visible(tournament, stage: PaymentStage) -> bool:
    """
    A stage's payment form is shown only when the status is exactly the stage's
    pending status AND the stage's paid flag is still false. Either condition alone
    is not enough: the status and the flag are written separately and one may lag.
    """
    return (
        parse_status(tournament.status) == stage.pending_status
        and not getattr(tournament, stage.paid_flag)
    )


# --- Presentation ---

class StatusDisplay(NamedTuple):
    color: str
    label: str


STATUS_DISPLAY: Dict[TournamentStatus, StatusDisplay] = {
    TournamentStatus.PENDING_INITIAL_PAYMENT: StatusDisplay("#ffc107", "Awaiting initial fee"),
    TournamentStatus.PENDING_GUARANTEE: StatusDisplay("#ffc107", "Awaiting guarantee"),
    TournamentStatus.FUNDING_OPEN: StatusDisplay("#28a745", "Funding open"),
    TournamentStatus.FUNDING_COMPLETE: StatusDisplay("#17a2b8", "Funding complete"),
    TournamentStatus.FUNDS_TRANSFERRED_TO_PLAYER: StatusDisplay("#007bff", "Funds transferred"),
    TournamentStatus.IN_PROGRESS: StatusDisplay("#007bff", "In progress"),
    TournamentStatus.AWAITING_RESULTS: StatusDisplay("#6f42c1", "Awaiting results"),
    TournamentStatus.COMPLETED_WON: StatusDisplay("#28a745", "Completed (won)"),
    TournamentStatus.COMPLETED_LOST: StatusDisplay("#dc3545", "Completed (lost)"),
    TournamentStatus.FUNDING_FAILED: StatusDisplay("#6c757d", "Funding failed"),
    TournamentStatus.CANCELLED: StatusDisplay("#6c757d", "Cancelled"),
}


def status_display(status: Union[str, TournamentStatus]) -> StatusDisplay:
    return STATUS_DISPLAY[parse_status(status)]


def pool_progress_pct(current, target) -> float:
    """Funding progress in percent, clamped to [0, 100]."""
    current_amount = Decimal(str(current or 0))
    target_amount = Decimal(str(target or 0))
    if target_amount <= 0:
        return 0.0
    pct = current_amount / target_amount * 100
    return float(min(Decimal(100), max(Decimal(0), pct)))
