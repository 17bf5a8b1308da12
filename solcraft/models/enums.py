from decimal import Decimal
from enum import Enum


class PlayerRanking(str, Enum):
    """
    Player ranking tier. Each tier carries its own fee policy:
    the initial platform fee and the guarantee, both as fractions of the target pool.
    """
    PLATINUM = ("PLATINUM", "0.05", "0.20")
    GOLD = ("GOLD", "0.07", "0.25")
    SILVER = ("SILVER", "0.08", "0.30")
    BRONZE = ("BRONZE", "0.10", "0.40")

    def __new__(cls, value: str, initial_fee_pct: str, guarantee_pct: str):
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.initial_fee_pct = Decimal(initial_fee_pct)
        obj.guarantee_pct = Decimal(guarantee_pct)
        return obj


class TournamentStatus(str, Enum):
    PENDING_INITIAL_PAYMENT = "pending_initial_payment"
    PENDING_GUARANTEE = "pending_guarantee"
    FUNDING_OPEN = "funding_open"
    FUNDING_COMPLETE = "funding_complete"
    FUNDS_TRANSFERRED_TO_PLAYER = "funds_transferred_to_player"
    IN_PROGRESS = "in_progress"
    AWAITING_RESULTS = "awaiting_results"
    COMPLETED_WON = "completed_won"
    COMPLETED_LOST = "completed_lost"
    FUNDING_FAILED = "funding_failed"
    CANCELLED = "cancelled"


class TournamentOutcome(str, Enum):
    WON = "won"
    LOST = "lost"
