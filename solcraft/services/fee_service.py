"""
Initial platform fee and guarantee calculation.

The percentages come from the creator's ranking tier (see PlayerRanking).
Amounts are computed once, when a tournament is created, and stored on the
tournament record.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from solcraft.models.enums import PlayerRanking

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class FeeBreakdown:
    initial_fee_amount: Decimal
    initial_fee_pct: Decimal # scaled x100 for display, e.g. 7 for GOLD
    guarantee_amount: Decimal
    guarantee_pct: Decimal # scaled x100 for display

    @property
    def initial_fee_fraction(self) -> Decimal:
        return self.initial_fee_pct / HUNDRED

    @property
    def guarantee_fraction(self) -> Decimal:
        return self.guarantee_pct / HUNDRED


def parse_ranking(value: Union[str, PlayerRanking, None]) -> Optional[PlayerRanking]:
    if isinstance(value, PlayerRanking):
        return value
    if not isinstance(value, str):
        return None
    try:
        return PlayerRanking(value.strip().upper())
    except ValueError:
        return None


def parse_amount(value) -> Optional[Decimal]:
    """
    Parses a positive, finite amount from a Decimal, int, float or numeric string.
    Returns None for anything else (None, "", "abc", NaN, infinity, zero, negatives, booleans).
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        # str() first so floats keep their shortest repr (0.1 -> Decimal("0.1"))
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def calculate_fees(ranking, target_pool_amount) -> Optional[FeeBreakdown]:
    """
    Maps a ranking tier and a target pool amount to the initial fee and the guarantee.

    Returns None when the ranking is not one of the four tiers or when the
    target pool amount is absent or not a valid positive number.
    """
    tier = parse_ranking(ranking)
    amount = parse_amount(target_pool_amount)
    if tier is None or amount is None:
        return None

    return FeeBreakdown(
        initial_fee_amount=amount * tier.initial_fee_pct,
        initial_fee_pct=tier.initial_fee_pct * HUNDRED,
        guarantee_amount=amount * tier.guarantee_pct,
        guarantee_pct=tier.guarantee_pct * HUNDRED,
    )
