"""Impact scoring and ordering of bills."""

from collections.abc import Iterable
from datetime import UTC, datetime

from civic_snapshot.lib.legislation.base import IMPACT_RANK, Bill, Impact, ScoredBill
from civic_snapshot.lib.legislation.categorizer import categorize

HIGH_IMPACT_DAYS = 7
MEDIUM_IMPACT_DAYS = 30

_SECONDS_PER_DAY = 86400


def score_impact(bill: Bill, now: datetime) -> Impact:
    """Score a bill's impact relative to ``now``.

    Bills that became law are always high impact. Otherwise the tier comes
    from the days elapsed since the latest action: under 7 is high, under 30
    is medium, anything older is low. Bills without either date are medium.

    Args:
        bill: Bill to score.
        now: Reference time. Naive values are taken as UTC.

    Returns:
        The bill's Impact tier.
    """
    if bill.latest_passage_date is not None:
        return Impact.HIGH
    if bill.latest_action_date is None:
        return Impact.MEDIUM

    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    days_since_action = (now - bill.latest_action_date).total_seconds() / _SECONDS_PER_DAY
    if days_since_action < HIGH_IMPACT_DAYS:
        return Impact.HIGH
    if days_since_action < MEDIUM_IMPACT_DAYS:
        return Impact.MEDIUM
    return Impact.LOW


def score_bill(bill: Bill, now: datetime) -> ScoredBill:
    """Categorize and score a single bill."""
    return ScoredBill(bill=bill, category=categorize(bill), impact=score_impact(bill, now))


def sort_by_impact(bills: Iterable[ScoredBill]) -> list[ScoredBill]:
    """Order scored bills high -> medium -> low, keeping upstream order on ties."""
    return sorted(bills, key=lambda scored: IMPACT_RANK[scored.impact])


def score_bills(bills: Iterable[Bill], now: datetime) -> list[ScoredBill]:
    """Score every bill and return them sorted by impact."""
    return sort_by_impact(score_bill(bill, now) for bill in bills)
