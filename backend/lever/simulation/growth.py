"""Growth engine — one day of balance growth or decay per envelope.

Runs before any event dispatch. Monthly and Yearly compounding share the
periodic boundary rule: every ``COMPOUND_PERIOD_DAYS`` elapsed days the
balance grows by the monthly-equivalent rate ``(1 + r) ** (1 / 12) - 1``.
This is an approximation, not calendar aware.
"""
from __future__ import annotations

from typing import Optional

from lever.config import settings
from lever.models.plan import GrowthModel
from lever.simulation.ledger import EnvelopeState, Ledger


def monthly_equivalent_rate(annual_rate: float) -> float:
    return (1.0 + annual_rate) ** (1.0 / 12.0) - 1.0


def daily_growth(
    envelope: EnvelopeState,
    compound_period_days: Optional[int] = None,
    days_per_year: Optional[int] = None,
) -> float:
    """Return the balance delta for one day and advance the envelope's counters.

    The elapsed-day counter advances for every envelope every day, even when
    the balance does not grow, so compounding boundaries stay fixed.
    """
    period = compound_period_days or settings.COMPOUND_PERIOD_DAYS
    year = days_per_year or settings.DAYS_PER_YEAR
    envelope.elapsed_days += 1

    balance = envelope.balance
    model = envelope.growth_model
    daily_rate = envelope.annual_rate / year

    if model == GrowthModel.depreciation_days:
        return _depreciate_by_days(envelope)
    if balance <= 0 or model == GrowthModel.none:
        return 0.0

    if model in (GrowthModel.simple_interest, GrowthModel.appreciation):
        return balance * daily_rate
    if model == GrowthModel.daily_compound:
        return balance * (1.0 + daily_rate) - balance
    if model in (GrowthModel.monthly_compound, GrowthModel.yearly_compound):
        if period > 0 and envelope.elapsed_days % period == 0:
            return balance * monthly_equivalent_rate(envelope.annual_rate)
        return 0.0
    if model == GrowthModel.depreciation:
        return -balance * daily_rate
    return 0.0


def _depreciate_by_days(envelope: EnvelopeState) -> float:
    # Straight-line from the highest balance seen since the last reset
    balance = envelope.balance
    if balance <= 0:
        envelope.depreciation_baseline = None
        return 0.0
    if not envelope.days_of_usefulness or envelope.days_of_usefulness <= 0:
        return 0.0
    if envelope.depreciation_baseline is None or balance > envelope.depreciation_baseline:
        envelope.depreciation_baseline = balance
    step = envelope.depreciation_baseline / envelope.days_of_usefulness
    if step >= balance:
        envelope.depreciation_baseline = None
        return -balance
    return -step


def apply_daily_growth(ledger: Ledger) -> None:
    """Apply one day of growth to every envelope in the ledger."""
    for envelope in ledger:
        envelope.balance += daily_growth(envelope)
