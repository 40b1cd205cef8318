"""Simulation engine — ledger, growth, handlers, dispatch, and the daily loop."""
from lever.simulation.ledger import EnvelopeState, Ledger
from lever.simulation.growth import apply_daily_growth, daily_growth
from lever.simulation.amortization import calculate_periodic_payment
from lever.simulation.dispatcher import HANDLERS, dispatch_day
from lever.simulation.aggregator import detect_account_warnings, snapshot
from lever.simulation.engine import SimulationOutcome, simulate

__all__ = [
    "EnvelopeState",
    "Ledger",
    "apply_daily_growth",
    "daily_growth",
    "calculate_periodic_payment",
    "HANDLERS",
    "dispatch_day",
    "detect_account_warnings",
    "snapshot",
    "SimulationOutcome",
    "simulate",
]
