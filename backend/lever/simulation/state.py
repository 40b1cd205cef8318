"""Run-scoped mutable state, kept apart from the (immutable) parsed events.

Everything a handler accumulates during one run lives here, keyed by event
id: parameter overrides from modifiers, loan amortization schedules, and the
parameter updates proposed for persistence. Events themselves are never
mutated, so the same event list can be simulated any number of times.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from lever.models.simulation import ParameterUpdate
from lever.simulation.ledger import Ledger

logger = logging.getLogger(__name__)


class ParameterOverlay:
    """Working parameter values = persisted value, overwritten or shifted by modifiers."""

    def __init__(self) -> None:
        self._overrides: dict[tuple[int, str], float] = {}
        self._deltas: dict[tuple[int, str], float] = {}

    def value(self, event_id: int, name: str, persisted: float) -> float:
        key = (event_id, name)
        base = self._overrides.get(key, persisted)
        return base + self._deltas.get(key, 0.0)

    def overwrite(self, event_id: int, name: str, value: float) -> None:
        """Absolute overwrite. Discards deltas accumulated before it."""
        key = (event_id, name)
        self._overrides[key] = value
        self._deltas.pop(key, None)

    def shift(self, event_id: int, name: str, delta: float) -> None:
        key = (event_id, name)
        self._deltas[key] = self._deltas.get(key, 0.0) + delta


@dataclass
class AmortizationState:
    """Private schedule of one loan, valid for the current run only."""
    payment_amount: float
    remaining_principal: float
    start_time: int
    next_payment_day: int
    total_payments: int
    period_days: int
    periodic_rate: float
    payer_key: str
    loan_key: str
    payments_per_year: int = 12
    asset_key: str = ""
    asset_value: float = 0.0
    asset_sold: bool = False
    tracks_loan_envelope: bool = True
    payments_made: int = 0
    end_day: Optional[int] = None

    @property
    def is_terminal(self) -> bool:
        return self.end_day is not None


@dataclass
class RunState:
    ledger: Ledger
    overlay: ParameterOverlay = field(default_factory=ParameterOverlay)
    loans: dict[int, AmortizationState] = field(default_factory=dict)
    finished: set[int] = field(default_factory=set)
    paying: set[int] = field(default_factory=set)
    parameter_updates: list[ParameterUpdate] = field(default_factory=list)

    def propose_update(self, event_id: int, name: str, value: Union[float, int, str]) -> None:
        logger.debug("Event %d: proposing %s=%s", event_id, name, value)
        self.parameter_updates.append(
            ParameterUpdate(event_id=event_id, parameter_name=name, value=value)
        )
