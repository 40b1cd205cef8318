"""Day-by-day simulation loop.

For each day in the range: growth, then event dispatch, then a snapshot.
The loop is a pure function of its inputs; all accumulated state lives in a
fresh ``RunState`` built per call.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from lever.config import settings
from lever.models.plan import EnvelopeDefinition
from lever.models.simulation import Datum, ParameterUpdate
from lever.simulation.aggregator import snapshot
from lever.simulation.dispatcher import dispatch_day
from lever.simulation.growth import apply_daily_growth
from lever.simulation.ledger import Ledger
from lever.simulation.state import RunState

logger = logging.getLogger(__name__)


@dataclass
class SimulationOutcome:
    datums: list[Datum]
    parameter_updates: list[ParameterUpdate]
    state: RunState


def should_snapshot(day: int, start_day: int, end_day: int, interval: int) -> bool:
    if day == start_day or day == end_day:
        return True
    return interval <= 1 or day % interval == 0


def simulate(
    envelopes: Iterable[EnvelopeDefinition],
    events: Sequence,
    start_day: int,
    end_day: int,
    snapshot_interval: Optional[int] = None,
) -> SimulationOutcome:
    """Run the engine over ``[start_day, end_day]`` inclusive."""
    interval = snapshot_interval or settings.DEFAULT_SNAPSHOT_INTERVAL
    state = RunState(ledger=Ledger.initialize(envelopes))
    datums: list[Datum] = []

    logger.info(
        "Simulating days %d..%d: %d envelopes, %d events",
        start_day, end_day, len(state.ledger), len(events),
    )
    for day in range(start_day, end_day + 1):
        apply_daily_growth(state.ledger)
        dispatch_day(events, state, day)
        if should_snapshot(day, start_day, end_day, interval):
            datums.append(snapshot(state.ledger, day))

    logger.info(
        "Simulation finished: %d snapshots, %d parameter updates",
        len(datums), len(state.parameter_updates),
    )
    return SimulationOutcome(datums=datums, parameter_updates=state.parameter_updates, state=state)
