"""Event dispatcher — routes each due event to its type-specific handler."""
from __future__ import annotations

import logging
from typing import Callable, NamedTuple, Sequence

from lever.models.events import EventType
from lever.simulation import handlers
from lever.simulation.schedule import fires_on
from lever.simulation.state import RunState

logger = logging.getLogger(__name__)


class Route(NamedTuple):
    handle: Callable
    apply_modifier: Callable


HANDLERS: dict[str, Route] = {
    EventType.inflow.value: Route(handlers.handle_inflow, handlers.apply_transactional_modifier),
    EventType.outflow.value: Route(handlers.handle_outflow, handlers.apply_transactional_modifier),
    EventType.transfer_money.value: Route(handlers.handle_transfer, handlers.apply_transactional_modifier),
    EventType.declare_accounts.value: Route(handlers.handle_declare_accounts, handlers.apply_transactional_modifier),
    EventType.manual_correction.value: Route(handlers.handle_manual_correction, handlers.apply_transactional_modifier),
    EventType.monthly_budgeting.value: Route(handlers.handle_monthly_budgeting, handlers.apply_transactional_modifier),
    EventType.buy_house.value: Route(handlers.handle_buy_house, handlers.apply_house_modifier),
    EventType.buy_car.value: Route(handlers.handle_buy_car, handlers.apply_car_modifier),
    EventType.payment_schedule.value: Route(handlers.handle_payment_schedule, handlers.apply_transactional_modifier),
    EventType.get_job.value: Route(handlers.handle_get_job, handlers.apply_payroll_modifier),
    EventType.get_wage_job.value: Route(handlers.handle_get_wage_job, handlers.apply_payroll_modifier),
}

_missing = {t.value for t in EventType} - HANDLERS.keys()
if _missing:
    raise RuntimeError(f"No handler registered for event types: {sorted(_missing)}")


def dispatch_day(events: Sequence, state: RunState, day: int) -> None:
    """Apply every started event for ``day`` in list order.

    An event whose ``start_time`` is still in the future is skipped whole,
    modifiers included. Due modifiers run before their parent's own effect.
    """
    for event in events:
        if event.params.start_time > day:
            continue
        route = HANDLERS.get(event.type)
        if route is None:
            logger.debug("No handler for event type %r — skipping", event.type)
            continue
        for modifier in event.updating_events:
            if fires_on(modifier.params, day):
                route.apply_modifier(event, modifier, state, day)
        route.handle(event, state, day)
