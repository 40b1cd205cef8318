"""Handlers for plain money movements: inflow, outflow, transfers, balance
declarations, manual corrections and monthly budgets."""
from __future__ import annotations

from lever.models.events import (
    BUDGET_CATEGORIES,
    AdditionalInflow,
    DeclareAccountsEvent,
    IncrementAmount,
    InflowEvent,
    ManualCorrectionEvent,
    MonthlyBudgetingEvent,
    OutflowEvent,
    TransferMoneyEvent,
    UpdateAmount,
    UpdateMonthlyBudget,
)
from lever.simulation.schedule import fires_on
from lever.simulation.state import RunState


def working_amount(event, state: RunState) -> float:
    return state.overlay.value(event.id, "amount", event.params.amount)


def budget_total(event: MonthlyBudgetingEvent, state: RunState) -> float:
    return sum(
        state.overlay.value(event.id, f"budget.{category}", getattr(event.params, category))
        for category in BUDGET_CATEGORIES
    )


def handle_inflow(event: InflowEvent, state: RunState, day: int) -> None:
    if not fires_on(event.params, day) or not event.enabled("inflow"):
        return
    amount = working_amount(event, state)
    if amount > 0:
        state.ledger.credit(event.params.to_key, amount)


def handle_outflow(event: OutflowEvent, state: RunState, day: int) -> None:
    if not fires_on(event.params, day) or not event.enabled("outflow"):
        return
    amount = working_amount(event, state)
    if amount > 0:
        state.ledger.debit(event.params.from_key, amount)


def handle_transfer(event: TransferMoneyEvent, state: RunState, day: int) -> None:
    if not fires_on(event.params, day):
        return
    amount = working_amount(event, state)
    source = state.ledger.get(event.params.from_key)
    destination = state.ledger.get(event.params.to_key)
    # Both sides or neither
    if amount <= 0 or source is None or destination is None:
        return
    if event.enabled("outflow"):
        source.balance -= amount
    if event.enabled("inflow"):
        destination.balance += amount


def handle_declare_accounts(event: DeclareAccountsEvent, state: RunState, day: int) -> None:
    if not fires_on(event.params, day) or not event.enabled("alter_account_balance"):
        return
    for name, value in event.params.balances.items():
        state.ledger.set_balance(name, value)


def handle_manual_correction(event: ManualCorrectionEvent, state: RunState, day: int) -> None:
    if not fires_on(event.params, day):
        return
    state.ledger.set_balance(event.params.to_key, working_amount(event, state))


def handle_monthly_budgeting(event: MonthlyBudgetingEvent, state: RunState, day: int) -> None:
    if not fires_on(event.params, day):
        return
    total = budget_total(event, state)
    if total > 0:
        state.ledger.debit(event.params.from_key, total)


def apply_transactional_modifier(event, modifier, state: RunState, day: int) -> None:
    """Apply one due modifier of the transactional family."""
    if isinstance(modifier, UpdateAmount):
        state.overlay.overwrite(event.id, "amount", modifier.params.amount)
    elif isinstance(modifier, IncrementAmount):
        state.overlay.shift(event.id, "amount", modifier.params.amount)
    elif isinstance(modifier, AdditionalInflow):
        to_key = modifier.params.to_key or getattr(event.params, "to_key", "")
        if modifier.params.amount > 0:
            state.ledger.credit(to_key, modifier.params.amount)
    elif isinstance(modifier, UpdateMonthlyBudget):
        if modifier.params.key in BUDGET_CATEGORIES:
            state.overlay.overwrite(event.id, f"budget.{modifier.params.key}", modifier.params.amount)
