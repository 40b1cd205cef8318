"""Amortizing-loan handlers — buy_house, buy_car, payment_schedule.

A purchase books its loan once, on its start day, and keeps an
``AmortizationState`` in the run state for the rest of the run. Every later
day the remaining principal is re-read from the loan envelope (so payments
made by other events are honoured) and a payment is made whenever the
schedule cursor is due. The loan turns terminal when the principal reaches
zero or the last scheduled payment has been made; if that day differs from
the stored ``end_time`` a parameter update is proposed.
"""
from __future__ import annotations

import logging
from typing import Optional

from lever.models.events import (
    BuyCarEvent,
    BuyHouseEvent,
    CarRepair,
    ExtraPayment,
    LatePayment,
    NewAppraisal,
    PaymentScheduleEvent,
    RefinanceHome,
    SellHouse,
)
from lever.simulation.amortization import (
    calculate_periodic_payment,
    period_length_days,
    total_payments,
)
from lever.simulation.handlers.transactional import working_amount
from lever.simulation.schedule import fires_on
from lever.simulation.state import AmortizationState, RunState

logger = logging.getLogger(__name__)

_PAID_OFF_EPSILON = 1e-6

_HOUSE_FUNCTIONS = {
    "down_payment": "down_payment",
    "asset": "house_asset",
    "loan": "mortgage_loan",
    "payment": "mortgage_payment",
    "property_tax": "property_tax",
    "final_correction": "final_correction",
}

_CAR_FUNCTIONS = {
    "down_payment": "down_payment",
    "asset": "car_asset",
    "loan": "car_loan",
    "payment": "car_payment",
    "property_tax": "property_tax",
    "final_correction": "final_correction",
}


# ---------------------------------------------------------------------------
# Shared loan mechanics
# ---------------------------------------------------------------------------
def _open_loan(
    event,
    state: RunState,
    day: int,
    *,
    asset_value: float,
    downpayment: float,
    loan_term_years: float,
    annual_interest_rate: float,
    payments_per_year: int,
    payer_key: str,
    asset_key: str,
    loan_key: str,
    functions: dict[str, str],
) -> AmortizationState:
    principal = max(0.0, asset_value - downpayment)
    n_payments = total_payments(loan_term_years, payments_per_year)
    periodic_rate = annual_interest_rate / payments_per_year if payments_per_year > 0 else 0.0
    payment = calculate_periodic_payment(principal, periodic_rate, n_payments)
    period = period_length_days(payments_per_year)

    if event.enabled(functions["down_payment"]):
        state.ledger.debit(payer_key, downpayment)
    if event.enabled(functions["asset"]):
        state.ledger.credit(asset_key, asset_value)
    tracks = event.enabled(functions["loan"]) and state.ledger.debit(loan_key, principal)

    loan = AmortizationState(
        payment_amount=payment,
        remaining_principal=principal,
        start_time=day,
        next_payment_day=day + period,
        total_payments=n_payments,
        period_days=period,
        periodic_rate=periodic_rate,
        payer_key=payer_key,
        loan_key=loan_key,
        payments_per_year=payments_per_year,
        asset_key=asset_key,
        asset_value=asset_value,
        tracks_loan_envelope=bool(tracks),
    )
    state.loans[event.id] = loan
    logger.debug(
        "Event %d: booked loan principal=%.2f payment=%.2f n=%d",
        event.id, principal, payment, n_payments,
    )
    return loan


def _sync_remaining(loan: AmortizationState, state: RunState) -> None:
    """Re-derive the remaining principal from the loan envelope's live balance."""
    if not loan.tracks_loan_envelope:
        return
    balance = state.ledger.balance(loan.loan_key)
    if balance is None:
        return
    live = max(0.0, -balance)
    # Principal only grows through refinancing or new bookings, never by drift
    loan.remaining_principal = min(loan.remaining_principal, live) if live > 0 else 0.0


def _reduce_principal(loan: AmortizationState, state: RunState, amount: float) -> None:
    if amount <= 0:
        return
    if loan.tracks_loan_envelope:
        state.ledger.credit(loan.loan_key, amount)
    loan.remaining_principal = max(0.0, loan.remaining_principal - amount)


def _terminate(event, loan: AmortizationState, state: RunState, day: int) -> None:
    loan.end_day = day
    if loan.remaining_principal < _PAID_OFF_EPSILON:
        loan.remaining_principal = 0.0
    logger.debug("Event %d: loan terminal on day %d", event.id, day)
    if event.params.end_time != day:
        state.propose_update(event.id, "end_time", day)


def _service_loan(
    event,
    loan: AmortizationState,
    state: RunState,
    day: int,
    functions: dict[str, str],
    property_tax_rate: float = 0.0,
) -> None:
    if loan.is_terminal:
        return
    _sync_remaining(loan, state)

    due = (
        loan.remaining_principal > _PAID_OFF_EPSILON
        and loan.payments_made < loan.total_payments
        and day >= loan.next_payment_day
    )
    if due:
        if event.enabled(functions["payment"]) and loan.payer_key in state.ledger:
            payment = min(loan.payment_amount, loan.remaining_principal)
            is_final = loan.payments_made + 1 >= loan.total_payments
            if is_final and event.enabled(functions["final_correction"]):
                # Last scheduled payment settles any rounding residue
                payment = loan.remaining_principal
            state.ledger.debit(loan.payer_key, payment)
            _reduce_principal(loan, state, payment)
        if property_tax_rate > 0 and event.enabled(functions["property_tax"]):
            state.ledger.debit(
                loan.payer_key, loan.asset_value * property_tax_rate / loan.payments_per_year
            )
        loan.payments_made += 1
        loan.next_payment_day += loan.period_days

    if loan.remaining_principal <= _PAID_OFF_EPSILON or loan.payments_made >= loan.total_payments:
        _terminate(event, loan, state, day)


def _extra_payment(loan: AmortizationState, state: RunState, amount: float, from_key: Optional[str]) -> None:
    if loan.is_terminal or amount <= 0:
        return
    _sync_remaining(loan, state)
    payment = min(amount, loan.remaining_principal)
    if payment <= 0:
        return
    state.ledger.debit(from_key or loan.payer_key, payment)
    _reduce_principal(loan, state, payment)


# ---------------------------------------------------------------------------
# buy_house
# ---------------------------------------------------------------------------
def handle_buy_house(event: BuyHouseEvent, state: RunState, day: int) -> None:
    params = event.params
    loan = state.loans.get(event.id)
    if loan is None:
        if day != params.start_time:
            return
        loan = _open_loan(
            event,
            state,
            day,
            asset_value=params.home_value,
            downpayment=params.downpayment,
            loan_term_years=params.loan_term_years,
            annual_interest_rate=params.annual_interest_rate,
            payments_per_year=params.payments_per_year,
            payer_key=params.from_key,
            asset_key=params.to_key,
            loan_key=params.mortgage_key,
            functions=_HOUSE_FUNCTIONS,
        )
    _service_loan(event, loan, state, day, _HOUSE_FUNCTIONS, params.property_tax_rate)


def apply_house_modifier(event: BuyHouseEvent, modifier, state: RunState, day: int) -> None:
    loan = state.loans.get(event.id)
    if loan is None:
        return

    if isinstance(modifier, NewAppraisal):
        if loan.asset_sold:
            return
        delta = modifier.params.appraised_value - loan.asset_value
        state.ledger.credit(loan.asset_key, delta)
        loan.asset_value = modifier.params.appraised_value
    elif isinstance(modifier, ExtraPayment):
        _extra_payment(loan, state, modifier.params.amount, modifier.params.from_key)
    elif isinstance(modifier, LatePayment):
        if modifier.params.amount > 0:
            state.ledger.debit(modifier.params.from_key or loan.payer_key, modifier.params.amount)
    elif isinstance(modifier, SellHouse):
        _sell_house(event, loan, modifier, state, day)
    elif isinstance(modifier, RefinanceHome):
        _refinance(loan, modifier, state, day)


def _sell_house(event: BuyHouseEvent, loan: AmortizationState, modifier: SellHouse, state: RunState, day: int) -> None:
    if loan.asset_sold:
        return
    proceeds_key = modifier.params.to_key or loan.payer_key
    state.ledger.debit(loan.asset_key, loan.asset_value)
    state.ledger.credit(proceeds_key, modifier.params.sale_price)
    loan.asset_sold = True
    loan.asset_value = 0.0
    if loan.is_terminal:
        return
    _sync_remaining(loan, state)
    payoff = loan.remaining_principal
    if payoff > 0:
        state.ledger.debit(proceeds_key, payoff)
        _reduce_principal(loan, state, payoff)
    _terminate(event, loan, state, day)


def _refinance(loan: AmortizationState, modifier: RefinanceHome, state: RunState, day: int) -> None:
    if loan.is_terminal:
        return
    _sync_remaining(loan, state)
    params = modifier.params
    payments_per_year = params.payments_per_year or loan.payments_per_year
    outstanding = loan.remaining_principal

    new_key = params.new_loan_key
    if (
        new_key
        and new_key != loan.loan_key
        and loan.tracks_loan_envelope
        and new_key in state.ledger
    ):
        state.ledger.credit(loan.loan_key, outstanding)
        state.ledger.debit(new_key, outstanding)
        loan.loan_key = new_key

    loan.periodic_rate = params.annual_interest_rate / payments_per_year if payments_per_year > 0 else 0.0
    loan.total_payments = total_payments(params.loan_term_years, payments_per_year)
    loan.payment_amount = calculate_periodic_payment(outstanding, loan.periodic_rate, loan.total_payments)
    loan.payments_per_year = payments_per_year
    loan.period_days = period_length_days(payments_per_year)
    loan.payments_made = 0
    loan.next_payment_day = day + loan.period_days


# ---------------------------------------------------------------------------
# buy_car
# ---------------------------------------------------------------------------
def handle_buy_car(event: BuyCarEvent, state: RunState, day: int) -> None:
    params = event.params
    loan = state.loans.get(event.id)
    if loan is None:
        if day != params.start_time:
            return
        loan = _open_loan(
            event,
            state,
            day,
            asset_value=params.car_value,
            downpayment=params.downpayment,
            loan_term_years=params.loan_term_years,
            annual_interest_rate=params.annual_interest_rate,
            payments_per_year=params.payments_per_year,
            payer_key=params.from_key,
            asset_key=params.to_key,
            loan_key=params.loan_key,
            functions=_CAR_FUNCTIONS,
        )
    _service_loan(event, loan, state, day, _CAR_FUNCTIONS)


def apply_car_modifier(event: BuyCarEvent, modifier, state: RunState, day: int) -> None:
    loan = state.loans.get(event.id)
    if loan is None:
        return
    if isinstance(modifier, ExtraPayment):
        _extra_payment(loan, state, modifier.params.amount, modifier.params.from_key)
    elif isinstance(modifier, (LatePayment, CarRepair)):
        if modifier.params.amount > 0:
            state.ledger.debit(modifier.params.from_key or loan.payer_key, modifier.params.amount)


# ---------------------------------------------------------------------------
# payment_schedule
# ---------------------------------------------------------------------------
def handle_payment_schedule(event: PaymentScheduleEvent, state: RunState, day: int) -> None:
    """Fixed recurring payment into a loan envelope, stopped once it is paid off.

    A firing that finds no debt is skipped, unless this schedule has already
    paid into the envelope, in which case the debt was settled elsewhere.
    """
    if event.id in state.finished or not fires_on(event.params, day):
        return
    params = event.params
    if params.from_key not in state.ledger or params.to_key not in state.ledger:
        return
    loan_balance = state.ledger.balance(params.to_key)
    if loan_balance < -_PAID_OFF_EPSILON:
        payment = min(working_amount(event, state), -loan_balance)
        if payment <= 0:
            return
        state.ledger.debit(params.from_key, payment)
        state.ledger.credit(params.to_key, payment)
        state.paying.add(event.id)
        if payment < -loan_balance - _PAID_OFF_EPSILON:
            return
        state.ledger.set_balance(params.to_key, 0.0)
    elif event.id not in state.paying:
        return
    state.finished.add(event.id)
    logger.debug("Event %d: payment schedule finished on day %d", event.id, day)
    if event.params.end_time != day:
        state.propose_update(event.id, "end_time", day)
