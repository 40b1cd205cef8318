"""Payroll handlers — get_job (salaried) and get_wage_job (hourly).

A single flat-rate withholding model: 401(k) comes out pre-tax, income taxes
apply to the remainder, payroll taxes (social security, medicare) to gross.
Each withholding category lands in its own tracking envelope.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from lever.config import settings
from lever.models.events import (
    Bonus,
    Change401kContribution,
    ChangeEmployerMatch,
    ChangeHours,
    GetJobEvent,
    GetWageJobEvent,
    PayrollParams,
    RecurringRaise,
    SalaryRaise,
    WageRaise,
)
from lever.simulation.schedule import pay_cadence_days, within_window
from lever.simulation.state import RunState

DEFAULT_PAY_PERIOD = 26.0


@dataclass(frozen=True)
class Paycheck:
    """Breakdown of one paycheck."""
    gross: float
    employee_401k: float
    employer_401k: float
    federal: float
    state: float
    local: float
    social_security: float
    medicare: float

    @property
    def taxable_income(self) -> float:
        return self.gross - self.employee_401k

    @property
    def total_withheld(self) -> float:
        return self.federal + self.state + self.local + self.social_security + self.medicare

    @property
    def net_pay(self) -> float:
        return self.gross - self.employee_401k - self.total_withheld


def compute_paycheck(gross: float, params: PayrollParams, contribution: float, match: float) -> Paycheck:
    employee_401k = gross * contribution
    taxable = gross - employee_401k
    return Paycheck(
        gross=gross,
        employee_401k=employee_401k,
        employer_401k=gross * match,
        federal=taxable * params.federal_tax_rate,
        state=taxable * params.state_tax_rate,
        local=taxable * params.local_tax_rate,
        social_security=gross * params.social_security_rate,
        medicare=gross * params.medicare_rate,
    )


def paychecks_per_year(params: PayrollParams) -> Optional[float]:
    """Explicit ``pay_period``; biweekly when neither it nor a frequency is set."""
    if params.pay_period and params.pay_period > 0:
        return params.pay_period
    if params.frequency_days and params.frequency_days > 0:
        return None
    return DEFAULT_PAY_PERIOD


def _payday_cadence(params: PayrollParams, day: int) -> int:
    """Return the pay cadence in days when ``day`` is a payday, else 0."""
    cadence = pay_cadence_days(params.frequency_days, paychecks_per_year(params))
    if cadence <= 0 or not within_window(params, day):
        return 0
    return cadence if (day - params.start_time) % cadence == 0 else 0


def _deposit(paycheck: Paycheck, params: PayrollParams, state: RunState) -> None:
    ledger = state.ledger
    ledger.credit(params.to_key, paycheck.net_pay)
    ledger.credit(params.retirement_key, paycheck.employee_401k + paycheck.employer_401k)
    ledger.credit(params.federal_withholding_key, paycheck.federal)
    ledger.credit(params.state_withholding_key, paycheck.state)
    ledger.credit(params.local_withholding_key, paycheck.local)
    ledger.credit(params.social_security_key, paycheck.social_security)
    ledger.credit(params.medicare_key, paycheck.medicare)


def _retirement_rates(event, state: RunState) -> tuple[float, float]:
    overlay = state.overlay
    contribution = overlay.value(event.id, "p_401k_contribution", event.params.p_401k_contribution)
    match = overlay.value(event.id, "p_401k_match", event.params.p_401k_match)
    return contribution, match


def salaried_gross(event: GetJobEvent, state: RunState, cadence: int) -> float:
    salary = state.overlay.value(event.id, "salary", event.params.salary)
    pay_period = paychecks_per_year(event.params)
    if pay_period is None:
        return salary * cadence / settings.DAYS_PER_YEAR
    return salary / pay_period


def wage_gross(event: GetWageJobEvent, state: RunState, cadence: int) -> float:
    wage = state.overlay.value(event.id, "hourly_wage", event.params.hourly_wage)
    hours = state.overlay.value(event.id, "hours_per_week", event.params.hours_per_week)
    return wage * hours * (cadence / 7.0)


def handle_get_job(event: GetJobEvent, state: RunState, day: int) -> None:
    cadence = _payday_cadence(event.params, day)
    if not cadence:
        return
    contribution, match = _retirement_rates(event, state)
    paycheck = compute_paycheck(salaried_gross(event, state, cadence), event.params, contribution, match)
    _deposit(paycheck, event.params, state)


def handle_get_wage_job(event: GetWageJobEvent, state: RunState, day: int) -> None:
    cadence = _payday_cadence(event.params, day)
    if not cadence:
        return
    contribution, match = _retirement_rates(event, state)
    paycheck = compute_paycheck(wage_gross(event, state, cadence), event.params, contribution, match)
    _deposit(paycheck, event.params, state)


def apply_payroll_modifier(event, modifier, state: RunState, day: int) -> None:
    overlay = state.overlay
    pay_field = "hourly_wage" if isinstance(event, GetWageJobEvent) else "salary"

    if isinstance(modifier, SalaryRaise):
        overlay.overwrite(event.id, "salary", modifier.params.salary)
    elif isinstance(modifier, WageRaise):
        overlay.overwrite(event.id, "hourly_wage", modifier.params.hourly_wage)
    elif isinstance(modifier, RecurringRaise):
        overlay.shift(event.id, pay_field, modifier.params.amount)
    elif isinstance(modifier, Bonus):
        if modifier.params.amount > 0:
            state.ledger.credit(modifier.params.to_key or event.params.to_key, modifier.params.amount)
    elif isinstance(modifier, Change401kContribution):
        overlay.overwrite(event.id, "p_401k_contribution", modifier.params.p_401k_contribution)
    elif isinstance(modifier, ChangeEmployerMatch):
        overlay.overwrite(event.id, "p_401k_match", modifier.params.p_401k_match)
    elif isinstance(modifier, ChangeHours):
        overlay.overwrite(event.id, "hours_per_week", modifier.params.hours_per_week)
