"""Fixed-payment amortization math for the loan handlers."""
from __future__ import annotations

from lever.config import settings


def calculate_periodic_payment(principal: float, periodic_rate: float, n_payments: int) -> float:
    """Standard PMT formula for a fixed-rate amortizing loan.

    PMT = P * i / (1 - (1+i)^-n)
    """
    if n_payments <= 0 or principal <= 0:
        return 0.0
    if periodic_rate <= 0:
        return principal / n_payments
    return principal * periodic_rate / (1.0 - (1.0 + periodic_rate) ** -n_payments)


def period_length_days(payments_per_year: int) -> int:
    """Days between loan payments, e.g. 12/year -> 30 days."""
    if payments_per_year <= 0:
        return 0
    return max(1, round(settings.DAYS_PER_YEAR / payments_per_year))


def total_payments(loan_term_years: float, payments_per_year: int) -> int:
    if loan_term_years <= 0 or payments_per_year <= 0:
        return 0
    return round(loan_term_years * payments_per_year)
