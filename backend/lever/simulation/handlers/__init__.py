"""Event handlers, one per event kind, grouped by family."""
from lever.simulation.handlers.transactional import (
    apply_transactional_modifier,
    handle_declare_accounts,
    handle_inflow,
    handle_manual_correction,
    handle_monthly_budgeting,
    handle_outflow,
    handle_transfer,
)
from lever.simulation.handlers.loans import (
    apply_car_modifier,
    apply_house_modifier,
    handle_buy_car,
    handle_buy_house,
    handle_payment_schedule,
)
from lever.simulation.handlers.payroll import (
    apply_payroll_modifier,
    handle_get_job,
    handle_get_wage_job,
)

__all__ = [
    "apply_transactional_modifier",
    "apply_car_modifier",
    "apply_house_modifier",
    "apply_payroll_modifier",
    "handle_declare_accounts",
    "handle_inflow",
    "handle_manual_correction",
    "handle_monthly_budgeting",
    "handle_outflow",
    "handle_transfer",
    "handle_buy_car",
    "handle_buy_house",
    "handle_payment_schedule",
    "handle_get_job",
    "handle_get_wage_job",
]
