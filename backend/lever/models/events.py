"""Typed engine events — one model per event kind, one parameter record per kind.

The schema checker turns persisted ``Event`` records into these models.
Each kind carries a ``Literal`` type tag so ``SimEvent`` can be validated as a
discriminated union, and only the modifiers its kind understands.
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    inflow = "inflow"
    outflow = "outflow"
    transfer_money = "transfer_money"
    declare_accounts = "declare_accounts"
    manual_correction = "manual_correction"
    monthly_budgeting = "monthly_budgeting"
    buy_house = "buy_house"
    buy_car = "buy_car"
    payment_schedule = "payment_schedule"
    get_job = "get_job"
    get_wage_job = "get_wage_job"


class ModifierType(str, Enum):
    update_amount = "update_amount"
    increment_amount = "increment_amount"
    additional_inflow = "additional_inflow"
    update_monthly_budget = "update_monthly_budget"
    new_appraisal = "new_appraisal"
    extra_mortgage_payment = "extra_mortgage_payment"
    pay_loan_early = "pay_loan_early"
    late_payment = "late_payment"
    sell_house = "sell_house"
    refinance_home = "refinance_home"
    car_repair = "car_repair"
    get_a_raise = "get_a_raise"
    reoccurring_raise = "reoccurring_raise"
    get_a_bonus = "get_a_bonus"
    change_401k_contribution = "change_401k_contribution"
    change_hours = "change_hours"
    change_employer_match = "change_employer_match"


BUDGET_CATEGORIES = (
    "rent",
    "groceries",
    "dining_out",
    "utilities",
    "transportation",
    "entertainment",
    "healthcare",
    "insurance",
    "personal_care",
    "subscriptions",
    "miscellaneous",
)

MAX_DECLARED_ACCOUNTS = 5


# ---------------------------------------------------------------------------
# Parameter records
# ---------------------------------------------------------------------------
class TimedParams(BaseModel):
    """Parameters shared by every event and modifier."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    start_time: int = 0
    end_time: Optional[int] = None  # None = open-ended
    frequency_days: float = 0.0
    is_recurring: bool = False


class AmountParams(TimedParams):
    amount: float = 0.0


class InflowParams(AmountParams):
    to_key: str = ""


class OutflowParams(AmountParams):
    from_key: str = ""


class TransferParams(AmountParams):
    from_key: str = ""
    to_key: str = ""


class DeclareAccountsParams(TimedParams):
    balances: dict[str, float] = {}


class ManualCorrectionParams(AmountParams):
    to_key: str = ""


class MonthlyBudgetingParams(TimedParams):
    from_key: str = ""
    frequency_days: float = 30.0
    is_recurring: bool = True
    rent: float = 0.0
    groceries: float = 0.0
    dining_out: float = 0.0
    utilities: float = 0.0
    transportation: float = 0.0
    entertainment: float = 0.0
    healthcare: float = 0.0
    insurance: float = 0.0
    personal_care: float = 0.0
    subscriptions: float = 0.0
    miscellaneous: float = 0.0


class AdditionalInflowParams(AmountParams):
    to_key: str = ""


class UpdateMonthlyBudgetParams(AmountParams):
    key: str = ""


class BuyHouseParams(TimedParams):
    home_value: float = 0.0
    downpayment: float = 0.0
    loan_term_years: float = 30.0
    annual_interest_rate: float = 0.0
    property_tax_rate: float = 0.0
    payments_per_year: int = 12
    from_key: str = ""
    to_key: str = ""
    mortgage_key: str = ""


class BuyCarParams(TimedParams):
    car_value: float = 0.0
    downpayment: float = 0.0
    loan_term_years: float = 5.0
    annual_interest_rate: float = 0.0
    payments_per_year: int = 12
    from_key: str = ""
    to_key: str = ""
    loan_key: str = ""


class PaymentScheduleParams(AmountParams):
    from_key: str = ""
    to_key: str = ""
    frequency_days: float = 30.0
    is_recurring: bool = True


class NewAppraisalParams(TimedParams):
    appraised_value: float = 0.0


class ExtraPaymentParams(AmountParams):
    from_key: Optional[str] = None


class LatePaymentParams(AmountParams):
    from_key: Optional[str] = None


class SellHouseParams(TimedParams):
    sale_price: float = 0.0
    to_key: Optional[str] = None


class RefinanceHomeParams(TimedParams):
    annual_interest_rate: float = 0.0
    loan_term_years: float = 30.0
    payments_per_year: Optional[int] = None
    new_loan_key: Optional[str] = None


class CarRepairParams(AmountParams):
    from_key: Optional[str] = None


class PayrollParams(TimedParams):
    """Withholding pipeline shared by salaried and wage jobs."""
    pay_period: Optional[float] = None  # paychecks per year
    to_key: str = ""
    retirement_key: Optional[str] = None
    p_401k_contribution: float = 0.0
    p_401k_match: float = 0.0
    federal_tax_rate: float = 0.0
    state_tax_rate: float = 0.0
    local_tax_rate: float = 0.0
    social_security_rate: float = 0.062
    medicare_rate: float = 0.0145
    federal_withholding_key: Optional[str] = "Federal Withholdings"
    state_withholding_key: Optional[str] = "State Withholdings"
    local_withholding_key: Optional[str] = "Local Withholdings"
    social_security_key: Optional[str] = "Social Security"
    medicare_key: Optional[str] = "Medicare"


class GetJobParams(PayrollParams):
    salary: float = 0.0


class GetWageJobParams(PayrollParams):
    hourly_wage: float = 0.0
    hours_per_week: float = 40.0


class SalaryChangeParams(TimedParams):
    salary: float = 0.0


class WageChangeParams(TimedParams):
    hourly_wage: float = 0.0


class BonusParams(AmountParams):
    to_key: Optional[str] = None


class Contribution401kParams(TimedParams):
    p_401k_contribution: float = 0.0


class EmployerMatchParams(TimedParams):
    p_401k_match: float = 0.0


class HoursParams(TimedParams):
    hours_per_week: float = 0.0


# ---------------------------------------------------------------------------
# Modifiers (updating events)
# ---------------------------------------------------------------------------
class ModifierBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    functions: dict[str, bool] = {}

    def enabled(self, function: str) -> bool:
        return self.functions.get(function, True)


class UpdateAmount(ModifierBase):
    type: Literal["update_amount"] = "update_amount"
    params: AmountParams = AmountParams()


class IncrementAmount(ModifierBase):
    type: Literal["increment_amount"] = "increment_amount"
    params: AmountParams = AmountParams()


class AdditionalInflow(ModifierBase):
    type: Literal["additional_inflow"] = "additional_inflow"
    params: AdditionalInflowParams = AdditionalInflowParams()


class UpdateMonthlyBudget(ModifierBase):
    type: Literal["update_monthly_budget"] = "update_monthly_budget"
    params: UpdateMonthlyBudgetParams = UpdateMonthlyBudgetParams()


class NewAppraisal(ModifierBase):
    type: Literal["new_appraisal"] = "new_appraisal"
    params: NewAppraisalParams = NewAppraisalParams()


class ExtraPayment(ModifierBase):
    type: Literal["extra_mortgage_payment", "pay_loan_early"] = "extra_mortgage_payment"
    params: ExtraPaymentParams = ExtraPaymentParams()


class LatePayment(ModifierBase):
    type: Literal["late_payment"] = "late_payment"
    params: LatePaymentParams = LatePaymentParams()


class SellHouse(ModifierBase):
    type: Literal["sell_house"] = "sell_house"
    params: SellHouseParams = SellHouseParams()


class RefinanceHome(ModifierBase):
    type: Literal["refinance_home"] = "refinance_home"
    params: RefinanceHomeParams = RefinanceHomeParams()


class CarRepair(ModifierBase):
    type: Literal["car_repair"] = "car_repair"
    params: CarRepairParams = CarRepairParams()


class SalaryRaise(ModifierBase):
    type: Literal["get_a_raise"] = "get_a_raise"
    params: SalaryChangeParams = SalaryChangeParams()


class WageRaise(ModifierBase):
    type: Literal["get_a_raise"] = "get_a_raise"
    params: WageChangeParams = WageChangeParams()


class RecurringRaise(ModifierBase):
    type: Literal["reoccurring_raise"] = "reoccurring_raise"
    params: AmountParams = AmountParams()


class Bonus(ModifierBase):
    type: Literal["get_a_bonus"] = "get_a_bonus"
    params: BonusParams = BonusParams()


class Change401kContribution(ModifierBase):
    type: Literal["change_401k_contribution"] = "change_401k_contribution"
    params: Contribution401kParams = Contribution401kParams()


class ChangeEmployerMatch(ModifierBase):
    type: Literal["change_employer_match"] = "change_employer_match"
    params: EmployerMatchParams = EmployerMatchParams()


class ChangeHours(ModifierBase):
    type: Literal["change_hours"] = "change_hours"
    params: HoursParams = HoursParams()


TransactionalModifier = Annotated[
    Union[UpdateAmount, IncrementAmount, AdditionalInflow],
    Field(discriminator="type"),
]
HouseModifier = Annotated[
    Union[NewAppraisal, ExtraPayment, LatePayment, SellHouse, RefinanceHome],
    Field(discriminator="type"),
]
CarModifier = Annotated[
    Union[ExtraPayment, LatePayment, CarRepair],
    Field(discriminator="type"),
]
JobModifier = Annotated[
    Union[SalaryRaise, RecurringRaise, Bonus, Change401kContribution, ChangeEmployerMatch],
    Field(discriminator="type"),
]
WageJobModifier = Annotated[
    Union[WageRaise, RecurringRaise, Bonus, Change401kContribution, ChangeEmployerMatch, ChangeHours],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
class EventBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    functions: dict[str, bool] = {}

    def enabled(self, function: str) -> bool:
        return self.functions.get(function, True)


class InflowEvent(EventBase):
    type: Literal["inflow"] = "inflow"
    params: InflowParams = InflowParams()
    updating_events: list[TransactionalModifier] = []


class OutflowEvent(EventBase):
    type: Literal["outflow"] = "outflow"
    params: OutflowParams = OutflowParams()
    updating_events: list[TransactionalModifier] = []


class TransferMoneyEvent(EventBase):
    type: Literal["transfer_money"] = "transfer_money"
    params: TransferParams = TransferParams()
    updating_events: list[TransactionalModifier] = []


class DeclareAccountsEvent(EventBase):
    type: Literal["declare_accounts"] = "declare_accounts"
    params: DeclareAccountsParams = DeclareAccountsParams()
    updating_events: list[TransactionalModifier] = []


class ManualCorrectionEvent(EventBase):
    type: Literal["manual_correction"] = "manual_correction"
    params: ManualCorrectionParams = ManualCorrectionParams()
    updating_events: list[TransactionalModifier] = []


class MonthlyBudgetingEvent(EventBase):
    type: Literal["monthly_budgeting"] = "monthly_budgeting"
    params: MonthlyBudgetingParams = MonthlyBudgetingParams()
    updating_events: list[UpdateMonthlyBudget] = []


class BuyHouseEvent(EventBase):
    type: Literal["buy_house"] = "buy_house"
    params: BuyHouseParams = BuyHouseParams()
    updating_events: list[HouseModifier] = []


class BuyCarEvent(EventBase):
    type: Literal["buy_car"] = "buy_car"
    params: BuyCarParams = BuyCarParams()
    updating_events: list[CarModifier] = []


class PaymentScheduleEvent(EventBase):
    type: Literal["payment_schedule"] = "payment_schedule"
    params: PaymentScheduleParams = PaymentScheduleParams()
    updating_events: list[TransactionalModifier] = []


class GetJobEvent(EventBase):
    type: Literal["get_job"] = "get_job"
    params: GetJobParams = GetJobParams()
    updating_events: list[JobModifier] = []


class GetWageJobEvent(EventBase):
    type: Literal["get_wage_job"] = "get_wage_job"
    params: GetWageJobParams = GetWageJobParams()
    updating_events: list[WageJobModifier] = []


SimEvent = Annotated[
    Union[
        InflowEvent,
        OutflowEvent,
        TransferMoneyEvent,
        DeclareAccountsEvent,
        ManualCorrectionEvent,
        MonthlyBudgetingEvent,
        BuyHouseEvent,
        BuyCarEvent,
        PaymentScheduleEvent,
        GetJobEvent,
        GetWageJobEvent,
    ],
    Field(discriminator="type"),
]

ALLOWED_MODIFIERS: dict[str, frozenset[str]] = {
    EventType.inflow.value: frozenset({"update_amount", "increment_amount", "additional_inflow"}),
    EventType.outflow.value: frozenset({"update_amount", "increment_amount", "additional_inflow"}),
    EventType.transfer_money.value: frozenset({"update_amount", "increment_amount", "additional_inflow"}),
    EventType.declare_accounts.value: frozenset({"update_amount", "increment_amount", "additional_inflow"}),
    EventType.manual_correction.value: frozenset({"update_amount", "increment_amount", "additional_inflow"}),
    EventType.monthly_budgeting.value: frozenset({"update_monthly_budget"}),
    EventType.buy_house.value: frozenset(
        {"new_appraisal", "extra_mortgage_payment", "pay_loan_early", "late_payment", "sell_house", "refinance_home"}
    ),
    EventType.buy_car.value: frozenset({"extra_mortgage_payment", "pay_loan_early", "late_payment", "car_repair"}),
    EventType.payment_schedule.value: frozenset({"update_amount", "increment_amount", "additional_inflow"}),
    EventType.get_job.value: frozenset(
        {"get_a_raise", "reoccurring_raise", "get_a_bonus", "change_401k_contribution", "change_employer_match"}
    ),
    EventType.get_wage_job.value: frozenset(
        {
            "get_a_raise",
            "reoccurring_raise",
            "get_a_bonus",
            "change_401k_contribution",
            "change_employer_match",
            "change_hours",
        }
    ),
}
