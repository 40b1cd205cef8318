from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel


class GrowthModel(str, Enum):
    """Per-envelope balance growth model, applied once per simulated day."""
    none = "None"
    simple_interest = "Simple Interest"
    appreciation = "Appreciation"
    daily_compound = "Daily Compound"
    monthly_compound = "Monthly Compound"
    yearly_compound = "Yearly Compound"
    depreciation = "Depreciation"
    depreciation_days = "Depreciation (Days)"


class AccountType(str, Enum):
    regular = "regular"
    non_networth = "non_networth"
    system_controlled = "system-controlled"


class TaxAccountType(str, Enum):
    none = "none"
    usa_rothira = "usa_rothira"
    usa_traditionalira = "usa_traditionalira"
    usa_401k = "usa_401k"


DEBT_CATEGORY = "Debt"


class EnvelopeDefinition(BaseModel):
    """Persisted envelope record. Never mutated by the engine."""
    name: str
    category: str = ""
    growth: GrowthModel = GrowthModel.none
    rate: float = 0.0
    days_of_usefulness: Optional[int] = None
    account_type: AccountType = AccountType.regular
    tax_account_type: TaxAccountType = TaxAccountType.none


class Parameter(BaseModel):
    type: str
    value: Union[float, int, bool, str, None] = None


class EventFunction(BaseModel):
    type: str
    enabled: bool = True


class UpdatingEvent(BaseModel):
    id: int
    type: str
    is_recurring: Optional[bool] = None
    parameters: list[Parameter] = []
    event_functions: list[EventFunction] = []


class Event(BaseModel):
    id: int
    type: str
    description: Optional[str] = None
    is_recurring: Optional[bool] = None
    parameters: list[Parameter] = []
    event_functions: list[EventFunction] = []
    updating_events: list[UpdatingEvent] = []


class Plan(BaseModel):
    title: Optional[str] = None
    birth_date: Optional[str] = None
    envelopes: list[EnvelopeDefinition] = []
    events: list[Event] = []


class ParameterSchema(BaseModel):
    type: str
    display_name: Optional[str] = None
    parameter_units: Optional[str] = None
    default: Any = None


class UpdatingEventSchema(BaseModel):
    type: str
    display_name: Optional[str] = None
    parameters: list[ParameterSchema] = []


class EventSchema(BaseModel):
    type: str
    display_name: Optional[str] = None
    parameters: list[ParameterSchema] = []
    updating_events: list[UpdatingEventSchema] = []


class Schema(BaseModel):
    """Event catalogue describing each event kind's parameters and defaults."""
    events: list[EventSchema] = []

    def find_event(self, event_type: str) -> Optional[EventSchema]:
        return next((e for e in self.events if e.type == event_type), None)
