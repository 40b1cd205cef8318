from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from lever.models.plan import Plan, Schema


class Datum(BaseModel):
    """Snapshot of every envelope at the end of one simulated day."""
    date: int
    value: float
    parts: dict[str, float]
    non_networth_parts: dict[str, float] = {}


class ParameterUpdate(BaseModel):
    """Advisory correction to a persisted event parameter."""
    event_id: int
    parameter_name: str
    value: Union[float, int, str]


class Issue(BaseModel):
    """Plan/schema consistency problem found by validation."""
    severity: Literal["error", "warning"]
    path: str
    message: str


class AccountWarning(BaseModel):
    envelope_name: str
    date: int
    balance: float


class SimulationRequest(BaseModel):
    """Request body for running a plan — inline plan and schema, no storage."""
    model_config = ConfigDict(populate_by_name=True)

    plan: Plan
    event_schema: Optional[Schema] = Field(default=None, alias="schema")
    start_day: int
    end_day: int
    snapshot_interval: Optional[int] = None


class SimulationResult(BaseModel):
    datums: list[Datum]
    parameter_updates: list[ParameterUpdate] = []
    issues: list[Issue] = []
    warnings: list[AccountWarning] = []
    computed_at: datetime
