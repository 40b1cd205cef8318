from fastapi import APIRouter, HTTPException

from lever.config import settings
from lever.models.simulation import SimulationRequest, SimulationResult
from lever.services.simulation_service import simulate_plan

router = APIRouter(tags=["simulations"])


@router.post("/simulations/run", response_model=SimulationResult)
def run_simulation_endpoint(request: SimulationRequest):
    """Run an inline plan over a day range.

    Returns one snapshot per day (or per ``snapshot_interval``), the parameter
    updates the caller may want to persist, validation issues, and negative
    balance warnings.
    """
    if request.end_day < request.start_day:
        raise HTTPException(status_code=422, detail="end_day must not precede start_day")
    if request.end_day - request.start_day > settings.MAX_SIMULATION_DAYS:
        raise HTTPException(
            status_code=422,
            detail=f"Range exceeds {settings.MAX_SIMULATION_DAYS} days",
        )
    if request.snapshot_interval is not None and request.snapshot_interval < 1:
        raise HTTPException(status_code=422, detail="snapshot_interval must be at least 1")

    return simulate_plan(
        request.plan,
        request.event_schema,
        request.start_day,
        request.end_day,
        snapshot_interval=request.snapshot_interval,
    )
