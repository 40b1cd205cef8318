"""Simulation orchestration service.

Validates and parses a persisted plan, runs the engine, and hands the
accumulated parameter updates to the caller. Validation problems are logged
and the run proceeds best-effort.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from lever.models.plan import Plan, Schema
from lever.models.simulation import Datum, Issue, ParameterUpdate, SimulationResult
from lever.services.schema_checker import parse_events, validate_problem
from lever.simulation.aggregator import detect_account_warnings
from lever.simulation.engine import simulate

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[list[ParameterUpdate]], None]


def _log_issues(issues: list[Issue]) -> None:
    for issue in issues:
        if issue.severity == "error":
            logger.warning("Plan issue at %s: %s", issue.path, issue.message)
        else:
            logger.info("Plan issue at %s: %s", issue.path, issue.message)


def simulate_plan(
    plan: Plan,
    schema: Optional[Schema],
    start_day: int,
    end_day: int,
    on_parameter_update: Optional[UpdateCallback] = None,
    snapshot_interval: Optional[int] = None,
) -> SimulationResult:
    """Run a plan and return snapshots, proposed updates, issues and warnings."""
    issues = validate_problem(plan, schema)
    _log_issues(issues)

    events = parse_events(plan, schema)
    outcome = simulate(plan.envelopes, events, start_day, end_day, snapshot_interval)

    if on_parameter_update is not None and outcome.parameter_updates:
        on_parameter_update(list(outcome.parameter_updates))

    return SimulationResult(
        datums=outcome.datums,
        parameter_updates=outcome.parameter_updates,
        issues=issues,
        warnings=detect_account_warnings(outcome.datums, plan.envelopes),
        computed_at=datetime.now(timezone.utc),
    )


def run_simulation(
    plan: Plan,
    schema: Optional[Schema],
    start_day: int,
    end_day: int,
    on_parameter_update: Optional[UpdateCallback] = None,
    snapshot_interval: Optional[int] = None,
) -> list[Datum]:
    """Primary entry point: one Datum per simulated day (or per interval)."""
    result = simulate_plan(plan, schema, start_day, end_day, on_parameter_update, snapshot_interval)
    return result.datums
