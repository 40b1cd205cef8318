"""Turn a persisted plan into the engine's typed event list, and validate it.

Persisted events carry their parameters as ``[{type, value}]`` lists. Parsing
fills gaps from the schema's per-parameter defaults, maps legacy parameter
names, and validates each event against its typed model. A malformed event
(or modifier) is dropped with a logged warning; parsing never raises.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from lever.models.events import (
    ALLOWED_MODIFIERS,
    BUDGET_CATEGORIES,
    MAX_DECLARED_ACCOUNTS,
    EventType,
    ModifierType,
    SimEvent,
)
from lever.models.plan import (
    EnvelopeDefinition,
    Event,
    EventFunction,
    GrowthModel,
    Parameter,
    Plan,
    Schema,
    UpdatingEvent,
)
from lever.models.simulation import Issue

logger = logging.getLogger(__name__)

_EVENT_ADAPTER: TypeAdapter = TypeAdapter(SimEvent)

# Names used by older plans
_PARAMETER_ALIASES: dict[str, str] = {
    "source_envelope": "from_key",
    "destination_envelope": "to_key",
    "interval": "frequency_days",
}
_EVENT_TYPE_ALIASES: dict[str, str] = {
    "account_balance": EventType.declare_accounts.value,
}

_ENVELOPE_PARAMETER = re.compile(r"_key$|^account_\d+$")
_MAX_RATE = 0.40


# ---------------------------------------------------------------------------
# Parameter helpers
# ---------------------------------------------------------------------------
def _canonical_type(event_type: str) -> str:
    return _EVENT_TYPE_ALIASES.get(event_type, event_type)


def _parameter_map(
    parameters: list[Parameter],
    is_recurring: Optional[bool],
    defaults: dict[str, Any],
) -> dict[str, Any]:
    values: dict[str, Any] = {k: v for k, v in defaults.items() if v is not None}
    for parameter in parameters:
        name = _PARAMETER_ALIASES.get(parameter.type, parameter.type)
        if parameter.value is not None and parameter.value != "":
            values[name] = parameter.value
    if is_recurring is not None:
        values["is_recurring"] = is_recurring
    return values


def _schema_defaults(schema: Optional[Schema], event_type: str, modifier_type: Optional[str] = None) -> dict[str, Any]:
    if schema is None:
        return {}
    event_schema = schema.find_event(event_type)
    if event_schema is None:
        return {}
    parameters = event_schema.parameters
    if modifier_type is not None:
        modifier_schema = next((u for u in event_schema.updating_events if u.type == modifier_type), None)
        if modifier_schema is None:
            return {}
        parameters = modifier_schema.parameters
    return {_PARAMETER_ALIASES.get(p.type, p.type): p.default for p in parameters}


def _functions(event_functions: list[EventFunction]) -> dict[str, bool]:
    return {f.type: f.enabled for f in event_functions}


def _declared_balances(values: dict[str, Any]) -> dict[str, Any]:
    """Fold ``account_N`` / ``account_N_balance`` pairs into one mapping."""
    balances: dict[str, Any] = dict(values.pop("balances", {}) or {})
    for i in range(1, MAX_DECLARED_ACCOUNTS + 1):
        name = values.pop(f"account_{i}", None)
        balance = values.pop(f"account_{i}_balance", None)
        if name:
            balances[str(name)] = balance if balance is not None else 0.0
    values["balances"] = balances
    return values


def _budget_key(values: dict[str, Any]) -> dict[str, Any]:
    # Budget updates may name the field by "key" or by the category itself
    if not values.get("key"):
        for category in BUDGET_CATEGORIES:
            if category in values:
                values["key"] = category
                values["amount"] = values.pop(category)
                break
    return values


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def parse_event(event: Event, schema: Optional[Schema] = None) -> Optional[Any]:
    """Build one typed event, or None when it cannot be typed."""
    event_type = _canonical_type(event.type)
    if event_type not in ALLOWED_MODIFIERS:
        logger.debug("Event %d: unsupported type %r — ignored", event.id, event.type)
        return None

    params = _parameter_map(event.parameters, event.is_recurring, _schema_defaults(schema, event.type))
    if event_type == EventType.declare_accounts.value:
        params = _declared_balances(params)

    modifiers: list[dict[str, Any]] = []
    for updating in event.updating_events:
        modifier = _modifier_payload(event.id, event_type, updating, schema, event.type)
        if modifier is not None:
            modifiers.append(modifier)

    payload = {
        "id": event.id,
        "type": event_type,
        "functions": _functions(event.event_functions),
        "params": params,
        "updating_events": modifiers,
    }
    try:
        return _EVENT_ADAPTER.validate_python(payload)
    except ValidationError as e:
        logger.warning("Event %d (%s) dropped: %s", event.id, event.type, e)
        return None


def _modifier_payload(
    parent_id: int,
    parent_type: str,
    updating: UpdatingEvent,
    schema: Optional[Schema],
    schema_parent_type: str,
) -> Optional[dict[str, Any]]:
    if updating.type not in ALLOWED_MODIFIERS[parent_type]:
        logger.debug(
            "Event %d: modifier %r not understood by %s — ignored",
            parent_id, updating.type, parent_type,
        )
        return None
    params = _parameter_map(
        updating.parameters,
        updating.is_recurring,
        _schema_defaults(schema, schema_parent_type, updating.type),
    )
    if updating.type == ModifierType.update_monthly_budget.value:
        params = _budget_key(params)
    return {
        "id": updating.id,
        "type": updating.type,
        "functions": _functions(updating.event_functions),
        "params": params,
    }


def parse_events(plan: Plan, schema: Optional[Schema] = None) -> list[Any]:
    """Flatten and type every persisted event, preserving plan order."""
    events = []
    for event in plan.events:
        parsed = parse_event(event, schema)
        if parsed is not None:
            events.append(parsed)
    logger.debug("Parsed %d of %d events", len(events), len(plan.events))
    return events


def validate_problem(plan: Plan, schema: Optional[Schema] = None) -> list[Issue]:
    """Check plan/schema consistency. Never raises."""
    issues: list[Issue] = []
    issues.extend(_validate_envelopes(plan.envelopes))
    envelope_names = {e.name for e in plan.envelopes}

    for i, event in enumerate(plan.events):
        path = f"events[{i}]"
        event_type = _canonical_type(event.type)
        if event_type not in ALLOWED_MODIFIERS:
            issues.append(Issue(severity="warning", path=path, message=f"unsupported event type '{event.type}'"))
            continue
        if schema is not None and schema.find_event(event.type) is None:
            issues.append(Issue(severity="warning", path=path, message=f"event type '{event.type}' missing from schema"))

        issues.extend(_validate_parameters(
            path, event.parameters, envelope_names, _required(schema, event.type), event.is_recurring,
        ))

        for j, updating in enumerate(event.updating_events):
            sub_path = f"{path}.updating_events[{j}]"
            if updating.type not in ALLOWED_MODIFIERS[event_type]:
                issues.append(Issue(
                    severity="warning",
                    path=sub_path,
                    message=f"modifier '{updating.type}' is not supported by '{event_type}'",
                ))
                continue
            issues.extend(_validate_parameters(
                sub_path,
                updating.parameters,
                envelope_names,
                _required(schema, event.type, updating.type),
                updating.is_recurring,
            ))

        if parse_event(event, schema) is None:
            issues.append(Issue(severity="error", path=path, message="event parameters could not be parsed"))
    return issues


def _validate_envelopes(envelopes: list[EnvelopeDefinition]) -> list[Issue]:
    issues: list[Issue] = []
    seen: set[str] = set()
    for i, envelope in enumerate(envelopes):
        path = f"envelopes[{i}]"
        if envelope.name in seen:
            issues.append(Issue(severity="error", path=path, message=f"duplicate envelope name '{envelope.name}'"))
        seen.add(envelope.name)
        if not 0.0 <= envelope.rate <= _MAX_RATE:
            issues.append(Issue(
                severity="warning", path=path, message=f"rate {envelope.rate} outside [0, {_MAX_RATE}]",
            ))
        if envelope.growth == GrowthModel.depreciation_days and not (envelope.days_of_usefulness or 0) > 0:
            issues.append(Issue(
                severity="error", path=path, message="'Depreciation (Days)' requires a positive days_of_usefulness",
            ))
    return issues


def _required(schema: Optional[Schema], event_type: str, modifier_type: Optional[str] = None) -> set[str]:
    """Schema parameters without a default must be supplied by the event."""
    if schema is None:
        return set()
    defaults = _schema_defaults(schema, event_type, modifier_type)
    return {name for name, default in defaults.items() if default is None}


def _validate_parameters(
    path: str,
    parameters: list[Parameter],
    envelope_names: set[str],
    required: set[str],
    is_recurring: Optional[bool] = None,
) -> list[Issue]:
    issues: list[Issue] = []
    values = {_PARAMETER_ALIASES.get(p.type, p.type): p.value for p in parameters}

    for name in sorted(required - values.keys()):
        issues.append(Issue(severity="error", path=path, message=f"missing required parameter '{name}'"))

    for name, value in values.items():
        if _ENVELOPE_PARAMETER.search(name) and isinstance(value, str) and value and value not in envelope_names:
            issues.append(Issue(severity="warning", path=f"{path}.{name}", message=f"unknown envelope '{value}'"))
        if name == "amount" and isinstance(value, (int, float)) and value < 0:
            issues.append(Issue(severity="warning", path=f"{path}.amount", message="negative amount"))

    start, end = values.get("start_time"), values.get("end_time")
    if isinstance(start, (int, float)) and isinstance(end, (int, float)) and end < start:
        issues.append(Issue(severity="error", path=path, message="end_time precedes start_time"))

    frequency = values.get("frequency_days")
    if (is_recurring or values.get("is_recurring")) and isinstance(frequency, (int, float)) and round(frequency) <= 0:
        issues.append(Issue(severity="error", path=path, message="recurring event needs a positive frequency_days"))
    return issues
