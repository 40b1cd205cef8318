"""Tests for plan parsing and validation."""
import pytest
from pydantic import ValidationError

from lever.models.events import BuyHouseEvent, DeclareAccountsEvent, InflowEvent, MonthlyBudgetingEvent
from lever.models.plan import EventSchema, ParameterSchema, Schema, UpdatingEventSchema
from lever.services.schema_checker import parse_event, parse_events, validate_problem
from tests.builders import envelope, event, make_plan, modifier


def _schema() -> Schema:
    return Schema(events=[
        EventSchema(
            type="inflow",
            parameters=[
                ParameterSchema(type="start_time"),
                ParameterSchema(type="amount", default=250),
                ParameterSchema(type="to_key"),
                ParameterSchema(type="frequency_days", default=30),
            ],
            updating_events=[
                UpdatingEventSchema(type="increment_amount", parameters=[
                    ParameterSchema(type="start_time"),
                    ParameterSchema(type="amount", default=5),
                ]),
            ],
        ),
    ])


# --- parse_events ---


def test_parse_builds_typed_event():
    parsed = parse_event(event(1, "inflow", amount=100, to_key="Checking", start_time=3))
    assert isinstance(parsed, InflowEvent)
    assert parsed.params.amount == 100.0
    assert parsed.params.to_key == "Checking"
    assert parsed.params.start_time == 3


def test_parse_applies_legacy_parameter_names():
    parsed = parse_event(event(1, "inflow", amount=100, destination_envelope="Savings",
                               interval=14, is_recurring=True))
    assert parsed.params.to_key == "Savings"
    assert parsed.params.frequency_days == 14
    assert parsed.params.is_recurring is True


def test_parse_reads_event_level_recurring_flag():
    parsed = parse_event(event(1, "outflow", amount=5, source_envelope="Checking", is_recurring=True))
    assert parsed.params.is_recurring is True
    assert parsed.params.from_key == "Checking"


def test_parse_fills_schema_defaults():
    parsed = parse_event(
        event(1, "inflow", to_key="Checking", updating=[modifier(2, "increment_amount", start_time=10)]),
        _schema(),
    )
    assert parsed.params.amount == 250.0
    assert parsed.params.frequency_days == 30.0
    assert parsed.updating_events[0].params.amount == 5.0


def test_parse_declare_accounts_pairs():
    parsed = parse_event(event(1, "declare_accounts", account_1="Checking", account_1_balance=10,
                               account_2="Savings", account_2_balance="20.5"))
    assert isinstance(parsed, DeclareAccountsEvent)
    assert parsed.params.balances == {"Checking": 10.0, "Savings": 20.5}


def test_parse_budget_update_by_category_name():
    parsed = parse_event(event(1, "monthly_budgeting", from_key="Checking", rent=900,
                               updating=[modifier(2, "update_monthly_budget", rent=950, start_time=30)]))
    assert isinstance(parsed, MonthlyBudgetingEvent)
    update = parsed.updating_events[0]
    assert update.params.key == "rent"
    assert update.params.amount == 950.0


def test_parse_keeps_function_flags():
    parsed = parse_event(event(1, "buy_house", home_value=1, functions={"property_tax": False}))
    assert isinstance(parsed, BuyHouseEvent)
    assert parsed.enabled("property_tax") is False
    assert parsed.enabled("mortgage_payment") is True


def test_parse_drops_unknown_and_malformed_events():
    plan = make_plan([envelope("Checking")], [
        event(1, "start_a_podcast", amount=1),
        event(2, "inflow", amount="lots", to_key="Checking"),
        event(3, "inflow", amount=10, to_key="Checking"),
    ])
    parsed = parse_events(plan)
    assert [e.id for e in parsed] == [3]


def test_parse_drops_modifiers_the_parent_does_not_understand():
    parsed = parse_event(event(1, "inflow", amount=10, to_key="Checking",
                               updating=[modifier(2, "sell_house", sale_price=1), modifier(3, "update_amount", amount=2)]))
    assert [m.type for m in parsed.updating_events] == ["update_amount"]


def test_parsed_events_are_immutable():
    parsed = parse_event(event(1, "inflow", amount=10, to_key="Checking"))
    with pytest.raises(ValidationError):
        parsed.params.amount = 99
    assert parsed.params.amount == 10.0


# --- validate_problem ---


def _messages(issues):
    return [(i.severity, i.path, i.message) for i in issues]


def test_clean_plan_has_no_issues():
    plan = make_plan([envelope("Checking")], [event(1, "inflow", amount=10, to_key="Checking", start_time=0)])
    assert validate_problem(plan) == []


def test_validate_envelope_problems():
    plan = make_plan([
        envelope("Checking"),
        envelope("Checking"),
        envelope("Truck", growth="Depreciation (Days)"),
        envelope("Moonshot", growth="Daily Compound", rate=0.9),
    ], [])
    messages = _messages(validate_problem(plan))
    assert ("error", "envelopes[1]", "duplicate envelope name 'Checking'") in messages
    assert any(p == "envelopes[2]" and "days_of_usefulness" in m for _, p, m in messages)
    assert any(s == "warning" and p == "envelopes[3]" for s, p, _ in messages)


def test_validate_event_problems():
    plan = make_plan([envelope("Checking")], [
        event(1, "inflow", amount=10, to_key="Ghost", start_time=50, end_time=10),
        event(2, "outflow", amount=-5, from_key="Checking", is_recurring=True, frequency_days=0),
        event(3, "inflow", amount=1, to_key="Checking", updating=[modifier(4, "get_a_bonus", amount=1)]),
        event(5, "time_travel"),
    ])
    messages = _messages(validate_problem(plan))
    assert ("warning", "events[0].to_key", "unknown envelope 'Ghost'") in messages
    assert ("error", "events[0]", "end_time precedes start_time") in messages
    assert ("warning", "events[1].amount", "negative amount") in messages
    assert ("error", "events[1]", "recurring event needs a positive frequency_days") in messages
    assert ("warning", "events[2].updating_events[0]", "modifier 'get_a_bonus' is not supported by 'inflow'") in messages
    assert ("warning", "events[3]", "unsupported event type 'time_travel'") in messages


def test_validate_required_parameters_from_schema():
    plan = make_plan([envelope("Checking")], [event(1, "inflow", amount=10)])
    messages = _messages(validate_problem(plan, _schema()))
    assert ("error", "events[0]", "missing required parameter 'start_time'") in messages
    assert ("error", "events[0]", "missing required parameter 'to_key'") in messages


def test_validate_flags_unparseable_event():
    plan = make_plan([envelope("Checking")], [event(1, "inflow", amount="lots", to_key="Checking")])
    messages = _messages(validate_problem(plan))
    assert ("error", "events[0]", "event parameters could not be parsed") in messages
