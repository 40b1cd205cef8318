from lever.models.events import BuyHouseParams, MonthlyBudgetingParams, PaymentScheduleParams
from lever.models.plan import AccountType, EnvelopeDefinition, GrowthModel, Plan, Schema, EventSchema
from lever.models.simulation import Datum, SimulationRequest
from lever.simulation.ledger import Ledger


def test_envelope_definition_defaults():
    env = EnvelopeDefinition(name="Checking")
    assert env.growth == GrowthModel.none
    assert env.account_type == AccountType.regular
    assert env.days_of_usefulness is None


def test_envelope_definition_from_persisted_labels():
    env = EnvelopeDefinition(
        name="Truck",
        category="Vehicle",
        growth="Depreciation (Days)",
        rate=0,
        days_of_usefulness=3650,
        account_type="system-controlled",
        tax_account_type="none",
    )
    assert env.growth == GrowthModel.depreciation_days
    assert env.account_type == AccountType.system_controlled


def test_plan_minimal():
    plan = Plan.model_validate({"envelopes": [{"name": "Checking"}], "events": []})
    assert plan.envelopes[0].name == "Checking"
    assert plan.events == []


def test_schema_find_event():
    schema = Schema(events=[EventSchema(type="inflow")])
    assert schema.find_event("inflow").type == "inflow"
    assert schema.find_event("outflow") is None


def test_typed_param_defaults():
    assert MonthlyBudgetingParams().is_recurring is True
    assert MonthlyBudgetingParams().frequency_days == 30
    assert PaymentScheduleParams().is_recurring is True
    assert BuyHouseParams().payments_per_year == 12


def test_simulation_request_accepts_schema_alias():
    request = SimulationRequest.model_validate({
        "plan": {"envelopes": [], "events": []},
        "schema": {"events": []},
        "start_day": 0,
        "end_day": 10,
    })
    assert request.event_schema is not None
    assert request.snapshot_interval is None


def test_datum_defaults():
    datum = Datum(date=3, value=1.5, parts={"A": 1.5})
    assert datum.non_networth_parts == {}


def test_ledger_starts_at_zero_and_ignores_unknown_names():
    ledger = Ledger.initialize([EnvelopeDefinition(name="A"), EnvelopeDefinition(name="B")])
    assert [e.balance for e in ledger] == [0.0, 0.0]
    assert ledger.get("missing") is None
    assert ledger.credit("missing", 10) is False
    assert ledger.credit("A", 10) is True
    assert ledger.balance("A") == 10
