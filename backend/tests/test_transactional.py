"""Tests for inflow, outflow, transfer, declaration, correction and budgeting."""
import pytest

from lever.models.events import InflowParams
from lever.services.simulation_service import run_simulation
from lever.simulation.schedule import fires_on
from tests.builders import balances_on, declare, envelope, event, make_plan, modifier


def _run(events, start=0, end=90, envelopes=None):
    envelopes = envelopes or [envelope("Checking"), envelope("Savings")]
    return run_simulation(make_plan(envelopes, events), None, start, end)


# --- Firing rule ---


def test_fires_on_start_day_even_when_not_recurring():
    params = InflowParams(start_time=5, amount=1.0)
    assert fires_on(params, 5)
    assert not fires_on(params, 6)


def test_fires_on_recurring_cadence_until_end():
    params = InflowParams(start_time=0, end_time=90, frequency_days=30, is_recurring=True)
    assert [d for d in range(0, 200) if fires_on(params, d)] == [0, 30, 60, 90]


def test_fires_on_rounds_fractional_frequency():
    params = InflowParams(start_time=0, end_time=100, frequency_days=30.4, is_recurring=True)
    assert fires_on(params, 30)
    assert not fires_on(params, 31)


def test_zero_frequency_only_fires_once():
    params = InflowParams(start_time=0, end_time=100, frequency_days=0, is_recurring=True)
    assert [d for d in range(0, 100) if fires_on(params, d)] == [0]


# --- inflow / outflow ---


def test_recurring_inflow_deposits_every_thirty_days():
    inflow = event(1, "inflow", amount=100, to_key="Checking", start_time=0,
                   frequency_days=30, is_recurring=True, end_time=90)
    datums = _run([inflow])
    assert balances_on(datums, 29)["Checking"] == 100
    assert balances_on(datums, 30)["Checking"] == 200
    assert balances_on(datums, 90)["Checking"] == 400


def test_outflow_debits_source():
    outflow = event(1, "outflow", amount=25, from_key="Checking", start_time=10)
    datums = _run([outflow])
    assert balances_on(datums, 9)["Checking"] == 0
    assert balances_on(datums, 10)["Checking"] == -25


def test_event_before_start_is_skipped_whole():
    inflow = event(1, "inflow", amount=100, to_key="Checking", start_time=50,
                   updating=[modifier(2, "additional_inflow", amount=5, to_key="Savings", start_time=10)])
    datums = _run([inflow])
    assert balances_on(datums, 49)["Savings"] == 0
    assert balances_on(datums, 50)["Checking"] == 100


def test_unknown_envelope_is_a_silent_no_op():
    inflow = event(1, "inflow", amount=100, to_key="Nowhere", start_time=0)
    datums = _run([inflow], end=1)
    assert balances_on(datums, 1) == {"Checking": 0, "Savings": 0}


# --- transfer_money ---


def test_transfer_moves_between_envelopes():
    transfer = event(1, "transfer_money", amount=40, from_key="Checking", to_key="Savings", start_time=0)
    datums = _run([declare(9, {"Checking": 100}), transfer], end=0)
    assert balances_on(datums, 0) == {"Checking": 60, "Savings": 40}


def test_transfer_with_missing_side_moves_nothing():
    transfer = event(1, "transfer_money", amount=40, from_key="Checking", to_key="Gone", start_time=0)
    datums = _run([declare(9, {"Checking": 100}), transfer], end=0)
    assert balances_on(datums, 0)["Checking"] == 100


def test_transfer_outflow_function_can_be_disabled():
    transfer = event(1, "transfer_money", amount=40, from_key="Checking", to_key="Savings",
                     start_time=0, functions={"outflow": False})
    datums = _run([transfer], end=0)
    assert balances_on(datums, 0) == {"Checking": 0, "Savings": 40}


# --- declare_accounts / manual_correction ---


def test_declare_accounts_sets_absolute_values():
    datums = _run([
        event(1, "inflow", amount=500, to_key="Checking", start_time=0),
        declare(2, {"Checking": 1000, "Savings": 250}),
    ], end=0)
    assert balances_on(datums, 0) == {"Checking": 1000, "Savings": 250}


def test_declare_accounts_legacy_alias():
    legacy = event(1, "account_balance", start_time=0, account_1="Savings", account_1_balance=75)
    datums = _run([legacy], end=0)
    assert balances_on(datums, 0)["Savings"] == 75


def test_manual_correction_overwrites_balance():
    datums = _run([
        declare(1, {"Checking": 1000}),
        event(2, "manual_correction", to_key="Checking", amount=5000, start_time=10),
    ], end=10)
    assert balances_on(datums, 9)["Checking"] == 1000
    assert balances_on(datums, 10)["Checking"] == 5000


# --- monthly_budgeting ---


def test_monthly_budgeting_debits_category_total():
    budget = event(1, "monthly_budgeting", from_key="Checking", start_time=0, end_time=365,
                   groceries=400, rent=1000)
    datums = _run([budget], end=30)
    assert balances_on(datums, 0)["Checking"] == -1400
    assert balances_on(datums, 30)["Checking"] == -2800


def test_update_monthly_budget_overwrites_one_field():
    budget = event(1, "monthly_budgeting", from_key="Checking", start_time=0, end_time=365,
                   groceries=400, rent=1000,
                   updating=[modifier(2, "update_monthly_budget", key="groceries", amount=600, start_time=30)])
    datums = _run([budget], end=30)
    assert balances_on(datums, 30)["Checking"] == -3000


# --- Modifiers ---


def test_update_amount_overwrites_from_its_start():
    inflow = event(1, "inflow", amount=100, to_key="Checking", start_time=0, frequency_days=30,
                   is_recurring=True, end_time=90,
                   updating=[modifier(2, "update_amount", amount=50, start_time=60)])
    datums = _run([inflow])
    assert balances_on(datums, 90)["Checking"] == 100 + 100 + 50 + 50


def test_increment_amount_persists_into_later_firings():
    inflow = event(1, "inflow", amount=100, to_key="Checking", start_time=0, frequency_days=30,
                   is_recurring=True, end_time=90,
                   updating=[modifier(2, "increment_amount", amount=10, start_time=30)])
    datums = _run([inflow])
    assert balances_on(datums, 90)["Checking"] == 100 + 110 + 110 + 110


def test_recurring_increment_accumulates():
    inflow = event(1, "inflow", amount=100, to_key="Checking", start_time=0, frequency_days=30,
                   is_recurring=True, end_time=90,
                   updating=[modifier(2, "increment_amount", amount=10, start_time=0, frequency_days=30,
                                      is_recurring=True, end_time=90)])
    datums = _run([inflow])
    assert balances_on(datums, 90)["Checking"] == 110 + 120 + 130 + 140


def test_update_amount_discards_earlier_increments():
    inflow = event(1, "inflow", amount=100, to_key="Checking", start_time=0, frequency_days=30,
                   is_recurring=True, end_time=90,
                   updating=[
                       modifier(2, "increment_amount", amount=10, start_time=30),
                       modifier(3, "update_amount", amount=200, start_time=60),
                   ])
    datums = _run([inflow])
    assert balances_on(datums, 90)["Checking"] == 100 + 110 + 200 + 200


def test_increment_does_not_leak_into_next_run():
    inflow = event(1, "inflow", amount=100, to_key="Checking", start_time=0, frequency_days=30,
                   is_recurring=True, end_time=90,
                   updating=[modifier(2, "increment_amount", amount=10, start_time=30)])
    plan = make_plan([envelope("Checking")], [inflow])
    first = run_simulation(plan, None, 0, 90)
    second = run_simulation(plan, None, 0, 90)
    assert first[-1].parts == second[-1].parts == {"Checking": 430}


def test_additional_inflow_deposits_independently():
    inflow = event(1, "inflow", amount=100, to_key="Checking", start_time=0,
                   updating=[modifier(2, "additional_inflow", amount=20, to_key="Savings", start_time=5,
                                      frequency_days=5, is_recurring=True, end_time=15)])
    datums = _run([inflow], end=20)
    assert balances_on(datums, 20) == {"Checking": 100, "Savings": pytest.approx(60)}
