"""Output aggregation — net worth snapshots and balance warnings."""
from __future__ import annotations

from typing import Iterable, Sequence

from lever.models.plan import DEBT_CATEGORY, EnvelopeDefinition
from lever.models.simulation import AccountWarning, Datum
from lever.simulation.ledger import Ledger


def snapshot(ledger: Ledger, day: int) -> Datum:
    """Partition envelopes and sum net worth for one day.

    Non-networth envelopes are reported separately and never counted; debt
    envelopes subtract their absolute balance whatever its sign.
    """
    net_worth = 0.0
    parts: dict[str, float] = {}
    non_networth_parts: dict[str, float] = {}

    for envelope in ledger:
        if not envelope.counts_toward_networth:
            non_networth_parts[envelope.name] = envelope.balance
            continue
        parts[envelope.name] = envelope.balance
        if envelope.is_debt:
            net_worth -= abs(envelope.balance)
        else:
            net_worth += envelope.balance

    return Datum(date=day, value=net_worth, parts=parts, non_networth_parts=non_networth_parts)


def detect_account_warnings(
    datums: Sequence[Datum], envelopes: Iterable[EnvelopeDefinition]
) -> list[AccountWarning]:
    """Every day a non-debt, net-worth-counted envelope is below zero."""
    categories = {e.name: e.category for e in envelopes}
    warnings: list[AccountWarning] = []
    for datum in datums:
        for name, balance in datum.parts.items():
            if name in categories and categories[name] != DEBT_CATEGORY and balance < 0:
                warnings.append(AccountWarning(envelope_name=name, date=datum.date, balance=balance))
    return warnings
