"""Envelope ledger — per-run balances and growth configuration."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from lever.models.plan import DEBT_CATEGORY, AccountType, EnvelopeDefinition, GrowthModel


@dataclass
class EnvelopeState:
    """Simulation-time view of one envelope. Discarded at run end."""
    name: str
    balance: float
    growth_model: GrowthModel
    annual_rate: float
    account_type: AccountType
    category: str
    days_of_usefulness: Optional[int] = None
    elapsed_days: int = 0
    depreciation_baseline: Optional[float] = None

    @classmethod
    def from_definition(cls, definition: EnvelopeDefinition) -> "EnvelopeState":
        return cls(
            name=definition.name,
            balance=0.0,
            growth_model=definition.growth,
            annual_rate=definition.rate,
            account_type=definition.account_type,
            category=definition.category,
            days_of_usefulness=definition.days_of_usefulness,
        )

    @property
    def is_debt(self) -> bool:
        return self.category == DEBT_CATEGORY

    @property
    def counts_toward_networth(self) -> bool:
        return self.account_type != AccountType.non_networth


class Ledger:
    """Envelope states keyed by name, in definition order."""

    def __init__(self, envelopes: dict[str, EnvelopeState]) -> None:
        self._envelopes = envelopes

    @classmethod
    def initialize(cls, definitions: Iterable[EnvelopeDefinition]) -> "Ledger":
        envelopes: dict[str, EnvelopeState] = {}
        for definition in definitions:
            # First definition wins on duplicate names
            if definition.name not in envelopes:
                envelopes[definition.name] = EnvelopeState.from_definition(definition)
        return cls(envelopes)

    def get(self, name: Optional[str]) -> Optional[EnvelopeState]:
        """Return the named envelope, or None when the plan no longer has it."""
        if not name:
            return None
        return self._envelopes.get(name)

    def credit(self, name: Optional[str], amount: float) -> bool:
        """Add ``amount`` to an envelope. False when the envelope is missing."""
        envelope = self.get(name)
        if envelope is None:
            return False
        envelope.balance += amount
        return True

    def debit(self, name: Optional[str], amount: float) -> bool:
        return self.credit(name, -amount)

    def set_balance(self, name: Optional[str], value: float) -> bool:
        envelope = self.get(name)
        if envelope is None:
            return False
        envelope.balance = value
        return True

    def balance(self, name: Optional[str]) -> Optional[float]:
        envelope = self.get(name)
        return envelope.balance if envelope is not None else None

    def __iter__(self) -> Iterator[EnvelopeState]:
        return iter(self._envelopes.values())

    def __len__(self) -> int:
        return len(self._envelopes)

    def __contains__(self, name: object) -> bool:
        return name in self._envelopes
