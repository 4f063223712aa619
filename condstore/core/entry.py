from __future__ import annotations

from dataclasses import dataclass

from condstore.core.provider import DerivedProvider


@dataclass(slots=True, eq=False)
class ConditionEntry:
    """One row of the condition table.

    - Local: `provider is None`, `value` holds the stored integer.
    - Derived: `provider` computes the value; `value` is unused. `full_key` is empty for
      the row at the provider's own name and set to the exact key for rows synthesized
      through a prefix match.
    """

    value: int = 0
    provider: DerivedProvider | None = None
    full_key: str = ""

    @staticmethod
    def local(value: int = 0) -> ConditionEntry:
        return ConditionEntry(value=value)

    @staticmethod
    def derived(provider: DerivedProvider, *, full_key: str = "") -> ConditionEntry:
        return ConditionEntry(provider=provider, full_key=full_key)

    @property
    def is_derived(self) -> bool:
        return self.provider is not None

    def provider_key(self) -> str:
        """Key handed to the provider when the caller did not bring its own."""

        if self.provider is None:
            raise ValueError("Local entries have no provider key")
        return self.full_key or self.provider.name
