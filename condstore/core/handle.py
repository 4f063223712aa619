from __future__ import annotations

from collections.abc import Callable

from condstore.core.entry import ConditionEntry
from condstore.core.provider import StaleReferenceError
from condstore.core.table import EntryTable


class ConditionHandle:
    """Mutable view of a single table row, used for `+=`, `++` and friends in scripts.

    Local rows are updated in place. Derived rows go through the provider with the
    row's provider key, so `increment()` on a derived row is `set(key, get(key) + 1)`.
    Mutators return the success flag of the underlying write.

    A handle is only valid while its row is in the table: erasing the row or clearing
    the store makes every operation raise StaleReferenceError.
    """

    __slots__ = ("_table", "_key", "_entry", "_generation", "_current_generation")

    def __init__(
        self,
        *,
        table: EntryTable,
        key: str,
        entry: ConditionEntry,
        generation: int,
        current_generation: Callable[[], int],
    ) -> None:
        self._table = table
        self._key = key
        self._entry = entry
        self._generation = generation
        self._current_generation = current_generation

    @property
    def key(self) -> str:
        return self._key

    @property
    def is_derived(self) -> bool:
        return self._entry.is_derived

    def _live(self) -> ConditionEntry:
        if self._generation != self._current_generation() or self._table.find(self._key) is not self._entry:
            raise StaleReferenceError(f"Condition handle for '{self._key}' no longer points at a stored row")
        return self._entry

    def read(self) -> int:
        entry = self._live()
        if entry.provider is None:
            return entry.value
        return entry.provider.get(entry.provider_key())

    def write(self, value: int) -> bool:
        entry = self._live()
        if entry.provider is None:
            entry.value = value
            return True
        return entry.provider.set(entry.provider_key(), value)

    def add_assign(self, delta: int) -> bool:
        entry = self._live()
        if entry.provider is None:
            entry.value += delta
            return True
        key = entry.provider_key()
        return entry.provider.set(key, entry.provider.get(key) + delta)

    def sub_assign(self, delta: int) -> bool:
        return self.add_assign(-delta)

    def increment(self) -> bool:
        return self.add_assign(1)

    def decrement(self) -> bool:
        return self.add_assign(-1)

    def __repr__(self) -> str:
        kind = "derived" if self._entry.is_derived else "local"
        return f"ConditionHandle(key={self._key!r}, kind={kind})"
