from __future__ import annotations

from collections.abc import Iterator

from condstore.core.table import EntryTable


class PrimariesIterator:
    """Forward-only walk over the Local rows of an EntryTable, in key order.

    The position is the current key (None at the end), so rows inserted or erased
    elsewhere in the table do not shift it. The value is captured when the iterator
    lands on a row; writes made afterwards are not reflected in the pair it yields.
    """

    __slots__ = ("_table", "_key", "_value")

    def __init__(self, table: EntryTable, start: str | None, *, inclusive: bool = True) -> None:
        self._table = table
        self._key: str | None = None
        self._value = 0
        if start is not None:
            self._settle(start, inclusive=inclusive)

    @classmethod
    def begin(cls, table: EntryTable) -> PrimariesIterator:
        return cls(table, "")

    @classmethod
    def end(cls, table: EntryTable) -> PrimariesIterator:
        return cls(table, None)

    @classmethod
    def lower_bound(cls, table: EntryTable, key: str) -> PrimariesIterator:
        return cls(table, key)

    def _settle(self, start: str, *, inclusive: bool) -> None:
        hit = self._table.first_at_or_after(start, inclusive=inclusive)
        while hit is not None and hit[1].is_derived:
            hit = self._table.first_at_or_after(hit[0], inclusive=False)

        if hit is None:
            self._key = None
            self._value = 0
        else:
            self._key = hit[0]
            self._value = hit[1].value

    @property
    def at_end(self) -> bool:
        return self._key is None

    @property
    def key(self) -> str:
        if self._key is None:
            raise IndexError("PrimariesIterator is at the end")
        return self._key

    @property
    def value(self) -> int:
        if self._key is None:
            raise IndexError("PrimariesIterator is at the end")
        return self._value

    @property
    def item(self) -> tuple[str, int]:
        return self.key, self.value

    def advance(self) -> PrimariesIterator:
        if self._key is not None:
            self._settle(self._key, inclusive=False)
        return self

    def __iter__(self) -> Iterator[tuple[str, int]]:
        return self

    def __next__(self) -> tuple[str, int]:
        if self._key is None:
            raise StopIteration
        current = (self._key, self._value)
        self.advance()
        return current

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrimariesIterator):
            return NotImplemented
        return self._table is other._table and self._key == other._key

    # Positions move on advance(), so iterators are not hashable.
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        pos = "end" if self._key is None else repr(self._key)
        return f"PrimariesIterator(at={pos})"


class PrimariesRange:
    """Restartable view: every `iter()` starts a fresh walk from the same lower bound."""

    __slots__ = ("_table", "_start")

    def __init__(self, table: EntryTable, start: str = "") -> None:
        self._table = table
        self._start = start

    def __iter__(self) -> PrimariesIterator:
        return PrimariesIterator.lower_bound(self._table, self._start)
