from __future__ import annotations

from bisect import bisect_left, bisect_right, insort
from collections.abc import Iterator

from condstore.core.entry import ConditionEntry


class EntryTable:
    """Ordered mapping from condition key to ConditionEntry.

    Keys are kept in a sorted list next to a dict of rows. Lexicographic order matters:
    prefix resolution is a predecessor search and primaries are listed in key order.
    """

    def __init__(self) -> None:
        self._keys: list[str] = []
        self._rows: dict[str, ConditionEntry] = {}

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._rows

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._keys))

    def find(self, key: str) -> ConditionEntry | None:
        return self._rows.get(key)

    def put(self, key: str, entry: ConditionEntry) -> ConditionEntry:
        if key not in self._rows:
            insort(self._keys, key)
        self._rows[key] = entry
        return entry

    def setdefault(self, key: str) -> ConditionEntry:
        """Return the row at `key`, inserting a Local 0 row when missing."""

        row = self._rows.get(key)
        if row is None:
            row = self.put(key, ConditionEntry.local())
        return row

    def remove(self, key: str) -> bool:
        if self._rows.pop(key, None) is None:
            return False
        del self._keys[bisect_left(self._keys, key)]
        return True

    def clear(self) -> None:
        self._keys.clear()
        self._rows.clear()

    def predecessor(self, key: str) -> tuple[str, ConditionEntry] | None:
        """Row with the greatest key <= `key`, if any."""

        idx = bisect_right(self._keys, key)
        if idx == 0:
            return None
        found = self._keys[idx - 1]
        return found, self._rows[found]

    def first_at_or_after(self, key: str, *, inclusive: bool = True) -> tuple[str, ConditionEntry] | None:
        """Row with the smallest key >= `key` (or > `key` when not inclusive)."""

        idx = bisect_left(self._keys, key) if inclusive else bisect_right(self._keys, key)
        if idx >= len(self._keys):
            return None
        found = self._keys[idx]
        return found, self._rows[found]

    def keys_with_prefix(self, prefix: str) -> list[str]:
        idx = bisect_left(self._keys, prefix)
        out: list[str] = []
        while idx < len(self._keys) and self._keys[idx].startswith(prefix):
            out.append(self._keys[idx])
            idx += 1
        return out


def resolve_entry(table: EntryTable, key: str) -> ConditionEntry | None:
    """Find the row governing `key`: an exact row, or the prefix provider owning it.

    A prefix provider's own row sorts directly before every key in its namespace, so
    looking at the single nearest predecessor is enough as long as prefixes don't nest.
    """

    if not len(table):
        return None

    hit = table.predecessor(key)
    if hit is None:
        return None

    found_key, row = hit
    if found_key == key:
        return row

    provider = row.provider
    if provider is not None and provider.is_prefix_provider and key.startswith(provider.name):
        return row

    return None
