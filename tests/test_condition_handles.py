from __future__ import annotations

import pytest

from condstore.core.provider import StaleReferenceError
from condstore.store import ConditionsStore


def test_handle_on_unknown_key_creates_local_zero(store: ConditionsStore) -> None:
    h = store.handle("visits")

    assert h.is_derived is False
    assert h.read() == 0
    assert store.has("visits") is True
    assert list(store.primaries()) == [("visits", 0)]


def test_local_handle_operations(store: ConditionsStore) -> None:
    h = store["count"]

    assert h.write(10) is True
    assert h.increment() is True
    assert h.increment() is True
    assert h.decrement() is True
    assert h.add_assign(5) is True
    assert h.sub_assign(2) is True

    assert h.read() == 14
    assert store.get("count") == 14


def test_handle_reuses_existing_row(store: ConditionsStore) -> None:
    store.set("a", 3)
    store.handle("a").add_assign(4)
    assert store.get("a") == 7


def test_handle_via_prefix_synthesizes_derived_row(store: ConditionsStore) -> None:
    counts: dict[str, int] = {}

    def _set(key: str, value: int) -> bool:
        counts[key] = value
        return True

    store.register_prefix_provider("ship: ").wire(
        get=lambda key: counts.get(key, 0),
        has=lambda key: key in counts,
        set=_set,
        erase=lambda key: counts.pop(key, None) is not None,
    )

    h = store.handle("ship: Falcon")
    assert h.is_derived is True
    assert h.increment() is True
    assert h.add_assign(4) is True
    assert h.decrement() is True

    # The provider saw the full key every time.
    assert counts == {"ship: Falcon": 4}
    assert store.get("ship: Falcon") == 4

    # The synthesized row is found by exact key afterwards and never counts as a primary.
    assert store.handle("ship: Falcon").read() == 4
    assert list(store.primaries()) == []
    assert store.save() == []


def test_handle_on_named_provider_uses_provider_name(store: ConditionsStore) -> None:
    seen: list[tuple[str, int]] = []

    def _set(key: str, value: int) -> bool:
        seen.append((key, value))
        return False

    store.register_named_provider("cash").wire(get=lambda key: 10, set=_set)

    h = store.handle("cash")
    assert h.read() == 10
    assert h.sub_assign(3) is False
    assert seen == [("cash", 7)]


def test_handle_goes_stale_after_erase(store: ConditionsStore) -> None:
    h = store.handle("a")
    h.write(2)
    store.erase("a")

    with pytest.raises(StaleReferenceError):
        h.read()

    # A new handle recreates the row.
    assert store.handle("a").read() == 0


def test_handle_goes_stale_after_clear(store: ConditionsStore) -> None:
    h = store.handle("a")
    store.clear()
    # Recreate a row with the same key: the old handle still refers to the dropped one.
    store.set("a", 1)

    with pytest.raises(StaleReferenceError):
        h.write(5)
    assert store.get("a") == 1
