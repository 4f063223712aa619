from __future__ import annotations

from condstore.store import ConditionsStore


_STORE: ConditionsStore | None = None


def init_store(*, store: ConditionsStore | None = None) -> ConditionsStore:
    """Create the process-wide store once and cache it.

    Safe to call multiple times; subsequent calls return the already created instance.
    """

    global _STORE
    if _STORE is None:
        _STORE = store if store is not None else ConditionsStore()
    return _STORE


def reset_store_for_tests() -> None:
    """Drop the cached store so tests can start from an empty one."""

    global _STORE
    if _STORE is not None:
        _STORE.clear()
    _STORE = None


def get_store() -> ConditionsStore:
    if _STORE is None:
        raise RuntimeError("Conditions store not initialized. Call init_store() at startup.")
    return _STORE
