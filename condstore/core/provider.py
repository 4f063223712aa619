from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


GetFunction = Callable[[str], int]
HasFunction = Callable[[str], bool]
SetFunction = Callable[[str, int], bool]
EraseFunction = Callable[[str], bool]


class ProviderFunctionMissingError(RuntimeError):
    """A derived condition was dispatched to a provider slot nobody wired."""


class StaleReferenceError(RuntimeError):
    """A provider or condition handle was used after the store dropped it."""


@dataclass(slots=True, eq=False)
class DerivedProvider:
    """Bundle of get/has/set/erase callables backing one or more derived conditions.

    Named providers own exactly the key `name`. Prefix providers own every key that
    starts with `name`; their functions always receive the full, unstripped key.
    """

    name: str
    is_prefix_provider: bool
    get_function: GetFunction | None = None
    has_function: HasFunction | None = None
    set_function: SetFunction | None = None
    erase_function: EraseFunction | None = None
    retired: bool = False

    def _check_live(self) -> None:
        if self.retired:
            raise StaleReferenceError(f"Provider '{self.name}' was removed by ConditionsStore.clear()")

    def set_get_function(self, fn: GetFunction) -> DerivedProvider:
        self._check_live()
        self.get_function = fn
        return self

    def set_has_function(self, fn: HasFunction) -> DerivedProvider:
        self._check_live()
        self.has_function = fn
        return self

    def set_set_function(self, fn: SetFunction) -> DerivedProvider:
        self._check_live()
        self.set_function = fn
        return self

    def set_erase_function(self, fn: EraseFunction) -> DerivedProvider:
        self._check_live()
        self.erase_function = fn
        return self

    def wire(
        self,
        *,
        get: GetFunction | None = None,
        has: HasFunction | None = None,
        set: SetFunction | None = None,
        erase: EraseFunction | None = None,
    ) -> DerivedProvider:
        """Attach several slots at once; slots passed as None are left untouched."""

        if get is not None:
            self.set_get_function(get)
        if has is not None:
            self.set_has_function(has)
        if set is not None:
            self.set_set_function(set)
        if erase is not None:
            self.set_erase_function(erase)
        return self

    def _missing(self, slot: str) -> ProviderFunctionMissingError:
        kind = "prefix" if self.is_prefix_provider else "named"
        return ProviderFunctionMissingError(f"No {slot} function registered on {kind} provider '{self.name}'")

    # Dispatch. An unwired slot fails loudly: a silent 0/False would leak into
    # every script that reads the condition.

    def get(self, key: str) -> int:
        self._check_live()
        if self.get_function is None:
            raise self._missing("get")
        return int(self.get_function(key))

    def has(self, key: str) -> bool:
        self._check_live()
        if self.has_function is None:
            raise self._missing("has")
        return bool(self.has_function(key))

    def set(self, key: str, value: int) -> bool:
        self._check_live()
        if self.set_function is None:
            raise self._missing("set")
        return bool(self.set_function(key, value))

    def erase(self, key: str) -> bool:
        self._check_live()
        if self.erase_function is None:
            raise self._missing("erase")
        return bool(self.erase_function(key))


class ProviderRegistry:
    """Owns every DerivedProvider of a store, keyed by name."""

    def __init__(self) -> None:
        self._by_name: dict[str, DerivedProvider] = {}

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> DerivedProvider | None:
        return self._by_name.get(name)

    def create(self, name: str, *, is_prefix_provider: bool) -> DerivedProvider:
        if name in self._by_name:
            raise ValueError(f"Provider already registered: {name}")
        provider = DerivedProvider(name=name, is_prefix_provider=is_prefix_provider)
        self._by_name[name] = provider
        return provider

    def prefix_providers(self) -> list[DerivedProvider]:
        return [p for p in self._by_name.values() if p.is_prefix_provider]

    def named_providers(self) -> list[DerivedProvider]:
        return [p for p in self._by_name.values() if not p.is_prefix_provider]

    def clear(self) -> None:
        # Handles given out earlier must not keep feeding a cleared store.
        for provider in self._by_name.values():
            provider.retired = True
        self._by_name.clear()
