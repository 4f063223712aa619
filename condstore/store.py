from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from condstore.config import strict_prefixes_enabled
from condstore.core.entry import ConditionEntry
from condstore.core.handle import ConditionHandle
from condstore.core.primaries import PrimariesIterator, PrimariesRange
from condstore.core.provider import DerivedProvider, ProviderRegistry
from condstore.core.table import EntryTable, resolve_entry
from condstore.core.validators import (
    DEFAULT_REGISTRATION_PIPELINE,
    ProviderConflictError,
    RegistrationContext,
    ValidatorPipeline,
)
from condstore.records import ConditionRecord, RecordLike, coerce_record


logger = logging.getLogger(__name__)


class ConditionsStore:
    """Integer conditions, either stored locally or computed by registered providers.

    Every operation resolves its key first (exact row, or the prefix provider owning the
    key) and then either touches the stored value or calls the provider with the full key.
    Unknown keys read as 0 / False; writes to unknown keys create stored rows.

    Not thread-safe: callers serialize access.
    """

    def __init__(
        self,
        initial: Mapping[str, int] | Iterable[tuple[str, int]] | None = None,
        *,
        strict_prefixes: bool | None = None,
        validators: ValidatorPipeline = DEFAULT_REGISTRATION_PIPELINE,
    ) -> None:
        self._table = EntryTable()
        self._providers = ProviderRegistry()
        self._generation = 0
        self._strict_prefixes = strict_prefixes_enabled() if strict_prefixes is None else strict_prefixes
        self._validators = validators

        if initial is not None:
            pairs = initial.items() if isinstance(initial, Mapping) else initial
            for key, value in pairs:
                self.set(key, value)

    @classmethod
    def from_records(
        cls,
        records: Iterable[RecordLike],
        *,
        strict_prefixes: bool | None = None,
        validators: ValidatorPipeline = DEFAULT_REGISTRATION_PIPELINE,
    ) -> ConditionsStore:
        store = cls(strict_prefixes=strict_prefixes, validators=validators)
        store.load(records)
        return store

    @property
    def strict_prefixes(self) -> bool:
        return self._strict_prefixes

    # Reads

    def get(self, key: str) -> int:
        entry = resolve_entry(self._table, key)
        if entry is None:
            return 0
        if entry.provider is None:
            return entry.value
        return entry.provider.get(key)

    def has(self, key: str) -> bool:
        entry = resolve_entry(self._table, key)
        if entry is None:
            return False
        if entry.provider is None:
            return True
        return entry.provider.has(key)

    def has_get(self, key: str) -> tuple[bool, int]:
        entry = resolve_entry(self._table, key)
        if entry is None:
            return False, 0
        if entry.provider is None:
            return True, entry.value

        has = entry.provider.has(key)
        return has, (entry.provider.get(key) if has else 0)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    # Writes

    def set(self, key: str, value: int) -> bool:
        entry = resolve_entry(self._table, key)
        if entry is None:
            self._table.put(key, ConditionEntry.local(value))
            return True
        if entry.provider is None:
            entry.value = value
            return True
        return entry.provider.set(key, value)

    def add(self, key: str, delta: int) -> bool:
        # Two lookups (get, then set) so derived rows see a plain read-modify-write.
        return self.set(key, self.get(key) + delta)

    def erase(self, key: str) -> bool:
        entry = resolve_entry(self._table, key)
        if entry is None:
            return True
        if entry.provider is None:
            self._table.remove(key)
            return True
        return entry.provider.erase(key)

    def handle(self, key: str) -> ConditionHandle:
        """Mutable handle for compound assignment; creates the row if needed."""

        entry = self._table.find(key)
        if entry is None:
            governing = resolve_entry(self._table, key)
            if governing is None or governing.provider is None:
                entry = self._table.setdefault(key)
            else:
                entry = self._table.put(key, ConditionEntry.derived(governing.provider, full_key=key))
                logger.debug("Synthesized derived row %r via provider %r", key, governing.provider.name)

        return ConditionHandle(
            table=self._table,
            key=key,
            entry=entry,
            generation=self._generation,
            current_generation=lambda: self._generation,
        )

    def __getitem__(self, key: str) -> ConditionHandle:
        return self.handle(key)

    # Providers

    def register_prefix_provider(self, prefix: str) -> DerivedProvider:
        return self._register(prefix, is_prefix_provider=True)

    def register_named_provider(self, name: str) -> DerivedProvider:
        return self._register(name, is_prefix_provider=False)

    def _register(self, name: str, *, is_prefix_provider: bool) -> DerivedProvider:
        provider = self._providers.get(name)
        if provider is None:
            self._check_registration(RegistrationContext(name=name, is_prefix_provider=is_prefix_provider))
            provider = self._providers.create(name, is_prefix_provider=is_prefix_provider)
            logger.debug("Registered %s provider %r", "prefix" if is_prefix_provider else "named", name)
        elif provider.is_prefix_provider != is_prefix_provider:
            logger.warning(
                "Provider %r re-registered as %s but was created as %s; keeping the original kind",
                name,
                "prefix" if is_prefix_provider else "named",
                "prefix" if provider.is_prefix_provider else "named",
            )

        self._table.put(name, ConditionEntry.derived(provider))
        return provider

    def _check_registration(self, ctx: RegistrationContext) -> None:
        try:
            self._validators.validate(ctx=ctx, registry=self._providers, table=self._table)
        except ProviderConflictError as e:
            if self._strict_prefixes:
                raise
            logger.warning("Registering %s provider %r despite conflict: %s", ctx.kind, ctx.name, e)

    # Primaries

    def primaries_begin(self) -> PrimariesIterator:
        return PrimariesIterator.begin(self._table)

    def primaries_end(self) -> PrimariesIterator:
        return PrimariesIterator.end(self._table)

    def primaries_lower_bound(self, key: str) -> PrimariesIterator:
        return PrimariesIterator.lower_bound(self._table, key)

    def primaries(self, *, lower_bound: str = "") -> PrimariesRange:
        return PrimariesRange(self._table, lower_bound)

    # Persistence glue

    def load(self, records: Iterable[RecordLike]) -> None:
        for raw in records:
            record = coerce_record(raw)
            self.set(record.key, record.effective_value)

    def save(self) -> list[ConditionRecord]:
        out: list[ConditionRecord] = []
        for key, value in self.primaries():
            record = ConditionRecord.for_value(key, value)
            if record is not None:
                out.append(record)
        return out

    def clear(self) -> None:
        """Drop every row and provider. Earlier handles and providers go stale."""

        self._table.clear()
        self._providers.clear()
        self._generation += 1
