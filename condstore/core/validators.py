from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from condstore.core.provider import ProviderRegistry
from condstore.core.table import EntryTable


class ProviderConflictError(ValueError):
    """A provider registration would make prefix resolution ambiguous."""


@dataclass(frozen=True, slots=True)
class RegistrationContext:
    """The registration being checked. Only new provider names are validated."""

    name: str
    is_prefix_provider: bool

    @property
    def kind(self) -> str:
        return "prefix" if self.is_prefix_provider else "named"


class RegistrationValidator(ABC):
    """A small, composable check run before a provider is created."""

    @abstractmethod
    def validate(self, *, ctx: RegistrationContext, registry: ProviderRegistry, table: EntryTable) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class EmptyPrefixValidator(RegistrationValidator):
    """An empty prefix would claim every key in the store."""

    def validate(self, *, ctx: RegistrationContext, registry: ProviderRegistry, table: EntryTable) -> None:
        if ctx.is_prefix_provider and not ctx.name:
            raise ProviderConflictError("Prefix provider needs a non-empty prefix")


@dataclass(frozen=True, slots=True)
class PrefixOverlapValidator(RegistrationValidator):
    """Reject prefixes nested in each other, and named providers inside a prefix namespace.

    Either case puts a foreign row between a prefix row and the keys it governs, so the
    predecessor search stops at the wrong row.
    """

    def validate(self, *, ctx: RegistrationContext, registry: ProviderRegistry, table: EntryTable) -> None:
        for other in registry.prefix_providers():
            if other.name == ctx.name:
                continue
            if ctx.name.startswith(other.name):
                raise ProviderConflictError(
                    f"{ctx.kind.capitalize()} provider '{ctx.name}' falls inside prefix provider '{other.name}'"
                )
            if ctx.is_prefix_provider and other.name.startswith(ctx.name):
                raise ProviderConflictError(f"Prefix provider '{ctx.name}' would contain prefix provider '{other.name}'")

        if not ctx.is_prefix_provider:
            return

        for other in registry.named_providers():
            if other.name != ctx.name and other.name.startswith(ctx.name):
                raise ProviderConflictError(f"Prefix provider '{ctx.name}' would contain named provider '{other.name}'")


@dataclass(frozen=True, slots=True)
class LocalRowsInNamespaceValidator(RegistrationValidator):
    """Stored rows inside a new prefix namespace would shadow the provider for later keys."""

    def validate(self, *, ctx: RegistrationContext, registry: ProviderRegistry, table: EntryTable) -> None:
        if not ctx.is_prefix_provider or not ctx.name:
            return

        shadowing = [
            key
            for key in table.keys_with_prefix(ctx.name)
            if key != ctx.name and (row := table.find(key)) is not None and not row.is_derived
        ]
        if shadowing:
            listed = ", ".join(repr(k) for k in shadowing[:5])
            raise ProviderConflictError(f"Prefix provider '{ctx.name}' would be shadowed by stored conditions: {listed}")


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[RegistrationValidator, ...]

    def validate(self, *, ctx: RegistrationContext, registry: ProviderRegistry, table: EntryTable) -> None:
        for v in self.validators:
            v.validate(ctx=ctx, registry=registry, table=table)


DEFAULT_REGISTRATION_PIPELINE = ValidatorPipeline(
    validators=(
        EmptyPrefixValidator(),
        PrefixOverlapValidator(),
        LocalRowsInNamespaceValidator(),
    )
)
