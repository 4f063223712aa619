"""Integer condition store with stored values and provider-backed derived values."""

from condstore.core.handle import ConditionHandle
from condstore.core.provider import DerivedProvider, ProviderFunctionMissingError, StaleReferenceError
from condstore.core.validators import ProviderConflictError
from condstore.records import ConditionRecord
from condstore.store import ConditionsStore

__all__ = [
    "ConditionHandle",
    "ConditionRecord",
    "ConditionsStore",
    "DerivedProvider",
    "ProviderConflictError",
    "ProviderFunctionMissingError",
    "StaleReferenceError",
]
