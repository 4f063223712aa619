from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ConditionRecord(BaseModel):
    """One persisted condition: a key plus an optional value.

    A missing value means 1; that is how flags are written out.
    """

    key: str
    value: int | None = None

    @property
    def effective_value(self) -> int:
        return 1 if self.value is None else self.value

    @staticmethod
    def for_value(key: str, value: int) -> ConditionRecord | None:
        """Record to save for a stored value, or None when the value isn't worth saving."""

        if value == 1:
            return ConditionRecord(key=key)
        if value:
            return ConditionRecord(key=key, value=value)
        return None


RecordLike = ConditionRecord | tuple[str, int | None] | tuple[str]


def coerce_record(raw: RecordLike) -> ConditionRecord:
    if isinstance(raw, ConditionRecord):
        return raw
    if len(raw) == 1:
        return ConditionRecord(key=raw[0])
    key, value = raw  # type: ignore[misc]
    return ConditionRecord(key=key, value=value)


class ConditionSnapshot(BaseModel):
    name: str
    saved_at: datetime
    records: list[ConditionRecord] = Field(default_factory=list)
