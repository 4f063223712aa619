from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field

from condstore.records import ConditionRecord, ConditionSnapshot


INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ConditionValue(BaseModel):
    key: str
    has: bool
    value: int


class SetConditionRequest(BaseModel):
    value: int = Field(..., ge=INT64_MIN, le=INT64_MAX)


class AddConditionRequest(BaseModel):
    delta: int = Field(..., ge=INT64_MIN, le=INT64_MAX)


class WriteResult(BaseModel):
    key: str
    ok: bool
    value: int


class PrimaryCondition(BaseModel):
    key: str
    value: int


class PrimariesResponse(BaseModel):
    conditions: list[PrimaryCondition]

    # Key to pass as `lower_bound` for the next page, when truncated by `limit`.
    next_key: str | None = None


class BoundedConditionRecord(ConditionRecord):
    value: Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX)] | None = None


class LoadRecordsRequest(BaseModel):
    records: list[BoundedConditionRecord] = Field(default_factory=list)


class RecordsResponse(BaseModel):
    records: list[ConditionRecord]


class SnapshotListResponse(BaseModel):
    snapshots: list[ConditionSnapshot]
