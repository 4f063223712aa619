from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
import redis

from condstore.api.deps import get_redis, get_store
from condstore.api.models import (
    INT64_MAX,
    INT64_MIN,
    AddConditionRequest,
    ConditionValue,
    LoadRecordsRequest,
    PrimariesResponse,
    PrimaryCondition,
    RecordsResponse,
    SetConditionRequest,
    SnapshotListResponse,
    WriteResult,
)
from condstore.persistence import list_snapshots, restore_snapshot, save_snapshot
from condstore.records import ConditionSnapshot
from condstore.store import ConditionsStore

router = APIRouter()


def _rejected(key: str, op: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Provider rejected {op} of '{key}'")


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/conditions", response_model=PrimariesResponse)
async def list_primaries_route(
    lower_bound: str = "",
    limit: int | None = Query(default=None, ge=1, le=10_000),
    store: ConditionsStore = Depends(get_store),
) -> PrimariesResponse:
    out: list[PrimaryCondition] = []
    next_key: str | None = None

    it = store.primaries_lower_bound(lower_bound)
    end = store.primaries_end()
    while it != end:
        if limit is not None and len(out) >= limit:
            next_key = it.key
            break
        out.append(PrimaryCondition(key=it.key, value=it.value))
        it.advance()

    return PrimariesResponse(conditions=out, next_key=next_key)


@router.get("/conditions/{key:path}", response_model=ConditionValue)
async def get_condition_route(key: str, store: ConditionsStore = Depends(get_store)) -> ConditionValue:
    has, value = store.has_get(key)
    return ConditionValue(key=key, has=has, value=value)


@router.put("/conditions/{key:path}", response_model=WriteResult)
async def set_condition_route(
    key: str,
    payload: SetConditionRequest,
    store: ConditionsStore = Depends(get_store),
) -> WriteResult:
    if not store.set(key, payload.value):
        raise _rejected(key, "set")
    return WriteResult(key=key, ok=True, value=store.get(key))


@router.post("/conditions/{key:path}/add", response_model=WriteResult)
async def add_condition_route(
    key: str,
    payload: AddConditionRequest,
    store: ConditionsStore = Depends(get_store),
) -> WriteResult:
    result = store.get(key) + payload.delta
    if not INT64_MIN <= result <= INT64_MAX:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Adding {payload.delta} to '{key}' leaves the signed 64-bit range",
        )
    if not store.add(key, payload.delta):
        raise _rejected(key, "add")
    return WriteResult(key=key, ok=True, value=store.get(key))


@router.delete("/conditions/{key:path}", response_model=WriteResult)
async def erase_condition_route(key: str, store: ConditionsStore = Depends(get_store)) -> WriteResult:
    if not store.erase(key):
        raise _rejected(key, "erase")
    return WriteResult(key=key, ok=True, value=store.get(key))


@router.get("/records", response_model=RecordsResponse)
async def save_records_route(store: ConditionsStore = Depends(get_store)) -> RecordsResponse:
    return RecordsResponse(records=store.save())


@router.post("/records", response_model=RecordsResponse)
async def load_records_route(
    payload: LoadRecordsRequest,
    store: ConditionsStore = Depends(get_store),
) -> RecordsResponse:
    store.load(payload.records)
    return RecordsResponse(records=store.save())


@router.get("/snapshots", response_model=SnapshotListResponse)
async def list_snapshots_route(r: redis.Redis = Depends(get_redis)) -> SnapshotListResponse:
    return SnapshotListResponse(snapshots=list_snapshots(r=r))


@router.put("/snapshots/{name}", response_model=ConditionSnapshot | None)
async def save_snapshot_route(
    name: str,
    r: redis.Redis = Depends(get_redis),
    store: ConditionsStore = Depends(get_store),
) -> ConditionSnapshot | None:
    try:
        return save_snapshot(r=r, name=name, store=store)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e


@router.post("/snapshots/{name}/restore", response_model=ConditionSnapshot)
async def restore_snapshot_route(
    name: str,
    r: redis.Redis = Depends(get_redis),
    store: ConditionsStore = Depends(get_store),
) -> ConditionSnapshot:
    try:
        return restore_snapshot(r=r, name=name, store=store)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
