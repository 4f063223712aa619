from __future__ import annotations

import logging
from datetime import UTC, datetime

import redis

from condstore.records import ConditionSnapshot
from condstore.store import ConditionsStore


SNAPSHOTS_SET_KEY = "condstore:snapshots"
SNAPSHOT_KEY_PREFIX = "condstore:snapshot:"  # + {name}

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _snapshot_key(name: str) -> str:
    return f"{SNAPSHOT_KEY_PREFIX}{name}"


def validate_snapshot_name(name: str) -> None:
    if not name.strip():
        raise ValueError("Snapshot name must not be empty")
    if len(name) > 200:
        raise ValueError("Snapshot name is too long")


def save_snapshot(*, r: redis.Redis, name: str, store: ConditionsStore) -> ConditionSnapshot | None:
    """Persist the store's primaries under `name`.

    A store with nothing worth saving removes the snapshot instead of writing an empty one.
    """

    validate_snapshot_name(name)
    records = store.save()
    key = _snapshot_key(name)

    if not records:
        r.delete(key)
        r.srem(SNAPSHOTS_SET_KEY, name)
        logger.info("Snapshot %r dropped: no primaries to save", name)
        return None

    snapshot = ConditionSnapshot(name=name, saved_at=_now(), records=records)
    r.set(key, snapshot.model_dump_json())
    r.sadd(SNAPSHOTS_SET_KEY, name)
    logger.info("Snapshot %r saved with %d records", name, len(records))
    return snapshot


def get_snapshot(*, r: redis.Redis, name: str) -> ConditionSnapshot | None:
    raw = r.get(_snapshot_key(name))
    if not raw:
        return None
    return ConditionSnapshot.model_validate_json(raw)


def require_snapshot(*, r: redis.Redis, name: str) -> ConditionSnapshot:
    snapshot = get_snapshot(r=r, name=name)
    if snapshot is None:
        raise LookupError("Snapshot not found")
    return snapshot


def restore_snapshot(*, r: redis.Redis, name: str, store: ConditionsStore) -> ConditionSnapshot:
    """Load a saved snapshot into `store` (values are applied with `set`, on top of what's there)."""

    snapshot = require_snapshot(r=r, name=name)
    store.load(snapshot.records)
    logger.info("Snapshot %r restored (%d records)", name, len(snapshot.records))
    return snapshot


def list_snapshots(*, r: redis.Redis) -> list[ConditionSnapshot]:
    out: list[ConditionSnapshot] = []
    for name in sorted(r.smembers(SNAPSHOTS_SET_KEY)):
        snapshot = get_snapshot(r=r, name=name)
        if snapshot is not None:
            out.append(snapshot)
    return out
