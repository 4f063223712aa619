from __future__ import annotations

import logging
from collections.abc import Generator

import redis

from condstore.infra.redis_client import create_redis
from condstore.singleton import get_store as _get_process_store
from condstore.store import ConditionsStore


logger = logging.getLogger(__name__)


def get_redis() -> Generator[redis.Redis, None, None]:
    client = create_redis()
    try:
        yield client
    finally:
        try:
            client.close()
        except redis.RedisError:
            # Closing a pool that never connected can fail on some redis-py versions.
            logger.debug("Ignoring error while closing redis client", exc_info=True)


def get_store() -> ConditionsStore:
    return _get_process_store()
