# PATH: academy/adapters/cache/redis_client.py
"""
시험 이름 캐시 전용 Redis 연결 팩토리

- 설정: REDIS_HOST / REDIS_PORT / REDIS_PASSWORD / REDIS_DB (settings → env)
- REDIS_HOST 미설정 또는 ping 실패 → None. 이름 캐시가 꺼지고 시험 테이블에서 직접 읽는다.
- 연결 시도는 프로세스당 1회 (결과가 None 이어도 재시도하지 않음).
  설정을 바꾼 뒤에는 get_redis_client.cache_clear().
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Optional

from academy.adapters.settings import adapter_setting

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_redis_client() -> Optional[Any]:
    host = adapter_setting("REDIS_HOST")
    if not host:
        logger.info("EXAM_NAME_CACHE disabled: REDIS_HOST not set, names read from exam table")
        return None

    import redis

    port = int(adapter_setting("REDIS_PORT", "6379"))
    db = int(adapter_setting("REDIS_DB", "0"))
    client = redis.Redis(
        host=host,
        port=port,
        password=adapter_setting("REDIS_PASSWORD"),
        db=db,
        decode_responses=True,
        socket_timeout=2,
        socket_connect_timeout=2,
    )
    try:
        client.ping()
    except redis.RedisError as e:
        logger.warning("EXAM_NAME_CACHE disabled: redis %s:%s db=%s unreachable: %s", host, port, db, e)
        return None

    logger.info("EXAM_NAME_CACHE enabled: redis %s:%s db=%s", host, port, db)
    return client
