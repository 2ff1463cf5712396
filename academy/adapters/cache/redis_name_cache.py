"""
RedisExamNameCache - ExamNameCache 포트 구현체

- 키: exam:{exam_id}:name
- TTL: 기본 300초 (이름 변경/삭제 시 명시적 invalidate)
- Redis 미사용/장애: 항상 miss → 호출부가 DB에서 읽음
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from academy.adapters.cache.redis_client import get_redis_client

logger = logging.getLogger(__name__)

DEFAULT_NAME_TTL_SECONDS = 300


def _key(exam_id: int) -> str:
    return f"exam:{int(exam_id)}:name"


class RedisExamNameCache:
    def __init__(
        self,
        ttl_seconds: int = DEFAULT_NAME_TTL_SECONDS,
        client_factory: Callable[[], Optional[Any]] = get_redis_client,
    ) -> None:
        self._ttl = ttl_seconds
        self._client_factory = client_factory

    def get(self, exam_id: int) -> Optional[str]:
        client = self._client_factory()
        if not client:
            return None
        try:
            return client.get(_key(exam_id))
        except Exception as e:
            logger.warning("EXAM_NAME_CACHE get failed exam_id=%s: %s", exam_id, e)
            return None

    def set(self, exam_id: int, name: str) -> None:
        client = self._client_factory()
        if not client:
            return
        try:
            client.set(_key(exam_id), name, ex=self._ttl)
        except Exception as e:
            logger.warning("EXAM_NAME_CACHE set failed exam_id=%s: %s", exam_id, e)

    def invalidate(self, exam_id: int) -> None:
        client = self._client_factory()
        if not client:
            return
        try:
            client.delete(_key(exam_id))
        except Exception as e:
            # TTL 만료 시 자동 해제되므로 치명적이지 않음
            logger.warning("EXAM_NAME_CACHE invalidate failed exam_id=%s: %s", exam_id, e)
