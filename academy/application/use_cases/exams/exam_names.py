"""
exam_id → 표시 이름 조회 (주입된 캐시 + 시험 레코드 저장소)

전역 모듈 캐시 대신 ExamNameCache 를 주입받는다.
시험 이름을 바꾸거나 삭제하는 모든 경로에서 invalidate 해야 한다.
"""
from __future__ import annotations

import logging
from typing import Optional

from academy.application.ports.cache import ExamNameCache
from academy.application.ports.repositories import ExamRecordStore

logger = logging.getLogger(__name__)


def fallback_exam_name(exam_id: int) -> str:
    return f"Exam {exam_id}"


class ExamNameResolver:
    def __init__(self, exams: ExamRecordStore, cache: Optional[ExamNameCache] = None) -> None:
        self._exams = exams
        self._cache = cache

    def resolve(self, exam_id: int) -> str:
        if self._cache is not None:
            cached = self._cache.get(exam_id)
            if cached:
                return cached

        name = self._exams.get_name(exam_id)
        if not name:
            logger.debug("EXAM_NAME exam_id=%s not found, using fallback", exam_id)
            return fallback_exam_name(exam_id)

        if self._cache is not None:
            self._cache.set(exam_id, name)
        return name

    def invalidate(self, exam_id: int) -> None:
        if self._cache is not None:
            self._cache.invalidate(exam_id)
