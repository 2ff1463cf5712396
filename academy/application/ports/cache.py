"""
Cache 포트: 짧은 TTL 메모이제이션 + 쓰기 경로에서 명시적 invalidate
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Optional, Protocol


class ExamNameCache(Protocol):
    """exam_id → 표시 이름. 시험 수정/삭제 경로마다 invalidate 호출."""

    @abstractmethod
    def get(self, exam_id: int) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, exam_id: int, name: str) -> None:
        ...

    @abstractmethod
    def invalidate(self, exam_id: int) -> None:
        ...
