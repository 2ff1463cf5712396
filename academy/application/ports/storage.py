"""
Storage 포트: 문제지 문서 저장소 / 객체 스토리지 (boto3 미사용)
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Optional, Protocol

from academy.domain.exams.entities import Paper, PaperDraft


class ObjectStorage(Protocol):
    """
    버킷 하나에 대한 blob get/put/delete.
    키 없음은 None/False 로, 그 외 장애는 PaperStorageError 로 올린다.
    """

    @abstractmethod
    def get_bytes(self, key: str) -> Optional[bytes]:
        ...

    @abstractmethod
    def put_bytes(self, key: str, body: bytes, content_type: str = "application/json") -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """삭제했으면 True, 원래 없었으면 False."""
        ...

    @abstractmethod
    def exists(self, key: str) -> bool:
        ...

    @abstractmethod
    def list_keys(self, prefix: str = "") -> list[str]:
        ...


class PaperStore(Protocol):
    """
    시험당 문제지 문서 1개. save 는 전체 문서 교체 (partial patch 없음).
    get 은 항상 최신 읽기 (TTL 캐시 금지).
    """

    @abstractmethod
    def get(self, exam_id: int) -> Optional[Paper]:
        """문서가 없으면 None (오류 아님)."""
        ...

    @abstractmethod
    def save(self, exam_id: int, draft: PaperDraft) -> Paper:
        """totalMarks/totalQuestions 재계산 후 저장."""
        ...

    @abstractmethod
    def rename_key(self, exam_id: int, old_exam_name: str) -> bool:
        """이전 키 문서가 없으면 no-op 성공 (멱등)."""
        ...

    @abstractmethod
    def delete(self, exam_id: int, exam_name: Optional[str] = None) -> bool:
        """없으면 성공으로 간주."""
        ...

    @abstractmethod
    def list_all(self) -> list[Paper]:
        ...
