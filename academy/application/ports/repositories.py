"""
Repository 포트: 관계형 저장소 추상화 (Django/ORM 미사용)
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Optional, Protocol

from academy.domain.exams.entities import ExamRecord, ExamResult, ExamStatus


class ExamRecordStore(Protocol):
    """시험 레코드. totalMarks 는 Aggregate Synchronizer 만 쓴다."""

    @abstractmethod
    def get(self, exam_id: int) -> Optional[ExamRecord]:
        """없으면 None."""
        ...

    @abstractmethod
    def list_all(self) -> list[ExamRecord]:
        ...

    @abstractmethod
    def get_name(self, exam_id: int) -> Optional[str]:
        """표시 이름만 조회. 없으면 None."""
        ...

    @abstractmethod
    def update_total_marks(self, exam_id: int, marks: int) -> bool:
        """갱신된 행이 있으면 True."""
        ...

    @abstractmethod
    def get_status(self, exam_id: int) -> Optional[ExamStatus]:
        ...

    @abstractmethod
    def set_status(self, exam_id: int, status: ExamStatus) -> bool:
        ...

    @abstractmethod
    def create(self, record: ExamRecord) -> ExamRecord:
        ...

    @abstractmethod
    def update(self, exam_id: int, changes: dict) -> Optional[ExamRecord]:
        """name/subject/date/start_time/duration/description/status 부분 갱신."""
        ...

    @abstractmethod
    def delete(self, exam_id: int) -> bool:
        ...


class ResultStore(Protocol):
    """(student, exam) 당 1행. upsert 는 중복 행을 만들지 않는다."""

    @abstractmethod
    def upsert(self, student_id: int, exam_id: int, result: ExamResult) -> ExamResult:
        ...

    @abstractmethod
    def by_exam(self, exam_id: int) -> list[ExamResult]:
        ...

    @abstractmethod
    def by_student(self, student_id: int) -> list[ExamResult]:
        ...

    @abstractmethod
    def count_by_exam(self, exam_id: int) -> int:
        ...


class StudentDirectory(Protocol):
    """완료 임계값 / 랭킹 분모 용도로만 사용."""

    @abstractmethod
    def count(self) -> int:
        ...

    @abstractmethod
    def all(self) -> list[int]:
        """student id 목록 (안정된 순서)."""
        ...

    @abstractmethod
    def exists(self, student_id: int) -> bool:
        ...
