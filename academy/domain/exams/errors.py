"""
시험 도메인 오류: 순수 파이썬

도메인 분류(NotFound / Validation / ConflictingLifecycle)와
인프라 오류(InfrastructureError)는 서로 다른 계층이다.
채점/랭킹 로직은 인프라 오류를 잡아서 삼키지 않는다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class ExamDomainError(Exception):
    """시험 도메인 규칙 위반 등."""
    code = "exam_error"


class NotFoundError(ExamDomainError):
    code = "not_found"


class ExamNotFoundError(NotFoundError):
    def __init__(self, exam_id: int) -> None:
        super().__init__(f"Exam {exam_id} not found")
        self.exam_id = exam_id


class PaperNotFoundError(NotFoundError):
    def __init__(self, exam_id: int) -> None:
        super().__init__(f"Paper not found for exam {exam_id}")
        self.exam_id = exam_id


class QuestionNotFoundError(NotFoundError):
    def __init__(self, exam_id: int, question_id: str) -> None:
        super().__init__(f"Question {question_id} not found in exam {exam_id}")
        self.exam_id = exam_id
        self.question_id = question_id


class StudentNotFoundError(NotFoundError):
    def __init__(self, student_id: int) -> None:
        super().__init__(f"Student {student_id} not found")
        self.student_id = student_id


class QuestionValidationError(ExamDomainError):
    """잘못된 문항. 저장소에 쓰기 전에 거부한다."""
    code = "validation_failure"

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = dict(errors)


class ExamValidationError(ExamDomainError):
    """시험 레코드 입력 오류 (중복 이름, 중복 시작 시각 등)."""
    code = "validation_failure"


class ConflictingLifecycleError(ExamDomainError):
    """completed 시험 편집/재제출, active → upcoming 등."""
    code = "conflicting_lifecycle"


class EmptyPaperError(ExamDomainError):
    """문항 0개 paper 채점 시도 (호출부에서 제출 자체를 거부해야 함)."""
    code = "empty_paper"


class InfrastructureError(Exception):
    """저장소 타임아웃/연결 실패 등. 도메인 분류와 별개."""
    code = "infrastructure_error"


class PaperStorageError(InfrastructureError):
    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


@dataclass(frozen=True)
class DerivedSyncWarning:
    """
    paper 저장 후 totalMarks 동기화 실패.
    예외가 아니라 경고 값으로 호출부에 전달된다 (paper 쓰기는 롤백하지 않음).
    """
    exam_id: int
    total_marks: int
    reason: str

    @property
    def message(self) -> str:
        return (
            f"Paper saved, but exam {self.exam_id} total marks could not be "
            f"synchronized to {self.total_marks}: {self.reason}"
        )
