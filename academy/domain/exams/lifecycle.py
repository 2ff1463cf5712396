"""
시험 상태 머신: upcoming → active → completed

- upcoming → active : 관리자
- active → completed : 관리자 또는 제출 직후 자동 완료 체크
- active → upcoming : 응시 중인 학생이 있을 수 있으므로 항상 거부
- completed → *     : 거부. completed 시험의 paper 는 읽기 전용
- 같은 상태로의 전이는 no-op (자동 완료 중복 실행 대비 멱등)
"""
from __future__ import annotations

from academy.domain.exams.entities import ExamStatus
from academy.domain.exams.errors import ConflictingLifecycleError

ALLOWED_TRANSITIONS: dict[ExamStatus, frozenset[ExamStatus]] = {
    ExamStatus.UPCOMING: frozenset({ExamStatus.ACTIVE}),
    ExamStatus.ACTIVE: frozenset({ExamStatus.COMPLETED}),
    ExamStatus.COMPLETED: frozenset(),
}


def can_transition(current: ExamStatus, target: ExamStatus) -> bool:
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: ExamStatus, target: ExamStatus) -> bool:
    """
    허용되지 않은 전이면 ConflictingLifecycleError.
    Returns: 실제 상태 변경이 필요한지 (같은 상태면 False).
    """
    if current == target:
        return False
    if current == ExamStatus.COMPLETED:
        raise ConflictingLifecycleError("Completed exams cannot change status")
    if current == ExamStatus.ACTIVE and target == ExamStatus.UPCOMING:
        raise ConflictingLifecycleError(
            "Cannot change active exam back to upcoming status while students are taking it"
        )
    if target not in ALLOWED_TRANSITIONS[current]:
        raise ConflictingLifecycleError(
            f"Exam status cannot change from {current.value} to {target.value}"
        )
    return True


def ensure_paper_editable(status: ExamStatus) -> None:
    if status == ExamStatus.COMPLETED:
        raise ConflictingLifecycleError("Cannot modify papers for completed exams")


def ensure_exam_editable(status: ExamStatus) -> None:
    if status == ExamStatus.COMPLETED:
        raise ConflictingLifecycleError("Cannot edit completed exams")


def ensure_accepting_submissions(status: ExamStatus) -> None:
    if status == ExamStatus.COMPLETED:
        raise ConflictingLifecycleError("Exam is already completed")
    if status != ExamStatus.ACTIVE:
        raise ConflictingLifecycleError("Exam is not currently active")


def should_auto_complete(status: ExamStatus, submitted_count: int, student_count: int) -> bool:
    """제출 수가 전체 학생 수 이상이고 active 일 때만."""
    return status == ExamStatus.ACTIVE and student_count > 0 and submitted_count >= student_count
