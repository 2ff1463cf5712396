"""
랭킹: 순수 함수

- 시험별 순위: percentage 내림차순, 동점이면 먼저 제출한 학생이 위
- 전체 반 순위: 학생별 평균 percentage 내림차순,
  결과가 하나도 없는 학생은 평균 값과 무관하게 결과 있는 학생보다 항상 아래
  ("데이터 없음" ≠ 0%)

비용: 전체 반 순위는 O(학생 수 × 학생당 결과 수). 캐시는 읽기 경계에서.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Mapping, Optional, Sequence

from academy.domain.exams.entities import ExamResult

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _aware(dt: Optional[datetime]) -> datetime:
    if dt is None:
        return _EPOCH
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def exam_order_key(r: ExamResult) -> tuple:
    return (-float(r.percentage), _aware(r.submitted_at), r.id if r.id is not None else 0)


def sort_exam_results(results: Iterable[ExamResult]) -> list[ExamResult]:
    return sorted(results, key=exam_order_key)


def exam_rank(results: Iterable[ExamResult], student_id: int) -> Optional[int]:
    """1-based 순위. 해당 학생 결과가 없으면 None."""
    for pos, r in enumerate(sort_exam_results(results), start=1):
        if r.student_id == student_id:
            return pos
    return None


def with_exam_ranks(results: Iterable[ExamResult]) -> list[ExamResult]:
    """같은 시험의 결과 목록에 rank 를 채워서 정렬된 순서로 반환."""
    ordered = sort_exam_results(results)
    for pos, r in enumerate(ordered, start=1):
        r.rank = pos
    return ordered


@dataclass(frozen=True)
class StudentStanding:
    student_id: int
    average: float
    has_results: bool
    result_count: int


def standing_for(student_id: int, results: Sequence[ExamResult]) -> StudentStanding:
    if not results:
        return StudentStanding(student_id=student_id, average=0.0, has_results=False, result_count=0)
    avg = sum(float(r.percentage) for r in results) / len(results)
    return StudentStanding(
        student_id=student_id, average=avg, has_results=True, result_count=len(results)
    )


def class_standings(
    student_ids: Iterable[int],
    results_by_student: Mapping[int, Sequence[ExamResult]],
) -> list[StudentStanding]:
    """
    결과 있는 학생 먼저 → 평균 내림차순.
    동점은 student_ids 입력 순서 유지 (stable sort).
    """
    standings = [standing_for(sid, results_by_student.get(sid) or []) for sid in student_ids]
    return sorted(standings, key=lambda s: (not s.has_results, -s.average))


def overall_rank(
    student_id: int,
    student_ids: Iterable[int],
    results_by_student: Mapping[int, Sequence[ExamResult]],
) -> Optional[int]:
    for pos, s in enumerate(class_standings(student_ids, results_by_student), start=1):
        if s.student_id == student_id:
            return pos
    return None
