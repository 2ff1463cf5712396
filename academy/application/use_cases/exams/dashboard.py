"""
학생 대시보드 / 관리자 통계 (읽기 전용)

rank 는 저장하지 않고 조회 시마다 ResultStore 에서 다시 계산한다.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from academy.application.ports.repositories import ExamRecordStore, ResultStore, StudentDirectory
from academy.domain.exams.entities import ExamRecord, ExamResult, ExamStatus
from academy.domain.exams.errors import ExamNotFoundError, StudentNotFoundError
from academy.domain.exams.ranking import exam_rank, overall_rank, standing_for, with_exam_ranks


@dataclass(frozen=True)
class ExamHistoryEntry:
    result: ExamResult
    exam: Optional[ExamRecord]
    rank: Optional[int]
    total_participants: int


@dataclass
class StudentDashboard:
    student_id: int
    total_exams: int
    average_score: float
    best_rank: int
    overall_rank: Optional[int]
    total_students: int
    available_exams: list[ExamRecord] = field(default_factory=list)
    active_exams: list[ExamRecord] = field(default_factory=list)
    completed_exams: list[ExamRecord] = field(default_factory=list)
    exam_history: list[ExamHistoryEntry] = field(default_factory=list)


@dataclass(frozen=True)
class ExamStatistics:
    total_students: int
    upcoming_exams: int
    active_exams: int
    completed_exams: int


def _exam_date(exam: ExamRecord) -> date:
    return exam.date or date.min


class DashboardService:
    def __init__(
        self,
        exams: ExamRecordStore,
        results: ResultStore,
        students: StudentDirectory,
    ) -> None:
        self._exams = exams
        self._results = results
        self._students = students

    def student_dashboard(self, student_id: int) -> StudentDashboard:
        if not self._students.exists(student_id):
            raise StudentNotFoundError(student_id)

        all_exams = self._exams.list_all()
        exams_by_id = {e.id: e for e in all_exams}
        my_results = self._results.by_student(student_id)
        taken = {r.exam_id for r in my_results}

        available = sorted(
            (e for e in all_exams if e.status == ExamStatus.UPCOMING and e.id not in taken),
            key=_exam_date,
        )
        active = sorted(
            (e for e in all_exams if e.status == ExamStatus.ACTIVE and e.id not in taken),
            key=_exam_date,
        )
        completed = sorted(
            (e for e in all_exams if e.status == ExamStatus.COMPLETED or e.id in taken),
            key=_exam_date,
            reverse=True,
        )

        history: list[ExamHistoryEntry] = []
        for r in my_results:
            exam_results = self._results.by_exam(r.exam_id)
            history.append(
                ExamHistoryEntry(
                    result=r,
                    exam=exams_by_id.get(r.exam_id),
                    rank=exam_rank(exam_results, student_id),
                    total_participants=len(exam_results),
                )
            )

        student_ids = self._students.all()
        results_by_student = {sid: self._results.by_student(sid) for sid in student_ids}
        # 방금 조회한 본인 결과를 그대로 사용
        results_by_student[student_id] = my_results

        ranks = [h.rank for h in history if h.rank is not None]
        standing = standing_for(student_id, my_results)

        return StudentDashboard(
            student_id=student_id,
            total_exams=len(my_results),
            average_score=standing.average,
            best_rank=min(ranks) if ranks else 0,
            overall_rank=overall_rank(student_id, student_ids, results_by_student),
            total_students=len(student_ids),
            available_exams=available,
            active_exams=active,
            completed_exams=completed,
            exam_history=history,
        )

    def exam_results(self, exam_id: int) -> list[ExamResult]:
        """관리자 결과 목록: rank 채워서 순위 순으로."""
        if self._exams.get(exam_id) is None:
            raise ExamNotFoundError(exam_id)
        return with_exam_ranks(self._results.by_exam(exam_id))

    def statistics(self) -> ExamStatistics:
        exams = self._exams.list_all()
        return ExamStatistics(
            total_students=self._students.count(),
            upcoming_exams=sum(1 for e in exams if e.status == ExamStatus.UPCOMING),
            active_exams=sum(1 for e in exams if e.status == ExamStatus.ACTIVE),
            completed_exams=sum(1 for e in exams if e.status == ExamStatus.COMPLETED),
        )
