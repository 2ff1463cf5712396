"""
시험 제출 UseCase (학생)

흐름:
1) 시험/학생 확인 → active 가 아니면 ConflictingLifecycleError
2) paper 로드 → 없거나 문항 0개면 EmptyPaperError (채점 엔진 호출 전 거부)
3) grade() → ResultStore.upsert (재제출 시 같은 행 갱신)
4) 시험 내 순위 계산
5) 자동 완료 체크: 제출 수 ≥ 전체 학생 수 → completed
   (best-effort: 실패해도 제출 응답은 성공)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from academy.application.ports.repositories import ExamRecordStore, ResultStore, StudentDirectory
from academy.application.ports.storage import PaperStore
from academy.domain.exams.entities import ExamRecord, ExamResult, ExamStatus
from academy.domain.exams.errors import EmptyPaperError, ExamNotFoundError, StudentNotFoundError
from academy.domain.exams.grading import grade
from academy.domain.exams.lifecycle import ensure_accepting_submissions, should_auto_complete
from academy.domain.exams.ranking import exam_rank
from academy.domain.shared.ids import utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionOutcome:
    result: ExamResult
    total_marks: int
    rank: Optional[int]
    total_participants: int
    auto_completed: bool = False

    @property
    def score(self) -> int:
        return self.result.score

    @property
    def attempted_marks(self) -> int:
        return self.result.attempted_marks

    @property
    def percentage(self) -> int:
        return self.result.percentage

    @property
    def submitted_at(self) -> datetime:
        return self.result.submitted_at


def normalize_answers(answers: Optional[Mapping[Any, Any]]) -> dict[str, str]:
    """{questionId: answer}. None 답은 미응시로 보고 제외."""
    out: dict[str, str] = {}
    for k, v in (answers or {}).items():
        if v is None:
            continue
        out[str(k)] = str(v)
    return out


class ExamSubmissionService:
    def __init__(
        self,
        exams: ExamRecordStore,
        papers: PaperStore,
        results: ResultStore,
        students: StudentDirectory,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._exams = exams
        self._papers = papers
        self._results = results
        self._students = students
        self._clock = clock

    def submit(
        self,
        student_id: int,
        exam_id: int,
        answers: Optional[Mapping[Any, Any]],
    ) -> SubmissionOutcome:
        exam = self._exams.get(exam_id)
        if exam is None:
            raise ExamNotFoundError(exam_id)
        if not self._students.exists(student_id):
            raise StudentNotFoundError(student_id)
        ensure_accepting_submissions(exam.status)

        paper = self._papers.get(exam_id)
        if paper is None or not paper.questions:
            raise EmptyPaperError(f"No questions found for exam {exam_id}")

        normalized = normalize_answers(answers)
        graded = grade(paper, normalized)

        saved = self._results.upsert(
            student_id,
            exam_id,
            ExamResult(
                student_id=student_id,
                exam_id=exam_id,
                score=graded.score,
                attempted_marks=graded.attempted_marks,
                percentage=graded.percentage,
                submitted_at=self._clock(),
                answers=normalized,
            ),
        )
        logger.info(
            "EXAM_SUBMIT exam_id=%s student_id=%s score=%s attempted=%s percentage=%s",
            exam_id, student_id, graded.score, graded.attempted_marks, graded.percentage,
        )

        exam_results = self._results.by_exam(exam_id)
        rank = exam_rank(exam_results, student_id)
        saved.rank = rank

        auto_completed = self._try_auto_complete(exam)

        return SubmissionOutcome(
            result=saved,
            total_marks=paper.total_marks,
            rank=rank,
            total_participants=len(exam_results),
            auto_completed=auto_completed,
        )

    def _try_auto_complete(self, exam: ExamRecord) -> bool:
        """
        제출 자체는 이미 저장됨. 여기서의 실패는 로그만 남긴다.
        동시 제출로 두 번 실행돼도 completed → completed 는 no-op.
        """
        try:
            submitted = self._results.count_by_exam(exam.id)
            students = self._students.count()
            if not should_auto_complete(exam.status, submitted, students):
                return False
            self._exams.set_status(exam.id, ExamStatus.COMPLETED)
        except Exception:
            logger.warning("EXAM_AUTO_COMPLETE exam_id=%s failed", exam.id, exc_info=True)
            return False

        logger.info(
            "EXAM_AUTO_COMPLETE exam_id=%s submitted=%s students=%s",
            exam.id, submitted, students,
        )
        return True
