"""
Aggregate Synchronizer: paper 파생 totalMarks → 시험 레코드 캐시 사본

materialized view 의 "재계산 후 전파" 단계.
paper 저장이 성공한 뒤에만 호출하며, 실패해도 paper 쓰기를 롤백하지 않는다
(점수 합계가 잠시 stale 한 편이 문항 수정 유실보다 낫다).
큐 기반 갱신으로 바꿀 때는 sync() 만 교체하면 된다.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from academy.application.ports.repositories import ExamRecordStore
from academy.application.ports.storage import PaperStore
from academy.domain.exams.errors import DerivedSyncWarning, ExamNotFoundError, InfrastructureError

logger = logging.getLogger(__name__)


class AggregateSynchronizer:
    def __init__(self, exams: ExamRecordStore) -> None:
        self._exams = exams

    def sync(self, exam_id: int, total_marks: int) -> Optional[DerivedSyncWarning]:
        """
        멱등. 성공 시 None, 실패 시 경고 값 반환 (예외를 올리지 않음).
        """
        try:
            updated = self._exams.update_total_marks(exam_id, int(total_marks))
        except Exception as e:
            logger.warning(
                "MARKS_SYNC exam_id=%s total_marks=%s failed", exam_id, total_marks, exc_info=True
            )
            return DerivedSyncWarning(exam_id=exam_id, total_marks=total_marks, reason=str(e))

        if not updated:
            logger.warning("MARKS_SYNC exam_id=%s no exam row to update", exam_id)
            return DerivedSyncWarning(
                exam_id=exam_id, total_marks=total_marks, reason="exam record not found"
            )

        logger.info("MARKS_SYNC exam_id=%s total_marks=%s", exam_id, total_marks)
        return None


@dataclass(frozen=True)
class MarksReport:
    exam_id: int
    exam_name: str
    exam_total_marks: int
    paper_total_marks: int
    question_count: int

    @property
    def discrepancy(self) -> bool:
        return self.exam_total_marks != self.paper_total_marks


class MarksMaintenance:
    """
    수동 동기화 / 불일치 점검 (관리자 엔드포인트, management command).
    paper 가 없으면 합계 0 으로 맞춘다.
    """

    def __init__(
        self,
        exams: ExamRecordStore,
        papers: PaperStore,
        synchronizer: AggregateSynchronizer,
    ) -> None:
        self._exams = exams
        self._papers = papers
        self._synchronizer = synchronizer

    def _paper_totals(self, exam_id: int) -> tuple[int, int]:
        paper = self._papers.get(exam_id)
        if paper is None:
            return 0, 0
        return paper.total_marks, paper.total_questions

    def force_sync(self, exam_id: int) -> Optional[DerivedSyncWarning]:
        if self._exams.get(exam_id) is None:
            raise ExamNotFoundError(exam_id)
        total, count = self._paper_totals(exam_id)
        logger.info("MARKS_SYNC manual exam_id=%s questions=%s total_marks=%s", exam_id, count, total)
        return self._synchronizer.sync(exam_id, total)

    def sync_all(self) -> list[DerivedSyncWarning]:
        warnings: list[DerivedSyncWarning] = []
        exams = self._exams.list_all()
        logger.info("MARKS_SYNC manual start exams=%s", len(exams))
        for exam in exams:
            try:
                warning = self.force_sync(exam.id)
            except InfrastructureError as e:
                # 문제지 하나를 못 읽어도 나머지 시험은 계속 맞춘다
                logger.warning("MARKS_SYNC manual exam_id=%s paper unreadable", exam.id, exc_info=True)
                warning = DerivedSyncWarning(exam_id=exam.id, total_marks=0, reason=str(e))
            if warning is not None:
                warnings.append(warning)
        logger.info("MARKS_SYNC manual done exams=%s warnings=%s", len(exams), len(warnings))
        return warnings

    def inspect_marks(self, exam_id: int) -> MarksReport:
        exam = self._exams.get(exam_id)
        if exam is None:
            raise ExamNotFoundError(exam_id)
        total, count = self._paper_totals(exam_id)
        return MarksReport(
            exam_id=exam.id,
            exam_name=exam.name,
            exam_total_marks=exam.total_marks,
            paper_total_marks=total,
            question_count=count,
        )
