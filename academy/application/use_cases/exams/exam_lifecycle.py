"""
시험 레코드 관리 UseCase (관리자): 생성 / 수정 / 상태 전이 / 삭제

- 생성: 상태는 항상 upcoming
- 이름 중복(대소문자 무시), 시작 시각 중복 → ExamValidationError
- 이름 변경: 캐시 invalidate 후 paper 키 이동 (실패해도 수정은 성공, 경고만)
- 삭제: 레코드 삭제 후 paper 삭제 (paper 삭제 실패는 경고만)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping, Optional, Union

from academy.application.ports.repositories import ExamRecordStore
from academy.application.ports.storage import PaperStore
from academy.application.use_cases.exams.exam_names import ExamNameResolver
from academy.domain.exams.entities import ExamRecord, ExamStatus
from academy.domain.exams.errors import (
    ExamNotFoundError,
    ExamValidationError,
    InfrastructureError,
)
from academy.domain.exams.lifecycle import ensure_exam_editable, ensure_transition

logger = logging.getLogger(__name__)

DEFAULT_EXAM_TOTAL_MARKS = 100

# update 로 바꿀 수 있는 필드 (total_marks 는 paper 가 생기면 synchronizer 전용)
EDITABLE_EXAM_FIELDS = (
    "name", "subject", "date", "start_time", "duration", "description", "status", "total_marks",
)


@dataclass(frozen=True)
class ExamInput:
    name: str
    subject: str
    date: date
    duration: int
    total_marks: Optional[int] = None
    start_time: Optional[datetime] = None
    description: Optional[str] = None


@dataclass
class ExamChangeOutcome:
    exam: Optional[ExamRecord]
    warnings: list[str] = field(default_factory=list)


def _same_instant(a: Optional[datetime], b: Optional[datetime]) -> bool:
    if a is None or b is None:
        return False
    if (a.tzinfo is None) != (b.tzinfo is None):
        return a.replace(tzinfo=None) == b.replace(tzinfo=None)
    return a == b


def parse_status(raw: Union[ExamStatus, str]) -> ExamStatus:
    try:
        return ExamStatus(raw)
    except ValueError as e:
        raise ExamValidationError(f"Unknown exam status: {raw!r}") from e


class ExamLifecycleService:
    def __init__(
        self,
        exams: ExamRecordStore,
        papers: PaperStore,
        names: ExamNameResolver,
    ) -> None:
        self._exams = exams
        self._papers = papers
        self._names = names

    # -----------------------------
    # Validation helpers
    # -----------------------------
    def _check_unique(
        self,
        name: Optional[str],
        start_time: Optional[datetime],
        exclude_id: Optional[int] = None,
    ) -> None:
        others = [e for e in self._exams.list_all() if e.id != exclude_id]

        if name is not None:
            wanted = name.strip().lower()
            if any(e.name.strip().lower() == wanted for e in others):
                raise ExamValidationError(
                    "An exam with this name already exists. Please choose a different name."
                )

        if start_time is not None:
            if any(_same_instant(e.start_time, start_time) for e in others):
                raise ExamValidationError(
                    "Another exam is already scheduled at this start time. "
                    "Please choose a different time."
                )

    def _require(self, exam_id: int) -> ExamRecord:
        exam = self._exams.get(exam_id)
        if exam is None:
            raise ExamNotFoundError(exam_id)
        return exam

    # -----------------------------
    # UseCases
    # -----------------------------
    def create_exam(self, data: ExamInput) -> ExamRecord:
        name = (data.name or "").strip()
        if not name:
            raise ExamValidationError("Exam name is required")
        if data.duration is None or int(data.duration) <= 0:
            raise ExamValidationError("Duration must be a positive number of minutes")

        self._check_unique(name, data.start_time)

        record = self._exams.create(
            ExamRecord(
                id=0,
                name=name,
                subject=data.subject,
                date=data.date,
                duration=int(data.duration),
                total_marks=int(data.total_marks) if data.total_marks else DEFAULT_EXAM_TOTAL_MARKS,
                status=ExamStatus.UPCOMING,
                start_time=data.start_time,
                description=data.description,
            )
        )
        logger.info("EXAM_CREATE exam_id=%s name=%s", record.id, record.name)
        return record

    def update_exam(self, exam_id: int, changes: Mapping[str, Any]) -> ExamChangeOutcome:
        current = self._require(exam_id)
        ensure_exam_editable(current.status)

        unknown = set(changes) - set(EDITABLE_EXAM_FIELDS)
        if unknown:
            raise ExamValidationError(f"Fields are not editable: {sorted(unknown)}")

        payload: dict[str, Any] = {k: v for k, v in changes.items() if v is not None}

        if "status" in payload:
            target = parse_status(payload["status"])
            if not ensure_transition(current.status, target):
                payload.pop("status")
            else:
                payload["status"] = target

        new_name = payload.get("name")
        if new_name is not None:
            new_name = str(new_name).strip()
            if not new_name:
                raise ExamValidationError("Exam name is required")
            payload["name"] = new_name
        renaming = new_name is not None and new_name != current.name

        self._check_unique(
            new_name if renaming else None,
            payload.get("start_time"),
            exclude_id=exam_id,
        )

        if "total_marks" in payload and self._papers.get(exam_id) is not None:
            # 문제지가 있으면 총점은 문항 합계로만 갱신된다
            logger.info("EXAM_UPDATE exam_id=%s ignoring manual total_marks", exam_id)
            payload.pop("total_marks")

        updated = self._exams.update(exam_id, payload)
        if updated is None:
            raise ExamNotFoundError(exam_id)

        outcome = ExamChangeOutcome(exam=updated)
        if renaming:
            self._names.invalidate(exam_id)
            try:
                self._papers.rename_key(exam_id, current.name)
            except InfrastructureError as e:
                logger.warning(
                    "PAPER_RENAME exam_id=%s failed after exam rename", exam_id, exc_info=True
                )
                outcome.warnings.append(f"Exam updated, but paper could not be moved: {e}")
            finally:
                # 이동 중 다른 요청이 커밋 전 이름을 다시 캐시했을 수 있다
                self._names.invalidate(exam_id)

        logger.info("EXAM_UPDATE exam_id=%s fields=%s", exam_id, sorted(payload))
        return outcome

    def set_status(self, exam_id: int, status: Union[ExamStatus, str]) -> ExamRecord:
        current = self._require(exam_id)
        target = parse_status(status)
        if ensure_transition(current.status, target):
            self._exams.set_status(exam_id, target)
            logger.info(
                "EXAM_STATUS exam_id=%s %s -> %s", exam_id, current.status.value, target.value
            )
        return self._require(exam_id)

    def delete_exam(self, exam_id: int) -> ExamChangeOutcome:
        current = self._require(exam_id)
        # 키 계산에 필요한 이름은 레코드 삭제 전에 확보
        exam_name = current.name

        if not self._exams.delete(exam_id):
            raise ExamNotFoundError(exam_id)
        self._names.invalidate(exam_id)
        logger.info("EXAM_DELETE exam_id=%s name=%s", exam_id, exam_name)

        outcome = ExamChangeOutcome(exam=None)
        try:
            self._papers.delete(exam_id, exam_name=exam_name)
        except InfrastructureError as e:
            logger.warning("PAPER_DELETE exam_id=%s failed after exam delete", exam_id, exc_info=True)
            outcome.warnings.append(f"Exam deleted, but paper could not be removed: {e}")
        return outcome
