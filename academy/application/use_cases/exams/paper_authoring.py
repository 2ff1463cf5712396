"""
문제지 작성 UseCase (관리자)

흐름 (모든 쓰기 공통):
1) 시험 존재 확인 → 없으면 ExamNotFoundError
2) completed 시험이면 ConflictingLifecycleError (paper 읽기 전용)
3) 전체 문항 목록을 만들어 PaperStore.save (read-modify-write, last-writer-wins)
4) 저장 성공 후 AggregateSynchronizer.sync → 실패는 경고로만 반환
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from academy.application.ports.repositories import ExamRecordStore
from academy.application.ports.storage import PaperStore
from academy.application.use_cases.exams.aggregate_sync import AggregateSynchronizer
from academy.domain.exams.entities import (
    DEFAULT_PAPER_INSTRUCTIONS,
    ExamRecord,
    Paper,
    PaperDraft,
    Question,
    QuestionType,
    parse_question_type,
)
from academy.domain.exams.errors import (
    DerivedSyncWarning,
    ExamNotFoundError,
    PaperNotFoundError,
    QuestionNotFoundError,
    QuestionValidationError,
)
from academy.domain.exams.lifecycle import ensure_paper_editable
from academy.domain.exams.validation import normalize_options, validate_question
from academy.domain.shared.ids import generate_question_id, to_iso_millis, utc_now

logger = logging.getLogger(__name__)

# update_question 에서 바꿀 수 있는 필드
EDITABLE_QUESTION_FIELDS = ("text", "type", "marks", "order_index", "options", "correct_answer")


def default_paper_title(exam_name: str) -> str:
    return f"{exam_name} Question Paper"


@dataclass(frozen=True)
class QuestionInput:
    """관리자 입력 1문항. id 가 기존 문항과 같으면 createdAt 을 유지한다."""
    text: str
    type: Union[QuestionType, str]
    marks: int
    order_index: Optional[int] = None
    options: Optional[list[Optional[str]]] = None
    correct_answer: Optional[str] = None
    id: Optional[str] = None


@dataclass
class PaperSaveOutcome:
    paper: Paper
    warnings: list[DerivedSyncWarning] = field(default_factory=list)
    question: Optional[Question] = None

    @property
    def synced(self) -> bool:
        return not self.warnings


def _clean_answer(value: Optional[Any]) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _coerce_type(raw: Union[QuestionType, str]) -> QuestionType:
    if isinstance(raw, QuestionType):
        return raw
    try:
        return parse_question_type(raw)
    except ValueError as e:
        raise QuestionValidationError({"type": f"unknown question type: {raw!r}"}) from e


def build_question(
    exam_id: int,
    data: QuestionInput,
    *,
    order_index: int,
    now: datetime,
    existing: Optional[Question] = None,
) -> Question:
    qtype = _coerce_type(data.type)
    now_iso = to_iso_millis(now)
    # multiple_choice 외 타입은 options 를 저장하지 않는다
    options = normalize_options(data.options) if qtype == QuestionType.MULTIPLE_CHOICE else None

    q = Question(
        id=existing.id if existing else (data.id or generate_question_id(exam_id, now)),
        text=(data.text or "").strip(),
        type=qtype,
        marks=data.marks,
        order_index=order_index,
        created_at=existing.created_at if existing else now_iso,
        updated_at=now_iso,
        options=options,
        correct_answer=_clean_answer(data.correct_answer),
    )
    validate_question(q)
    return q


class PaperAuthoringService:
    def __init__(
        self,
        exams: ExamRecordStore,
        papers: PaperStore,
        synchronizer: AggregateSynchronizer,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._exams = exams
        self._papers = papers
        self._synchronizer = synchronizer
        self._clock = clock

    # -----------------------------
    # Internal helpers
    # -----------------------------
    def _require_exam(self, exam_id: int) -> ExamRecord:
        exam = self._exams.get(exam_id)
        if exam is None:
            raise ExamNotFoundError(exam_id)
        return exam

    def _require_editable(self, exam_id: int) -> ExamRecord:
        exam = self._require_exam(exam_id)
        ensure_paper_editable(exam.status)
        return exam

    def _require_paper(self, exam_id: int) -> Paper:
        paper = self._papers.get(exam_id)
        if paper is None:
            raise PaperNotFoundError(exam_id)
        return paper

    def _persist(self, exam_id: int, draft: PaperDraft) -> PaperSaveOutcome:
        paper = self._papers.save(exam_id, draft)
        outcome = PaperSaveOutcome(paper=paper)
        warning = self._synchronizer.sync(exam_id, paper.total_marks)
        if warning is not None:
            outcome.warnings.append(warning)
        return outcome

    def _draft_base(self, exam: ExamRecord, paper: Optional[Paper]) -> PaperDraft:
        if paper is not None:
            return PaperDraft.from_paper(paper)
        return PaperDraft(
            title=default_paper_title(exam.name),
            instructions=DEFAULT_PAPER_INSTRUCTIONS,
            questions=[],
        )

    # -----------------------------
    # 조회
    # -----------------------------
    def get_paper(self, exam_id: int) -> Optional[Paper]:
        """학생/관리자 공통 조회. 문서가 없으면 None."""
        return self._papers.get(exam_id)

    def get_paper_for_editing(self, exam_id: int) -> Paper:
        """
        관리자 편집 화면용. 문서가 아직 없으면 저장하지 않은 빈 skeleton 을 반환.
        """
        exam = self._require_exam(exam_id)
        paper = self._papers.get(exam_id)
        if paper is not None:
            return paper

        now_iso = to_iso_millis(self._clock())
        return Paper(
            id=f"paper_{exam.id}_new",
            exam_id=exam.id,
            title=default_paper_title(exam.name),
            instructions=DEFAULT_PAPER_INSTRUCTIONS,
            created_at=now_iso,
            updated_at=now_iso,
            exam_name_snapshot=exam.name,
            questions=[],
        )

    # -----------------------------
    # 쓰기
    # -----------------------------
    def save_paper(
        self,
        exam_id: int,
        questions: Iterable[QuestionInput],
        title: Optional[str] = None,
        instructions: Optional[str] = None,
    ) -> PaperSaveOutcome:
        """
        전체 교체 저장. order_index 미지정 문항은 입력 순서대로 번호를 붙인다.
        """
        exam = self._require_editable(exam_id)
        current = self._papers.get(exam_id)
        base = self._draft_base(exam, current)
        now = self._clock()

        built: list[Question] = []
        for pos, data in enumerate(questions):
            existing = current.find_question(data.id) if (current and data.id) else None
            order_index = data.order_index if data.order_index is not None else pos
            built.append(build_question(exam_id, data, order_index=order_index, now=now, existing=existing))

        draft = PaperDraft(
            title=(title or "").strip() or base.title,
            instructions=(instructions or "").strip() or base.instructions,
            questions=built,
        )
        return self._persist(exam_id, draft)

    def replace_questions(self, exam_id: int, questions: Iterable[QuestionInput]) -> PaperSaveOutcome:
        """제목/안내문은 유지하고 문항 목록만 교체."""
        return self.save_paper(exam_id, questions)

    def update_paper_details(
        self,
        exam_id: int,
        title: Optional[str] = None,
        instructions: Optional[str] = None,
    ) -> PaperSaveOutcome:
        exam = self._require_editable(exam_id)
        base = self._draft_base(exam, self._papers.get(exam_id))

        changes: dict[str, Any] = {}
        if title is not None and title.strip():
            changes["title"] = title.strip()
        if instructions is not None and instructions.strip():
            changes["instructions"] = instructions.strip()

        draft = PaperDraft(
            title=changes.get("title", base.title),
            instructions=changes.get("instructions", base.instructions),
            questions=list(base.questions),
        )
        return self._persist(exam_id, draft)

    def add_question(self, exam_id: int, data: QuestionInput) -> PaperSaveOutcome:
        """paper 가 없으면 기본 제목/안내문으로 새로 만든다."""
        exam = self._require_editable(exam_id)
        current = self._papers.get(exam_id)
        base = self._draft_base(exam, current)

        order_index = data.order_index
        if order_index is None:
            order_index = current.next_order_index() if current else 0

        question = build_question(
            exam_id,
            QuestionInput(
                text=data.text,
                type=data.type,
                marks=data.marks,
                options=data.options,
                correct_answer=data.correct_answer,
            ),
            order_index=order_index,
            now=self._clock(),
        )

        draft = PaperDraft(
            title=base.title,
            instructions=base.instructions,
            questions=[*base.questions, question],
        )
        outcome = self._persist(exam_id, draft)
        outcome.question = question
        logger.info("QUESTION_ADD exam_id=%s question_id=%s", exam_id, question.id)
        return outcome

    def update_question(
        self,
        exam_id: int,
        question_id: str,
        changes: Mapping[str, Any],
    ) -> PaperSaveOutcome:
        """
        부분 수정. changes 키는 EDITABLE_QUESTION_FIELDS 중 일부.
        """
        self._require_editable(exam_id)
        paper = self._require_paper(exam_id)
        existing = paper.find_question(question_id)
        if existing is None:
            raise QuestionNotFoundError(exam_id, question_id)

        unknown = set(changes) - set(EDITABLE_QUESTION_FIELDS)
        if unknown:
            raise QuestionValidationError({k: "field is not editable" for k in sorted(unknown)})

        merged = QuestionInput(
            text=changes.get("text", existing.text),
            type=changes.get("type", existing.type),
            marks=changes.get("marks", existing.marks),
            options=changes.get("options", existing.options),
            correct_answer=changes.get("correct_answer", existing.correct_answer),
        )
        order_index = changes.get("order_index")
        if order_index is None:
            order_index = existing.order_index

        updated = build_question(
            exam_id, merged, order_index=order_index, now=self._clock(), existing=existing
        )
        draft = PaperDraft.from_paper(
            paper,
            questions=[updated if q.id == question_id else q for q in paper.questions],
        )
        outcome = self._persist(exam_id, draft)
        outcome.question = updated
        logger.info("QUESTION_UPDATE exam_id=%s question_id=%s", exam_id, question_id)
        return outcome

    def delete_question(self, exam_id: int, question_id: str) -> PaperSaveOutcome:
        self._require_editable(exam_id)
        paper = self._require_paper(exam_id)
        if paper.find_question(question_id) is None:
            raise QuestionNotFoundError(exam_id, question_id)

        draft = PaperDraft.from_paper(
            paper,
            questions=[q for q in paper.questions if q.id != question_id],
        )
        outcome = self._persist(exam_id, draft)
        logger.info("QUESTION_DELETE exam_id=%s question_id=%s", exam_id, question_id)
        return outcome

    def delete_all_questions(self, exam_id: int) -> PaperSaveOutcome:
        """문서는 남기고 문항만 비운다 (totalMarks → 0)."""
        self._require_editable(exam_id)
        paper = self._require_paper(exam_id)
        outcome = self._persist(exam_id, PaperDraft.from_paper(paper, questions=[]))
        logger.info("QUESTION_DELETE_ALL exam_id=%s removed=%s", exam_id, paper.total_questions)
        return outcome
