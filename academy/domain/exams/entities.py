"""
시험/문제지 도메인 엔티티: 순수 파이썬 (Django/ORM/boto3/redis 미사용)

Paper는 시험 1개당 문서 1개 (1:1).
totalMarks / totalQuestions 는 questions 에서 파생되는 값이며 직접 설정할 수 없다.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

PAPER_DOCUMENT_VERSION = "1.0"
DEFAULT_PAPER_INSTRUCTIONS = "Please read all questions carefully before answering."


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    SHORT_ANSWER = "short_answer"
    ESSAY = "essay"
    TRUE_FALSE = "true_false"


# 프론트 레거시 타입명 → 저장 타입
QUESTION_TYPE_ALIASES = {
    "mcq": QuestionType.MULTIPLE_CHOICE,
    "written": QuestionType.SHORT_ANSWER,
}

# 정답 비교로 채점하는 타입
AUTO_GRADED_TYPES = (QuestionType.MULTIPLE_CHOICE, QuestionType.TRUE_FALSE)


class ExamStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Question:
    """문항 1개 (leaf value)."""
    id: str
    text: str
    type: QuestionType
    marks: int
    order_index: int
    created_at: str
    updated_at: str
    options: Optional[list[str]] = None
    correct_answer: Optional[str] = None

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "id": self.id,
            "question": self.text,
            "type": self.type.value,
        }
        if self.options is not None:
            doc["options"] = list(self.options)
        if self.correct_answer is not None:
            doc["correctAnswer"] = self.correct_answer
        doc.update(
            {
                "marks": self.marks,
                "orderIndex": self.order_index,
                "createdAt": self.created_at,
                "updatedAt": self.updated_at,
            }
        )
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Question":
        options = doc.get("options")
        return cls(
            id=str(doc["id"]),
            text=str(doc.get("question") or ""),
            type=parse_question_type(doc.get("type")),
            marks=int(doc.get("marks") or 0),
            order_index=int(doc.get("orderIndex") or 0),
            created_at=str(doc.get("createdAt") or ""),
            updated_at=str(doc.get("updatedAt") or ""),
            options=[str(o) for o in options] if isinstance(options, list) else None,
            correct_answer=(
                str(doc["correctAnswer"]) if doc.get("correctAnswer") is not None else None
            ),
        )


def parse_question_type(raw: Any) -> QuestionType:
    """'mcq' 등 별칭 포함. 알 수 없는 값이면 ValueError."""
    key = str(raw or "").strip().lower()
    if key in QUESTION_TYPE_ALIASES:
        return QUESTION_TYPE_ALIASES[key]
    return QuestionType(key)


@dataclass
class Paper:
    """
    시험 문제지 문서.

    저장 시에는 전체 문서를 통째로 덮어쓴다 (last-writer-wins).
    """
    id: str
    exam_id: int
    title: str
    instructions: str
    created_at: str
    updated_at: str
    exam_name_snapshot: str
    questions: list[Question] = field(default_factory=list)
    version: str = PAPER_DOCUMENT_VERSION

    @property
    def total_marks(self) -> int:
        return sum(q.marks for q in self.questions)

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    def ordered_questions(self) -> list[Question]:
        """orderIndex 오름차순 (동일 값이면 기존 순서 유지)."""
        return sorted(self.questions, key=lambda q: q.order_index)

    def find_question(self, question_id: str) -> Optional[Question]:
        for q in self.questions:
            if q.id == question_id:
                return q
        return None

    def next_order_index(self) -> int:
        if not self.questions:
            return 0
        return max(q.order_index for q in self.questions) + 1

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "examId": self.exam_id,
            "title": self.title,
            "instructions": self.instructions,
            "totalQuestions": self.total_questions,
            "totalMarks": self.total_marks,
            "questions": [q.to_document() for q in self.questions],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "metadata": {
                "examName": self.exam_name_snapshot,
                "lastUpdated": self.updated_at,
                "version": self.version,
            },
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Paper":
        # 저장된 totalMarks/totalQuestions 는 무시하고 questions 로부터 다시 파생
        metadata = doc.get("metadata") or {}
        return cls(
            id=str(doc["id"]),
            exam_id=int(doc["examId"]),
            title=str(doc.get("title") or ""),
            instructions=str(doc.get("instructions") or ""),
            created_at=str(doc.get("createdAt") or ""),
            updated_at=str(doc.get("updatedAt") or ""),
            exam_name_snapshot=str(metadata.get("examName") or ""),
            questions=_renumber_if_needed(
                [Question.from_document(q) for q in doc.get("questions") or []]
            ),
            version=str(metadata.get("version") or PAPER_DOCUMENT_VERSION),
        )


def _renumber_if_needed(questions: list[Question]) -> list[Question]:
    """
    이전 버전이 저장한 문서는 orderIndex 가 없거나(→ 0) 겹칠 수 있다.
    그대로 두면 이후 모든 저장이 유일성 검증에서 막히므로,
    표시 순서(orderIndex, 같으면 저장 순서)대로 0..n-1 을 다시 매긴다.
    """
    if len({q.order_index for q in questions}) == len(questions):
        return questions
    ordered = sorted(questions, key=lambda q: q.order_index)
    return [replace(q, order_index=i) for i, q in enumerate(ordered)]


@dataclass(frozen=True)
class PaperDraft:
    """PaperStore.save 입력. 항상 전체 문항 목록을 담는다 (diff 아님)."""
    title: str
    instructions: str
    questions: list[Question]

    @classmethod
    def from_paper(cls, paper: Paper, **changes: Any) -> "PaperDraft":
        draft = cls(
            title=paper.title,
            instructions=paper.instructions,
            questions=list(paper.questions),
        )
        return replace(draft, **changes) if changes else draft


@dataclass
class ExamRecord:
    """시험 관계형 레코드. total_marks 는 paper 파생값의 캐시 사본."""
    id: int
    name: str
    subject: str
    date: date
    duration: int
    total_marks: int
    status: ExamStatus
    start_time: Optional[datetime] = None
    description: Optional[str] = None


@dataclass
class ExamResult:
    """(학생, 시험) 쌍당 1개. 재제출 시 같은 행을 갱신한다."""
    student_id: int
    exam_id: int
    score: int
    attempted_marks: int
    percentage: int
    submitted_at: datetime
    answers: dict[str, str] = field(default_factory=dict)
    id: Optional[int] = None
    # 저장 필드 아님: 조회 시마다 재계산
    rank: Optional[int] = None
