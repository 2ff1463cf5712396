"""
문항 검증: 저장소에 잘못된 문항이 들어가지 않도록 쓰기 전에 수행
"""
from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional

from academy.domain.exams.entities import Question, QuestionType
from academy.domain.exams.errors import QuestionValidationError

MIN_MULTIPLE_CHOICE_OPTIONS = 2
TRUE_FALSE_ANSWERS = ("true", "false")


def normalize_options(options: Optional[Iterable[Optional[str]]]) -> Optional[list[str]]:
    """빈 문자열/None 옵션 제거. 입력이 None이면 None."""
    if options is None:
        return None
    return [str(o) for o in options if o is not None and str(o).strip() != ""]


def question_errors(q: Question) -> dict[str, str]:
    errors: dict[str, str] = {}

    if not (q.text or "").strip():
        errors["question"] = "question text is required"

    if isinstance(q.marks, bool) or not isinstance(q.marks, int) or q.marks <= 0:
        errors["marks"] = "marks must be a positive integer"

    if isinstance(q.order_index, bool) or not isinstance(q.order_index, int):
        errors["orderIndex"] = "orderIndex must be an integer"

    if q.type == QuestionType.MULTIPLE_CHOICE:
        if not q.options or len(q.options) < MIN_MULTIPLE_CHOICE_OPTIONS:
            errors["options"] = (
                f"multiple choice needs at least {MIN_MULTIPLE_CHOICE_OPTIONS} options"
            )
        if not (q.correct_answer or "").strip():
            errors["correctAnswer"] = "multiple choice needs a correct answer"
    elif q.options:
        errors["options"] = "options are only allowed for multiple choice"

    if q.type == QuestionType.TRUE_FALSE and q.correct_answer is not None:
        if q.correct_answer.strip().lower() not in TRUE_FALSE_ANSWERS:
            errors["correctAnswer"] = "true/false answer must be 'true' or 'false'"

    return errors


def validate_question(q: Question) -> None:
    errors = question_errors(q)
    if errors:
        raise QuestionValidationError(errors)


def validate_question_set(questions: Iterable[Question]) -> None:
    """개별 문항 + paper 내 id / orderIndex 유일성."""
    questions = list(questions)
    for q in questions:
        errors = question_errors(q)
        if errors:
            raise QuestionValidationError({f"{q.id}.{k}": v for k, v in errors.items()})

    dup_ids = [k for k, n in Counter(q.id for q in questions).items() if n > 1]
    if dup_ids:
        raise QuestionValidationError({"id": f"duplicate question ids: {sorted(dup_ids)}"})

    dup_orders = [k for k, n in Counter(q.order_index for q in questions).items() if n > 1]
    if dup_orders:
        raise QuestionValidationError(
            {"orderIndex": f"duplicate orderIndex values: {sorted(dup_orders)}"}
        )
