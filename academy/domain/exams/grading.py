"""
채점 정책 v1: 순수 함수 (같은 paper + 같은 답안 → 항상 같은 결과)

- 미응시(빈 답) 문항: score / attemptedMarks 모두 0
- 응시 문항: attemptedMarks 에 배점 전부 가산
- multiple_choice / true_false: 정답과 (trim + 대소문자 무시) 일치 시 배점 가산
- short_answer / essay: 응시만 하면 배점 전부 가산 (자동 정답 판정 없음)
- percentage 분모는 총점이 아니라 attemptedMarks
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from academy.domain.exams.entities import AUTO_GRADED_TYPES, Paper, Question
from academy.domain.exams.errors import EmptyPaperError


@dataclass(frozen=True)
class GradeOutcome:
    score: int
    attempted_marks: int
    percentage: int


def _norm(s: Optional[str]) -> str:
    return (s or "").strip().lower()


def is_attempted(answer: Optional[str]) -> bool:
    return bool(answer is not None and str(answer).strip())


def percentage_of(score: int, attempted_marks: int) -> int:
    """round(100 * score / attempted), .5 는 올림. attempted 0 이면 0."""
    if attempted_marks <= 0:
        return 0
    return (200 * score + attempted_marks) // (2 * attempted_marks)


def score_question(q: Question, answer: Optional[str]) -> int:
    if not is_attempted(answer):
        return 0
    if q.type in AUTO_GRADED_TYPES:
        if q.correct_answer is None:
            return 0
        return q.marks if _norm(answer) == _norm(q.correct_answer) else 0
    # short_answer / essay
    return q.marks


def grade(paper: Paper, submitted_answers: Mapping[str, Optional[str]]) -> GradeOutcome:
    if not paper.questions:
        raise EmptyPaperError(f"Paper for exam {paper.exam_id} has no questions")

    score = 0
    attempted = 0
    for q in paper.ordered_questions():
        answer = submitted_answers.get(q.id)
        if not is_attempted(answer):
            continue
        attempted += q.marks
        score += score_question(q, str(answer))

    return GradeOutcome(
        score=score,
        attempted_marks=attempted,
        percentage=percentage_of(score, attempted),
    )
