from __future__ import annotations

from django.db import models
from django.utils import timezone

from apps.api.common.models import BaseModel


class Result(BaseModel):
    """
    (student, exam) 당 1행

    - 재제출 시 같은 행을 갱신 (upsert)
    - percentage = round(100 * score / attempted_marks)
    - rank 는 저장하지 않음 (조회 시 계산)
    """

    student = models.ForeignKey(
        "students.Student",
        on_delete=models.CASCADE,
        related_name="results",
    )
    exam = models.ForeignKey(
        "exams.Exam",
        on_delete=models.CASCADE,
        related_name="results",
    )

    score = models.PositiveIntegerField(default=0)
    attempted_marks = models.PositiveIntegerField(default=0)
    percentage = models.PositiveSmallIntegerField(default=0)

    # 예: {"question_5_1712345678901_ab12cd34e": "B", ...}
    answers = models.JSONField(default=dict, blank=True)

    submitted_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "results_result"
        constraints = [
            models.UniqueConstraint(
                fields=["student", "exam"],
                name="uniq_result_per_student_exam",
            ),
        ]
        indexes = [
            models.Index(fields=["exam", "percentage"], name="results_exam_pct_idx"),
        ]

    def __str__(self):
        return f"Result(student={self.student_id}, exam={self.exam_id}, {self.percentage}%)"
