from django.db import models

from apps.api.common.models import BaseModel


class Exam(BaseModel):
    """
    시험 레코드 (메타 정보)

    - 문항은 DB 가 아니라 객체 스토리지 문제지(JSON)에 있다
    - total_marks 는 문제지 문항 배점 합의 캐시 사본 (직접 수정 금지)
    """

    class Status(models.TextChoices):
        UPCOMING = "upcoming", "Upcoming"
        ACTIVE = "active", "Active"
        COMPLETED = "completed", "Completed"

    name = models.CharField(max_length=255)
    subject = models.CharField(max_length=100)
    description = models.TextField(blank=True, default="")

    date = models.DateField()
    start_time = models.DateTimeField(null=True, blank=True)
    # 분 단위
    duration = models.PositiveIntegerField()

    total_marks = models.PositiveIntegerField(default=100)

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.UPCOMING,
    )

    class Meta:
        db_table = "exams_exam"
        ordering = ["-date", "-id"]
        indexes = [
            models.Index(fields=["status"], name="exams_exam_status_idx"),
        ]

    def __str__(self):
        return self.name
