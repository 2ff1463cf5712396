from django.db import models
from django.conf import settings

from apps.api.common.models import BaseModel


class Student(BaseModel):
    # =========================
    # 🔐 로그인 사용자 연결
    # =========================
    # 학생 본인 제출/대시보드 조회 시 request.user → Student 매핑
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="student_profile",
        help_text="학생이 로그인 계정을 가지는 경우 연결",
    )

    # =========================
    # 기본 정보
    # =========================
    name = models.CharField(max_length=50)
    email = models.EmailField(unique=True)
    class_name = models.CharField(max_length=50, blank=True, default="")

    class Meta:
        db_table = "students_student"
        # 전체 반 순위 동점 처리 순서 = id 순
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} ({self.email})"
