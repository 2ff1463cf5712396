# PATH: apps/api/common/models.py
from django.db import models


class BaseModel(models.Model):
    """
    exams / students / results 공통 베이스.

    updated_at 은 QuerySet.update() 경로(총점 동기화, 자동 완료)에서
    auto_now 가 돌지 않으므로 저장소 어댑터가 직접 넣는다.
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
