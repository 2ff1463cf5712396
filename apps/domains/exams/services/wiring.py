# PATH: apps/domains/exams/services/wiring.py
"""
포트 ↔ 어댑터 조립 (views / management command 공용)

- 문제지: R2 버킷(EXAM_PAPER_BUCKET) + Redis 이름 캐시
- 시험/결과/학생: Django ORM
"""
from __future__ import annotations

from django.conf import settings

from academy.adapters.cache.redis_name_cache import RedisExamNameCache
from academy.adapters.db.django.repositories_exams import (
    DjangoExamRecordStore,
    DjangoResultStore,
    DjangoStudentDirectory,
)
from academy.adapters.storage.object_storage_paper_store import ObjectStoragePaperStore
from academy.adapters.storage.r2_object_storage import R2ObjectStorage
from academy.application.use_cases.exams.aggregate_sync import AggregateSynchronizer, MarksMaintenance
from academy.application.use_cases.exams.dashboard import DashboardService
from academy.application.use_cases.exams.exam_lifecycle import ExamLifecycleService
from academy.application.use_cases.exams.exam_names import ExamNameResolver
from academy.application.use_cases.exams.paper_authoring import PaperAuthoringService
from academy.application.use_cases.exams.submission import ExamSubmissionService


def _exam_store() -> DjangoExamRecordStore:
    return DjangoExamRecordStore()


def name_resolver() -> ExamNameResolver:
    cache = RedisExamNameCache(ttl_seconds=int(getattr(settings, "EXAM_NAME_CACHE_TTL_SECONDS", 300)))
    return ExamNameResolver(_exam_store(), cache=cache)


def paper_store(names: ExamNameResolver | None = None) -> ObjectStoragePaperStore:
    storage = R2ObjectStorage(bucket=getattr(settings, "EXAM_PAPER_BUCKET", "exam-papers"))
    return ObjectStoragePaperStore(storage, names or name_resolver())


def synchronizer() -> AggregateSynchronizer:
    return AggregateSynchronizer(_exam_store())


def paper_authoring_service() -> PaperAuthoringService:
    return PaperAuthoringService(_exam_store(), paper_store(), synchronizer())


def marks_maintenance() -> MarksMaintenance:
    return MarksMaintenance(_exam_store(), paper_store(), synchronizer())


def exam_lifecycle_service() -> ExamLifecycleService:
    names = name_resolver()
    return ExamLifecycleService(_exam_store(), paper_store(names), names)


def submission_service() -> ExamSubmissionService:
    return ExamSubmissionService(
        _exam_store(), paper_store(), DjangoResultStore(), DjangoStudentDirectory()
    )


def dashboard_service() -> DashboardService:
    return DashboardService(_exam_store(), DjangoResultStore(), DjangoStudentDirectory())
