# PATH: apps/api/common/exceptions.py
"""
DRF EXCEPTION_HANDLER: 시험 도메인 오류 → HTTP 상태

- NotFoundError               → 404
- QuestionValidationError 등   → 400
- EmptyPaperError             → 400
- ConflictingLifecycleError   → 409
- InfrastructureError         → 503 (스토리지/캐시 장애, 재시도 가능)
"""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from academy.domain.exams.errors import (
    ConflictingLifecycleError,
    EmptyPaperError,
    ExamDomainError,
    ExamValidationError,
    InfrastructureError,
    NotFoundError,
    QuestionValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (QuestionValidationError, status.HTTP_400_BAD_REQUEST),
    (ExamValidationError, status.HTTP_400_BAD_REQUEST),
    (EmptyPaperError, status.HTTP_400_BAD_REQUEST),
    (ConflictingLifecycleError, status.HTTP_409_CONFLICT),
)


def _domain_status(exc: ExamDomainError) -> int:
    for klass, code in _STATUS_BY_ERROR:
        if isinstance(exc, klass):
            return code
    return status.HTTP_400_BAD_REQUEST


def exam_exception_handler(exc, context):
    if isinstance(exc, ExamDomainError):
        body = {"detail": str(exc), "code": exc.code}
        if isinstance(exc, QuestionValidationError):
            body["errors"] = exc.errors
        return Response(body, status=_domain_status(exc))

    if isinstance(exc, InfrastructureError):
        view = context.get("view")
        logger.error(
            "INFRA_ERROR view=%s: %s", view.__class__.__name__ if view else "-", exc, exc_info=exc
        )
        return Response(
            {"detail": "Storage is temporarily unavailable. Please retry.", "code": exc.code},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return drf_exception_handler(exc, context)
