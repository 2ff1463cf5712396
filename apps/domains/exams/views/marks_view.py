# PATH: apps/domains/exams/views/marks_view.py
# 시험 총점 ↔ 문제지 배점 합계 점검 / 수동 동기화 (관리자)

from __future__ import annotations

from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.domains.exams.services.wiring import marks_maintenance
from apps.domains.results.permissions import IsExamAdmin


class ExamMarksView(APIView):
    """GET /exams/<id>/marks/: 시험 레코드 총점과 문제지 합계 비교."""

    permission_classes = [IsAuthenticated, IsExamAdmin]

    def get(self, request, exam_id: int):
        report = marks_maintenance().inspect_marks(exam_id)
        return Response(
            {
                "exam_id": report.exam_id,
                "exam_name": report.exam_name,
                "exam_total_marks": report.exam_total_marks,
                "paper_total_marks": report.paper_total_marks,
                "question_count": report.question_count,
                "discrepancy": report.discrepancy,
            }
        )


class ExamMarksSyncView(APIView):
    """
    POST /exams/<id>/marks/sync/  시험 1개
    POST /exams/marks/sync/       전체
    """

    permission_classes = [IsAuthenticated, IsExamAdmin]

    def post(self, request, exam_id: int | None = None):
        maintenance = marks_maintenance()
        if exam_id is not None:
            warning = maintenance.force_sync(exam_id)
            warnings = [warning] if warning is not None else []
        else:
            warnings = maintenance.sync_all()
        return Response(
            {
                "synced": not warnings,
                "warnings": [w.message for w in warnings],
            }
        )
