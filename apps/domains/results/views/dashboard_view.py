# PATH: apps/domains/results/views/dashboard_view.py
from __future__ import annotations

from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.domains.exams.services.wiring import dashboard_service
from apps.domains.results.permissions import IsExamAdmin, IsStudent, student_id_for
from apps.domains.results.serializers.result import (
    ExamResultRowSerializer,
    ExamStatisticsSerializer,
    StudentDashboardSerializer,
)


class StudentDashboardView(APIView):
    """
    GET /results/me/dashboard/

    - available: upcoming + 미응시 (날짜 오름차순)
    - completed: completed 또는 응시함 (날짜 내림차순)
    - overall_rank: 결과 없는 학생은 항상 결과 있는 학생 아래
    """

    permission_classes = [IsAuthenticated, IsStudent]

    def get(self, request):
        dashboard = dashboard_service().student_dashboard(student_id_for(request.user))
        return Response(StudentDashboardSerializer(dashboard).data)


class AdminExamResultsView(APIView):
    """GET /results/admin/exams/<exam_id>/: 순위순 결과 목록."""

    permission_classes = [IsAuthenticated, IsExamAdmin]

    def get(self, request, exam_id: int):
        rows = dashboard_service().exam_results(exam_id)
        return Response(ExamResultRowSerializer(rows, many=True).data)


class AdminStatisticsView(APIView):
    """GET /results/admin/statistics/"""

    permission_classes = [IsAuthenticated, IsExamAdmin]

    def get(self, request):
        return Response(ExamStatisticsSerializer(dashboard_service().statistics()).data)
