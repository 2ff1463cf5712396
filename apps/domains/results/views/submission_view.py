# PATH: apps/domains/results/views/submission_view.py
from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.domains.exams.services.wiring import submission_service
from apps.domains.results.permissions import IsStudent, student_id_for
from apps.domains.results.serializers.result import SubmissionResultSerializer, SubmitExamSerializer


class SubmitExamView(APIView):
    """
    POST /results/exams/<exam_id>/submit/

    - active 시험만 (아니면 409)
    - 같은 시험 재제출 시 기존 결과 갱신
    - 마지막 학생 제출이면 시험 자동 완료
    """

    permission_classes = [IsAuthenticated, IsStudent]

    def post(self, request, exam_id: int):
        serializer = SubmitExamSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        outcome = submission_service().submit(
            student_id=student_id_for(request.user),
            exam_id=exam_id,
            answers=serializer.validated_data["answers"],
        )
        return Response(
            SubmissionResultSerializer(outcome).data,
            status=status.HTTP_201_CREATED,
        )
