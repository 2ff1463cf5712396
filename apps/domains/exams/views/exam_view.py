# PATH: apps/domains/exams/views/exam_view.py
from __future__ import annotations

from rest_framework import status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from academy.adapters.db.django.repositories_exams import DjangoExamRecordStore
from academy.domain.exams.errors import ExamNotFoundError
from apps.domains.exams.serializers.exam import (
    ExamCreateSerializer,
    ExamRecordSerializer,
    ExamStatusSerializer,
    ExamUpdateSerializer,
)
from apps.domains.exams.services.wiring import exam_lifecycle_service
from apps.domains.results.permissions import IsExamAdmin


class ExamPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100


class ExamListCreateView(APIView):
    """
    GET  /exams/?search=&page=&limit=&noPagination=true
    POST /exams/  (관리자) → 항상 upcoming 으로 생성
    """

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsExamAdmin()]
        return [IsAuthenticated()]

    def get(self, request):
        exams = DjangoExamRecordStore().list_all()
        # 최근 날짜 먼저, 같은 날짜는 이름순
        exams.sort(key=lambda e: e.name)
        exams.sort(key=lambda e: e.date, reverse=True)

        search = (request.query_params.get("search") or "").strip().lower()
        if search:
            exams = [e for e in exams if search in e.name.lower() or search in e.subject.lower()]

        if request.query_params.get("noPagination") == "true":
            return Response(ExamRecordSerializer(exams, many=True).data)

        paginator = ExamPagination()
        page = paginator.paginate_queryset(exams, request, view=self)
        return paginator.get_paginated_response(ExamRecordSerializer(page, many=True).data)

    def post(self, request):
        serializer = ExamCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        exam = exam_lifecycle_service().create_exam(serializer.to_input())
        return Response(ExamRecordSerializer(exam).data, status=status.HTTP_201_CREATED)


class ExamDetailView(APIView):
    """
    GET    /exams/<id>/
    PATCH  /exams/<id>/  (관리자) 이름 변경 시 문제지 키도 이동
    DELETE /exams/<id>/  (관리자) 레코드 → 문제지 순서로 삭제
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsExamAdmin()]

    def get(self, request, exam_id: int):
        exam = DjangoExamRecordStore().get(exam_id)
        if exam is None:
            raise ExamNotFoundError(exam_id)
        return Response(ExamRecordSerializer(exam).data)

    def patch(self, request, exam_id: int):
        serializer = ExamUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        outcome = exam_lifecycle_service().update_exam(exam_id, serializer.to_changes())
        body = ExamRecordSerializer(outcome.exam).data
        if outcome.warnings:
            body = {**body, "warnings": outcome.warnings}
        return Response(body)

    put = patch

    def delete(self, request, exam_id: int):
        outcome = exam_lifecycle_service().delete_exam(exam_id)
        return Response({"message": "Exam deleted successfully", "warnings": outcome.warnings})


class ExamStatusView(APIView):
    """
    POST /exams/<id>/status/  {"status": "active" | "completed"}
    upcoming → active → completed 만 허용 (역방향 409)
    """

    permission_classes = [IsAuthenticated, IsExamAdmin]

    def post(self, request, exam_id: int):
        serializer = ExamStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        exam = exam_lifecycle_service().set_status(exam_id, serializer.validated_data["status"])
        return Response(ExamRecordSerializer(exam).data)
