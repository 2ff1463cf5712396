# PATH: apps/domains/exams/views/paper_view.py
"""
문제지 / 문항 API

- 쓰기 응답에는 {"paper", "synced", "warnings"} 가 포함된다.
  synced=false 이면 문제지는 저장됐지만 시험 총점 동기화가 실패한 것.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from academy.adapters.db.django.repositories_exams import DjangoExamRecordStore
from academy.domain.exams.entities import ExamStatus
from academy.domain.exams.errors import (
    ConflictingLifecycleError,
    ExamNotFoundError,
    PaperNotFoundError,
)
from academy.domain.shared.ids import exam_id_from_paper_id, parse_exam_id
from apps.domains.exams.serializers.paper import (
    PaperDetailsSerializer,
    PaperSaveSerializer,
    QuestionInputSerializer,
    QuestionListSerializer,
    QuestionPatchSerializer,
    paper_outcome_payload,
)
from apps.domains.exams.services.wiring import paper_authoring_service
from apps.domains.results.permissions import IsExamAdmin


def _student_document(paper) -> dict:
    """학생 응시용: 정답 제거."""
    doc = paper.to_document()
    doc["questions"] = [
        {k: v for k, v in q.items() if k != "correctAnswer"} for q in doc["questions"]
    ]
    return doc


class PaperView(APIView):
    """
    GET   /exams/<id>/paper/   문서 없으면 404
    PUT   /exams/<id>/paper/   전체 저장 (title, instructions, questions)
    PATCH /exams/<id>/paper/   제목/안내문만 수정
    """

    permission_classes = [IsAuthenticated, IsExamAdmin]

    def get(self, request, exam_id: int):
        paper = paper_authoring_service().get_paper(exam_id)
        if paper is None:
            raise PaperNotFoundError(exam_id)
        return Response(paper.to_document())

    def put(self, request, exam_id: int):
        serializer = PaperSaveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        outcome = paper_authoring_service().save_paper(
            exam_id,
            serializer.question_inputs(),
            title=serializer.validated_data.get("title"),
            instructions=serializer.validated_data.get("instructions"),
        )
        return Response(paper_outcome_payload(outcome))

    def patch(self, request, exam_id: int):
        serializer = PaperDetailsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        outcome = paper_authoring_service().update_paper_details(
            exam_id,
            title=serializer.validated_data.get("title"),
            instructions=serializer.validated_data.get("instructions"),
        )
        return Response(paper_outcome_payload(outcome))


class PaperEditView(APIView):
    """GET /exams/<id>/paper/edit/: 문서가 없으면 저장되지 않은 빈 skeleton."""

    permission_classes = [IsAuthenticated, IsExamAdmin]

    def get(self, request, exam_id: int):
        return Response(paper_authoring_service().get_paper_for_editing(exam_id).to_document())


class StudentPaperView(APIView):
    """GET /exams/<id>/paper/student/: active 시험만, 정답 제외."""

    permission_classes = [IsAuthenticated]

    def get(self, request, exam_id: int):
        exam = DjangoExamRecordStore().get(exam_id)
        if exam is None:
            raise ExamNotFoundError(exam_id)
        if exam.status != ExamStatus.ACTIVE:
            raise ConflictingLifecycleError("Exam is not currently active")
        paper = paper_authoring_service().get_paper(exam_id)
        if paper is None:
            raise PaperNotFoundError(exam_id)
        return Response(_student_document(paper))


class PaperQuestionsView(APIView):
    """
    POST   /exams/<id>/paper/questions/  문항 1개 추가 (문서 없으면 생성)
    PUT    /exams/<id>/paper/questions/  문항 목록 전체 교체
    DELETE /exams/<id>/paper/questions/  전체 문항 삭제 (문서는 유지)
    """

    permission_classes = [IsAuthenticated, IsExamAdmin]

    def post(self, request, exam_id: int):
        serializer = QuestionInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        outcome = paper_authoring_service().add_question(
            exam_id, QuestionInputSerializer.build(serializer.validated_data)
        )
        return Response(paper_outcome_payload(outcome), status=status.HTTP_201_CREATED)

    def put(self, request, exam_id: int):
        serializer = QuestionListSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        outcome = paper_authoring_service().replace_questions(exam_id, serializer.question_inputs())
        return Response(paper_outcome_payload(outcome))

    def delete(self, request, exam_id: int):
        outcome = paper_authoring_service().delete_all_questions(exam_id)
        return Response(paper_outcome_payload(outcome))


class PaperQuestionDetailView(APIView):
    """
    PATCH  /exams/<id>/paper/questions/<question_id>/
    DELETE /exams/<id>/paper/questions/<question_id>/
    """

    permission_classes = [IsAuthenticated, IsExamAdmin]

    def patch(self, request, exam_id: int, question_id: str):
        serializer = QuestionPatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        outcome = paper_authoring_service().update_question(
            exam_id, question_id, serializer.to_changes()
        )
        return Response(paper_outcome_payload(outcome))

    def delete(self, request, exam_id: int, question_id: str):
        outcome = paper_authoring_service().delete_question(exam_id, question_id)
        return Response(paper_outcome_payload(outcome))


class PaperByIdView(APIView):
    """
    PUT /exams/papers/<paper_id>/

    문서 id('paper_5_1712...' / 'paper_5_new')로 저장하는 기존 클라이언트용.
    questions 가 있으면 전체 저장, 없으면 제목/안내문만 수정.
    """

    permission_classes = [IsAuthenticated, IsExamAdmin]

    def put(self, request, paper_id: str):
        raw_exam_id = request.data.get("examId")
        if raw_exam_id in (None, ""):
            exam_id = exam_id_from_paper_id(paper_id)
            if exam_id is None:
                raise ValidationError({"examId": "examId is required"})
        else:
            exam_id = parse_exam_id(raw_exam_id)
            if exam_id is None:
                raise ValidationError({"examId": "examId must be a positive integer"})

        service = paper_authoring_service()
        if isinstance(request.data.get("questions"), list):
            serializer = PaperSaveSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            outcome = service.save_paper(
                exam_id,
                serializer.question_inputs(),
                title=serializer.validated_data.get("title"),
                instructions=serializer.validated_data.get("instructions"),
            )
        else:
            serializer = PaperDetailsSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            outcome = service.update_paper_details(
                exam_id,
                title=serializer.validated_data.get("title"),
                instructions=serializer.validated_data.get("instructions"),
            )
        return Response(paper_outcome_payload(outcome))
