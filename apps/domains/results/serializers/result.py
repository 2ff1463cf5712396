# PATH: apps/domains/results/serializers/result.py
from __future__ import annotations

from rest_framework import serializers

from apps.domains.exams.serializers.exam import ExamRecordSerializer


class SubmitExamSerializer(serializers.Serializer):
    """{"answers": {questionId: answer}}: 빈 답은 미응시."""

    answers = serializers.DictField(
        child=serializers.CharField(allow_blank=True, allow_null=True),
        allow_empty=True,
    )


class SubmissionResultSerializer(serializers.Serializer):
    """
    ✅ 제출 응답 (SubmissionOutcome)
    - percentage 분모는 총점이 아니라 attempted_marks
    """

    score = serializers.IntegerField()
    attempted_marks = serializers.IntegerField()
    total_marks = serializers.IntegerField()
    percentage = serializers.IntegerField()
    rank = serializers.IntegerField(allow_null=True)
    total_participants = serializers.IntegerField()
    submitted_at = serializers.DateTimeField()
    auto_completed = serializers.BooleanField()


class ExamResultRowSerializer(serializers.Serializer):
    """ExamResult 엔티티 (rank 는 조회 시 계산된 값)."""

    id = serializers.IntegerField(allow_null=True)
    student_id = serializers.IntegerField()
    exam_id = serializers.IntegerField()
    score = serializers.IntegerField()
    attempted_marks = serializers.IntegerField()
    percentage = serializers.IntegerField()
    submitted_at = serializers.DateTimeField()
    rank = serializers.IntegerField(allow_null=True)


class ExamHistorySerializer(serializers.Serializer):
    result = ExamResultRowSerializer()
    exam = ExamRecordSerializer(allow_null=True)
    rank = serializers.IntegerField(allow_null=True)
    total_participants = serializers.IntegerField()


class StudentDashboardSerializer(serializers.Serializer):
    total_exams = serializers.IntegerField()
    average_score = serializers.FloatField()
    best_rank = serializers.IntegerField()
    overall_rank = serializers.IntegerField(allow_null=True)
    total_students = serializers.IntegerField()
    available_exams = ExamRecordSerializer(many=True)
    active_exams = ExamRecordSerializer(many=True)
    completed_exams = ExamRecordSerializer(many=True)
    exam_history = ExamHistorySerializer(many=True)


class ExamStatisticsSerializer(serializers.Serializer):
    total_students = serializers.IntegerField()
    upcoming_exams = serializers.IntegerField()
    active_exams = serializers.IntegerField()
    completed_exams = serializers.IntegerField()
