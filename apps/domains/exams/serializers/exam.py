from rest_framework import serializers

from academy.application.use_cases.exams.exam_lifecycle import ExamInput
from academy.domain.exams.entities import ExamStatus


class ExamRecordSerializer(serializers.Serializer):
    """ExamRecord(도메인 엔티티) → JSON."""

    id = serializers.IntegerField()
    name = serializers.CharField()
    subject = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    date = serializers.DateField()
    start_time = serializers.DateTimeField(allow_null=True)
    duration = serializers.IntegerField()
    total_marks = serializers.IntegerField()
    status = serializers.CharField(source="status.value")


class ExamCreateSerializer(serializers.Serializer):
    """
    생성 전용. status 는 받지 않는다 (항상 upcoming).
    """

    name = serializers.CharField(max_length=255)
    subject = serializers.CharField(max_length=100)
    date = serializers.DateField()
    duration = serializers.IntegerField(min_value=1)
    total_marks = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    start_time = serializers.DateTimeField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def to_input(self) -> ExamInput:
        d = self.validated_data
        return ExamInput(
            name=d["name"],
            subject=d["subject"],
            date=d["date"],
            duration=d["duration"],
            total_marks=d.get("total_marks"),
            start_time=d.get("start_time"),
            description=d.get("description") or None,
        )


class ExamUpdateSerializer(serializers.Serializer):
    """부분 수정. 전달된 필드만 changes 로 넘긴다."""

    name = serializers.CharField(max_length=255, required=False)
    subject = serializers.CharField(max_length=100, required=False)
    date = serializers.DateField(required=False)
    duration = serializers.IntegerField(min_value=1, required=False)
    total_marks = serializers.IntegerField(min_value=1, required=False)
    start_time = serializers.DateTimeField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=[s.value for s in ExamStatus], required=False)

    def to_changes(self) -> dict:
        return dict(self.validated_data)


class ExamStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in ExamStatus])
