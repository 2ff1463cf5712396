"""
문제지 / 문항 입력 serializer

필드명은 저장 문서(JSON)와 같은 camelCase 를 사용한다.
type 은 'mcq' / 'written' 별칭도 허용.
"""
from __future__ import annotations

from rest_framework import serializers

from academy.application.use_cases.exams.paper_authoring import QuestionInput
from academy.domain.exams.entities import QuestionType, parse_question_type

_TYPE_HELP = ", ".join([t.value for t in QuestionType] + ["mcq", "written"])


class QuestionInputSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_blank=True)
    question = serializers.CharField()
    type = serializers.CharField(help_text=_TYPE_HELP)
    options = serializers.ListField(
        child=serializers.CharField(allow_blank=True, allow_null=True),
        required=False,
        allow_null=True,
    )
    correctAnswer = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    marks = serializers.IntegerField(min_value=1)
    orderIndex = serializers.IntegerField(required=False, allow_null=True)

    def validate_type(self, value):
        try:
            return parse_question_type(value)
        except ValueError:
            raise serializers.ValidationError(f"type must be one of: {_TYPE_HELP}")

    @staticmethod
    def build(data: dict) -> QuestionInput:
        return QuestionInput(
            id=data.get("id") or None,
            text=data["question"],
            type=data["type"],
            marks=data["marks"],
            order_index=data.get("orderIndex"),
            options=data.get("options"),
            correct_answer=data.get("correctAnswer"),
        )


class QuestionPatchSerializer(serializers.Serializer):
    question = serializers.CharField(required=False)
    type = serializers.CharField(required=False)
    options = serializers.ListField(
        child=serializers.CharField(allow_blank=True, allow_null=True),
        required=False,
        allow_null=True,
    )
    correctAnswer = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    marks = serializers.IntegerField(min_value=1, required=False)
    orderIndex = serializers.IntegerField(required=False)

    # 입력 필드명 → update_question changes 키
    FIELD_MAP = {
        "question": "text",
        "type": "type",
        "options": "options",
        "correctAnswer": "correct_answer",
        "marks": "marks",
        "orderIndex": "order_index",
    }

    def validate_type(self, value):
        try:
            return parse_question_type(value)
        except ValueError:
            raise serializers.ValidationError(f"type must be one of: {_TYPE_HELP}")

    def to_changes(self) -> dict:
        return {self.FIELD_MAP[k]: v for k, v in self.validated_data.items()}


class PaperSaveSerializer(serializers.Serializer):
    title = serializers.CharField(required=False, allow_blank=True)
    instructions = serializers.CharField(required=False, allow_blank=True)
    questions = QuestionInputSerializer(many=True)

    def question_inputs(self) -> list[QuestionInput]:
        return [QuestionInputSerializer.build(q) for q in self.validated_data["questions"]]


class QuestionListSerializer(serializers.Serializer):
    questions = QuestionInputSerializer(many=True)

    def question_inputs(self) -> list[QuestionInput]:
        return [QuestionInputSerializer.build(q) for q in self.validated_data["questions"]]


class PaperDetailsSerializer(serializers.Serializer):
    title = serializers.CharField(required=False, allow_blank=True)
    instructions = serializers.CharField(required=False, allow_blank=True)


def paper_outcome_payload(outcome) -> dict:
    """PaperSaveOutcome → 응답 본문 (동기화 경고 포함)."""
    payload = {
        "paper": outcome.paper.to_document(),
        "synced": outcome.synced,
        "warnings": [w.message for w in outcome.warnings],
    }
    if outcome.question is not None:
        payload["question"] = outcome.question.to_document()
    return payload
