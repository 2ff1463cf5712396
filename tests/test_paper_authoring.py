"""Tests for PaperAuthoringService (admin question editing + marks sync)."""

import json

import pytest

from academy.adapters.storage.object_storage_paper_store import paper_key
from academy.application.use_cases.exams.paper_authoring import PaperAuthoringService, QuestionInput
from academy.domain.exams.entities import DEFAULT_PAPER_INSTRUCTIONS, ExamStatus, QuestionType
from academy.domain.exams.errors import (
    ConflictingLifecycleError,
    ExamNotFoundError,
    PaperNotFoundError,
    QuestionNotFoundError,
    QuestionValidationError,
)


def mcq(text="2 + 2?", marks=2, answer="4", options=("3", "4", ""), order_index=None, qid=None):
    return QuestionInput(
        id=qid,
        text=text,
        type="mcq",
        marks=marks,
        options=list(options),
        correct_answer=answer,
        order_index=order_index,
    )


def essay(text="Explain gravity.", marks=10, order_index=None):
    return QuestionInput(text=text, type=QuestionType.ESSAY, marks=marks, order_index=order_index)


@pytest.fixture
def service(exam_store, paper_store, synchronizer, clock):
    return PaperAuthoringService(exam_store, paper_store, synchronizer, clock=clock)


@pytest.fixture
def exam(exam_store):
    return exam_store.add(name="Physics Midterm", total_marks=100)


class TestAddQuestion:
    def test_first_question_creates_paper_with_defaults(self, service, exam, exam_store):
        # Act
        outcome = service.add_question(exam.id, mcq())

        # Assert
        paper = outcome.paper
        assert paper.title == "Physics Midterm Question Paper"
        assert paper.instructions == DEFAULT_PAPER_INSTRUCTIONS
        assert paper.total_marks == 2
        assert outcome.synced is True
        assert exam_store.get(exam.id).total_marks == 2

    def test_alias_type_and_blank_options_are_normalized(self, service, exam):
        outcome = service.add_question(exam.id, mcq())

        q = outcome.question
        assert q.type == QuestionType.MULTIPLE_CHOICE
        assert q.options == ["3", "4"]
        assert q.id.startswith(f"question_{exam.id}_")

    def test_order_index_continues_after_existing(self, service, exam):
        service.add_question(exam.id, mcq(order_index=4))

        outcome = service.add_question(exam.id, essay())

        assert outcome.question.order_index == 5

    def test_non_multiple_choice_drops_options(self, service, exam):
        data = QuestionInput(text="Sky is blue", type="true_false", marks=1,
                             options=["x", "y"], correct_answer="true")

        outcome = service.add_question(exam.id, data)

        assert outcome.question.options is None

    def test_invalid_question_is_rejected_before_write(self, service, exam, object_storage):
        with pytest.raises(QuestionValidationError):
            service.add_question(exam.id, mcq(options=("only",)))

        assert object_storage.objects == {}

    def test_unknown_type_is_a_validation_error(self, service, exam):
        with pytest.raises(QuestionValidationError):
            service.add_question(exam.id, QuestionInput(text="?", type="matching", marks=1))

    def test_unknown_exam(self, service):
        with pytest.raises(ExamNotFoundError):
            service.add_question(999, mcq())


class TestCompletedExam:
    def test_save_is_rejected_and_paper_unchanged(self, service, exam, exam_store, object_storage):
        # Arrange
        service.add_question(exam.id, mcq())
        before = dict(object_storage.objects)
        exam_store.set_status(exam.id, ExamStatus.COMPLETED)

        # Act / Assert
        with pytest.raises(ConflictingLifecycleError):
            service.save_paper(exam.id, [essay()])
        with pytest.raises(ConflictingLifecycleError):
            service.delete_all_questions(exam.id)

        assert object_storage.objects == before


class TestSyncWarning:
    def test_sync_failure_keeps_paper_and_returns_warning(self, service, exam, exam_store, paper_store):
        exam_store.fail_total_marks = True

        outcome = service.add_question(exam.id, mcq(marks=3))

        assert outcome.synced is False
        assert outcome.warnings[0].total_marks == 3
        assert "could not be synchronized" in outcome.warnings[0].message
        assert paper_store.get(exam.id).total_marks == 3
        assert exam_store.exams[exam.id].total_marks == 100


class TestSavePaper:
    def test_full_replace_numbers_questions_in_input_order(self, service, exam, exam_store):
        outcome = service.save_paper(exam.id, [mcq(), essay(), mcq(text="5 - 1?", marks=1)],
                                     title="Custom", instructions="No calculators.")

        paper = outcome.paper
        assert [q.order_index for q in paper.questions] == [0, 1, 2]
        assert paper.title == "Custom"
        assert paper.instructions == "No calculators."
        assert exam_store.get(exam.id).total_marks == 13

    def test_known_question_id_keeps_created_at(self, service, exam):
        first = service.add_question(exam.id, mcq()).question

        outcome = service.replace_questions(exam.id, [mcq(text="edited", qid=first.id)])

        kept = outcome.paper.questions[0]
        assert kept.id == first.id
        assert kept.created_at == first.created_at
        assert kept.text == "edited"

    def test_blank_title_keeps_existing(self, service, exam):
        service.save_paper(exam.id, [mcq()], title="Keep me")

        outcome = service.save_paper(exam.id, [mcq()], title="  ")

        assert outcome.paper.title == "Keep me"


class TestUpdateAndDelete:
    def test_update_question_recomputes_totals(self, service, exam, exam_store):
        q = service.add_question(exam.id, mcq(marks=2)).question

        outcome = service.update_question(exam.id, q.id, {"marks": 7})

        assert outcome.paper.total_marks == 7
        assert exam_store.get(exam.id).total_marks == 7

    def test_update_type_away_from_multiple_choice_drops_options(self, service, exam):
        q = service.add_question(exam.id, mcq()).question

        outcome = service.update_question(exam.id, q.id, {"type": QuestionType.SHORT_ANSWER,
                                                          "correct_answer": None})

        assert outcome.question.options is None
        assert outcome.question.type == QuestionType.SHORT_ANSWER

    def test_update_unknown_question(self, service, exam):
        service.add_question(exam.id, mcq())
        with pytest.raises(QuestionNotFoundError):
            service.update_question(exam.id, "nope", {"marks": 1})

    def test_update_rejects_unknown_fields(self, service, exam):
        q = service.add_question(exam.id, mcq()).question
        with pytest.raises(QuestionValidationError):
            service.update_question(exam.id, q.id, {"id": "hijack"})

    def test_update_without_paper(self, service, exam):
        with pytest.raises(PaperNotFoundError):
            service.update_question(exam.id, "q1", {"marks": 1})

    def test_delete_question(self, service, exam, exam_store):
        keep = service.add_question(exam.id, mcq(marks=2)).question
        drop = service.add_question(exam.id, essay(marks=10)).question

        outcome = service.delete_question(exam.id, drop.id)

        assert [q.id for q in outcome.paper.questions] == [keep.id]
        assert exam_store.get(exam.id).total_marks == 2

    def test_delete_all_keeps_document(self, service, exam, exam_store, paper_store):
        service.add_question(exam.id, mcq())

        outcome = service.delete_all_questions(exam.id)

        assert outcome.paper.questions == []
        assert paper_store.get(exam.id) is not None
        assert exam_store.get(exam.id).total_marks == 0


class TestDetailsAndEditing:
    def test_update_details_creates_paper_when_missing(self, service, exam):
        outcome = service.update_paper_details(exam.id, title="Renamed paper")

        assert outcome.paper.title == "Renamed paper"
        assert outcome.paper.instructions == DEFAULT_PAPER_INSTRUCTIONS

    def test_editing_skeleton_is_not_persisted(self, service, exam, object_storage):
        paper = service.get_paper_for_editing(exam.id)

        assert paper.id == f"paper_{exam.id}_new"
        assert paper.questions == []
        assert object_storage.objects == {}

    def test_editing_returns_stored_paper(self, service, exam):
        saved = service.add_question(exam.id, mcq()).paper

        assert service.get_paper_for_editing(exam.id).id == saved.id


def _legacy_document(exam_id, questions):
    """이전 버전이 남긴 문서: orderIndex 가 없거나 겹친다."""
    return json.dumps({
        "id": f"paper_{exam_id}_1700000000000",
        "examId": exam_id,
        "title": "Old Paper",
        "instructions": "",
        "questions": questions,
        "createdAt": "2024-01-01T00:00:00.000Z",
        "updatedAt": "2024-01-01T00:00:00.000Z",
    }).encode()


class TestLegacyDocuments:
    def _seed(self, exam, object_storage, questions):
        object_storage.objects[paper_key(exam.id, exam.name)] = _legacy_document(exam.id, questions)

    def test_missing_order_index_does_not_block_add(self, service, exam, object_storage):
        # Arrange
        self._seed(exam, object_storage, [
            {"id": "old_a", "question": "Why?", "type": "essay", "marks": 5},
            {"id": "old_b", "question": "How?", "type": "essay", "marks": 5},
        ])

        # Act
        outcome = service.add_question(exam.id, essay(text="What?"))

        # Assert
        assert [q.id for q in outcome.paper.questions][:2] == ["old_a", "old_b"]
        assert [q.order_index for q in outcome.paper.questions] == [0, 1, 2]
        assert outcome.paper.total_marks == 20

    def test_duplicate_order_index_keeps_display_order(self, service, exam, object_storage):
        self._seed(exam, object_storage, [
            {"id": "first", "question": "A", "type": "essay", "marks": 1, "orderIndex": 1},
            {"id": "second", "question": "B", "type": "essay", "marks": 1, "orderIndex": 0},
            {"id": "third", "question": "C", "type": "essay", "marks": 1, "orderIndex": 1},
        ])

        outcome = service.delete_question(exam.id, "third")

        assert [(q.id, q.order_index) for q in outcome.paper.questions] == [
            ("second", 0), ("first", 1),
        ]

    def test_explicit_duplicate_input_is_still_rejected(self, service, exam):
        with pytest.raises(QuestionValidationError):
            service.save_paper(exam.id, [essay(order_index=0), essay(order_index=0)])
