"""Tests for ObjectStoragePaperStore (exam_{id}_{name}_paper.json documents)."""

import json

import pytest
from conftest import make_question

from academy.adapters.storage.object_storage_paper_store import paper_key, sanitize_exam_name
from academy.domain.exams.entities import PaperDraft, QuestionType
from academy.domain.exams.errors import PaperStorageError, QuestionValidationError


def draft(questions, title="Algebra Question Paper", instructions="Read carefully."):
    return PaperDraft(title=title, instructions=instructions, questions=list(questions))


class TestKeyScheme:
    def test_sanitize_strips_symbols_and_joins_whitespace(self):
        assert sanitize_exam_name("Math: Final  Exam (2025)!") == "Math_Final_Exam_2025"

    def test_key_embeds_exam_id_and_sanitized_name(self):
        assert paper_key(3, "Unit Test #1") == "exam_3_Unit_Test_1_paper.json"


class TestSaveAndGet:
    def test_get_returns_none_when_no_document(self, paper_store, exam_store):
        exam = exam_store.add(name="Algebra")
        assert paper_store.get(exam.id) is None

    def test_totals_are_derived_from_questions(self, paper_store, exam_store, object_storage):
        # Arrange
        exam = exam_store.add(name="Algebra")
        questions = [
            make_question("q1", marks=2),
            make_question("q2", qtype=QuestionType.ESSAY, marks=5, order_index=1,
                          options=None, correct_answer=None),
        ]

        # Act
        paper = paper_store.save(exam.id, draft(questions))

        # Assert
        assert paper.total_marks == 7
        assert paper.total_questions == 2
        doc = json.loads(object_storage.objects["exam_1_Algebra_paper.json"])
        assert doc["totalMarks"] == 7
        assert doc["totalQuestions"] == 2
        assert doc["metadata"] == {
            "examName": "Algebra",
            "lastUpdated": doc["updatedAt"],
            "version": "1.0",
        }

    def test_stored_totals_are_ignored_on_read(self, paper_store, exam_store, object_storage):
        exam = exam_store.add(name="Algebra")
        paper_store.save(exam.id, draft([make_question("q1", marks=2)]))
        key = "exam_1_Algebra_paper.json"
        doc = json.loads(object_storage.objects[key])
        doc["totalMarks"] = 999
        object_storage.objects[key] = json.dumps(doc).encode()

        assert paper_store.get(exam.id).total_marks == 2

    def test_resave_keeps_paper_id_and_created_at(self, paper_store, exam_store):
        exam = exam_store.add(name="Algebra")
        first = paper_store.save(exam.id, draft([make_question("q1")]))

        second = paper_store.save(exam.id, draft([]))

        assert second.id == first.id
        assert second.created_at == first.created_at
        assert second.updated_at != first.updated_at
        assert second.total_marks == 0

    def test_questions_are_stored_in_order_index_order(self, paper_store, exam_store):
        exam = exam_store.add(name="Algebra")
        paper = paper_store.save(exam.id, draft([
            make_question("late", order_index=5),
            make_question("early", order_index=1),
        ]))

        assert [q.id for q in paper.questions] == ["early", "late"]

    def test_invalid_question_never_reaches_storage(self, paper_store, exam_store, object_storage):
        exam = exam_store.add(name="Algebra")

        with pytest.raises(QuestionValidationError):
            paper_store.save(exam.id, draft([make_question("q1", options=["only one"])]))

        assert object_storage.put_calls == 0

    def test_round_trips_question_fields(self, paper_store, exam_store):
        exam = exam_store.add(name="Algebra")
        q = make_question("q1", options=["x", "y"], correct_answer="y", marks=4, order_index=2)
        paper_store.save(exam.id, draft([q]))

        loaded = paper_store.get(exam.id).questions[0]

        assert loaded == q

    def test_corrupt_document_raises_storage_error(self, paper_store, exam_store, object_storage):
        exam = exam_store.add(name="Algebra")
        object_storage.objects["exam_1_Algebra_paper.json"] = b"{not json"

        with pytest.raises(PaperStorageError):
            paper_store.get(exam.id)

    def test_storage_failure_propagates(self, paper_store, exam_store, object_storage):
        exam = exam_store.add(name="Algebra")
        object_storage.fail_put = True

        with pytest.raises(PaperStorageError):
            paper_store.save(exam.id, draft([make_question()]))

    def test_unknown_exam_uses_fallback_name(self, paper_store, object_storage):
        paper_store.save(42, draft([make_question()]))

        assert "exam_42_Exam_42_paper.json" in object_storage.objects


class TestRenameKey:
    def _seed(self, paper_store, exam_store):
        exam = exam_store.add(name="Old Name")
        paper_store.save(exam.id, draft([make_question("q1")]))
        exam_store.update(exam.id, {"name": "New Name"})
        return exam

    def test_moves_document_to_new_key(self, paper_store, exam_store, object_storage):
        exam = self._seed(paper_store, exam_store)

        assert paper_store.rename_key(exam.id, "Old Name") is True

        assert "exam_1_Old_Name_paper.json" not in object_storage.objects
        assert "exam_1_New_Name_paper.json" in object_storage.objects
        assert paper_store.get(exam.id).questions[0].id == "q1"

    def test_second_call_is_a_noop_success(self, paper_store, exam_store, object_storage):
        exam = self._seed(paper_store, exam_store)
        paper_store.rename_key(exam.id, "Old Name")
        before = dict(object_storage.objects)

        assert paper_store.rename_key(exam.id, "Old Name") is True
        assert object_storage.objects == before

    def test_invalidates_cached_name(self, paper_store, exam_store, name_cache):
        exam = self._seed(paper_store, exam_store)
        assert name_cache.values[exam.id] == "Old Name"

        paper_store.rename_key(exam.id, "Old Name")

        assert exam.id in name_cache.invalidated
        assert name_cache.values[exam.id] == "New Name"

    def test_same_sanitized_name_is_a_noop(self, paper_store, exam_store, object_storage):
        exam = exam_store.add(name="Quiz 1")
        paper_store.save(exam.id, draft([make_question()]))
        exam_store.update(exam.id, {"name": "Quiz 1!"})

        assert paper_store.rename_key(exam.id, "Quiz 1") is True
        assert list(object_storage.objects) == ["exam_1_Quiz_1_paper.json"]

    def test_old_key_delete_failure_is_not_fatal(self, paper_store, exam_store, object_storage):
        exam = self._seed(paper_store, exam_store)
        object_storage.fail_delete = True

        assert paper_store.rename_key(exam.id, "Old Name") is True
        assert "exam_1_New_Name_paper.json" in object_storage.objects


class TestDeleteAndList:
    def test_delete_missing_document_is_success(self, paper_store, exam_store):
        exam = exam_store.add(name="Algebra")
        assert paper_store.delete(exam.id) is True

    def test_delete_by_explicit_name_after_record_removed(self, paper_store, exam_store, object_storage):
        exam = exam_store.add(name="Algebra")
        paper_store.save(exam.id, draft([make_question()]))
        exam_store.delete(exam.id)

        assert paper_store.delete(exam.id, exam_name="Algebra") is True
        assert object_storage.objects == {}

    def test_list_all_skips_foreign_and_corrupt_objects(self, paper_store, exam_store, object_storage):
        exam = exam_store.add(name="Algebra")
        paper_store.save(exam.id, draft([make_question()]))
        object_storage.objects["exam_9_Broken_paper.json"] = b"oops"
        object_storage.objects["exam_notes.txt"] = b"hello"

        papers = paper_store.list_all()

        assert [p.exam_id for p in papers] == [exam.id]
