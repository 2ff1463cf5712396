# apps/domains/exams/urls.py
from django.urls import path

from .views.exam_view import ExamDetailView, ExamListCreateView, ExamStatusView
from .views.marks_view import ExamMarksSyncView, ExamMarksView
from .views.paper_view import (
    PaperByIdView,
    PaperEditView,
    PaperQuestionDetailView,
    PaperQuestionsView,
    PaperView,
    StudentPaperView,
)

urlpatterns = [
    path("", ExamListCreateView.as_view()),
    path("marks/sync/", ExamMarksSyncView.as_view()),
    path("papers/<str:paper_id>/", PaperByIdView.as_view()),

    path("<int:exam_id>/", ExamDetailView.as_view()),
    path("<int:exam_id>/status/", ExamStatusView.as_view()),

    path("<int:exam_id>/paper/", PaperView.as_view()),
    path("<int:exam_id>/paper/edit/", PaperEditView.as_view()),
    path("<int:exam_id>/paper/student/", StudentPaperView.as_view()),
    path("<int:exam_id>/paper/questions/", PaperQuestionsView.as_view()),
    path("<int:exam_id>/paper/questions/<str:question_id>/", PaperQuestionDetailView.as_view()),

    path("<int:exam_id>/marks/", ExamMarksView.as_view()),
    path("<int:exam_id>/marks/sync/", ExamMarksSyncView.as_view()),
]
