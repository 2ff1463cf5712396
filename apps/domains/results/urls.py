# PATH: apps/domains/results/urls.py
from django.urls import path

from apps.domains.results.views.dashboard_view import (
    AdminExamResultsView,
    AdminStatisticsView,
    StudentDashboardView,
)
from apps.domains.results.views.submission_view import SubmitExamView

urlpatterns = [
    # =========================
    # Student
    # =========================
    path("exams/<int:exam_id>/submit/", SubmitExamView.as_view()),
    path("me/dashboard/", StudentDashboardView.as_view()),

    # =========================
    # Admin
    # =========================
    path("admin/exams/<int:exam_id>/", AdminExamResultsView.as_view()),
    path("admin/statistics/", AdminStatisticsView.as_view()),
]
