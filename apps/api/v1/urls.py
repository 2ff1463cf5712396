# PATH: apps/api/v1/urls.py
from django.urls import path, include

from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

urlpatterns = [
    # =========================
    # Auth (JWT)
    # =========================
    path("token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),

    # =========================
    # 시험 레코드 / 문제지 / 총점 동기화
    # =========================
    path("exams/", include("apps.domains.exams.urls")),

    # =========================
    # 제출 / 대시보드 / 관리자 결과
    # =========================
    path("results/", include("apps.domains.results.urls")),
]
