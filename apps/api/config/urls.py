# PATH: apps/api/config/urls.py
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # 관리자 사이트 (Exam / Student / Result 조회용)
    path("admin/", admin.site.urls),

    # JWT 발급 + 시험/결과 API
    path("api/v1/", include("apps.api.v1.urls")),
]
