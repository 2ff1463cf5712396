# PATH: apps/domains/results/permissions.py
from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


def _role(u) -> str:
    v = getattr(u, "role", None) or getattr(u, "user_type", None) or ""
    return str(v).upper()


def is_admin_user(u) -> bool:
    return bool(getattr(u, "is_superuser", False) or getattr(u, "is_staff", False) or _role(u) == "ADMIN")


def student_id_for(u) -> Optional[int]:
    """로그인 User ↔ Student 매핑. 연결된 학생이 없으면 None.

    RelatedObjectDoesNotExist 는 AttributeError 하위 클래스라 getattr 기본값으로 처리된다.
    """
    profile = getattr(u, "student_profile", None) if u is not None else None
    return getattr(profile, "id", None)


class IsExamAdmin(BasePermission):
    """시험/문제지 관리 (staff / superuser / role=ADMIN)."""

    def has_permission(self, request, view):
        u = getattr(request, "user", None)
        return bool(u and u.is_authenticated and is_admin_user(u))


class IsStudent(BasePermission):
    """Student 프로필이 연결된 로그인 사용자."""

    def has_permission(self, request, view):
        u = getattr(request, "user", None)
        if not u or not u.is_authenticated:
            return False
        return student_id_for(u) is not None
