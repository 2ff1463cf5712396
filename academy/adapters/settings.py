# PATH: academy/adapters/settings.py
# 어댑터 공통 설정 조회: Django settings → os.environ 순서
# (Django 없이 도는 테스트 / 스크립트에서도 env 만으로 동작)

from __future__ import annotations

import os
from typing import Optional

from django.core.exceptions import ImproperlyConfigured


def adapter_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    try:
        from django.conf import settings

        value = getattr(settings, name, None)
    except ImproperlyConfigured:
        value = None
    if value in (None, ""):
        value = os.environ.get(name)
    return value if value not in (None, "") else default
