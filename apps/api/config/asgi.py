# PATH: apps/api/config/asgi.py
import os

from django.core.asgi import get_asgi_application

# 로컬 기본값. 배포 환경은 DJANGO_SETTINGS_MODULE 로 prod 지정
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "apps.api.config.settings.dev")

application = get_asgi_application()
