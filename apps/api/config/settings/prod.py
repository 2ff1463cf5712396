# PATH: apps/api/config/settings/prod.py
from .base import *
import os

# ==================================================
# PROD MODE (외부 공개 API 서버 기준)
# ==================================================

DEBUG = False

SECRET_KEY = os.environ["DJANGO_SECRET_KEY"]

# ==================================================
# SECURITY
# ==================================================

SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
USE_X_FORWARDED_HOST = True

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True

# ==================================================
# ALLOWED HOSTS / CORS / CSRF
# ==================================================
# prod에서는 "*" 절대 금지

ALLOWED_HOSTS = [
    h.strip() for h in os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h.strip()
]

CORS_ALLOW_ALL_ORIGINS = False
CORS_ALLOWED_ORIGINS = [
    o.strip() for o in os.environ.get("CORS_ALLOWED_ORIGINS", "").split(",") if o.strip()
]
CORS_ALLOW_CREDENTIALS = True

CSRF_TRUSTED_ORIGINS = list(CORS_ALLOWED_ORIGINS)

# ==================================================
# STORAGE GUARD
# ==================================================
# 문제지는 R2 에만 존재 → 접속 정보 없으면 기동 자체를 막는다
_missing = [
    name for name, value in (
        ("R2_ENDPOINT", R2_ENDPOINT),
        ("R2_ACCESS_KEY", R2_ACCESS_KEY),
        ("R2_SECRET_KEY", R2_SECRET_KEY),
    ) if not value
]
if _missing:
    raise RuntimeError(f"Missing R2 settings in prod: {', '.join(_missing)}")

# ==================================================
# LOGGING (운영 최소 기준)
# ==================================================

LOGGING["root"]["level"] = "INFO"
LOGGING["loggers"]["academy"]["level"] = "INFO"
LOGGING["loggers"]["apps"]["level"] = "INFO"

# ==================================================
# STATIC
# ==================================================
# gunicorn + nginx + CDN 전제

STATICFILES_STORAGE = "django.contrib.staticfiles.storage.ManifestStaticFilesStorage"
