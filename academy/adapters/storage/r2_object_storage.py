# PATH: academy/adapters/storage/r2_object_storage.py
# R2(S3 호환) 객체 스토리지 어댑터: ObjectStorage 포트 구현
# Django settings 또는 os.environ 사용

from __future__ import annotations

import logging
from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError

from academy.adapters.settings import adapter_setting
from academy.domain.exams.errors import PaperStorageError

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")


def get_s3_client() -> Any:
    """R2/S3 클라이언트 생성. Django 설정 또는 os.environ 사용."""
    import boto3

    return boto3.client(
        "s3",
        endpoint_url=adapter_setting("R2_ENDPOINT"),
        aws_access_key_id=adapter_setting("R2_ACCESS_KEY"),
        aws_secret_access_key=adapter_setting("R2_SECRET_KEY"),
        region_name="auto",
    )


def _error_code(e: ClientError) -> str:
    return str((e.response.get("Error") or {}).get("Code") or "")


class R2ObjectStorage:
    """
    버킷 하나에 고정된 ObjectStorage 구현.
    404 계열은 '없음', 나머지 ClientError/BotoCoreError 는 PaperStorageError.
    """

    def __init__(self, bucket: str, client: Any = None) -> None:
        self.bucket = bucket
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = get_s3_client()
        return self._client

    def get_bytes(self, key: str) -> Optional[bytes]:
        try:
            resp = self.client.get_object(Bucket=self.bucket, Key=key)
            return resp["Body"].read()
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                return None
            raise PaperStorageError(f"get_object failed: {e}", key=key) from e
        except BotoCoreError as e:
            raise PaperStorageError(f"get_object failed: {e}", key=key) from e

    def put_bytes(self, key: str, body: bytes, content_type: str = "application/json") -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise PaperStorageError(f"put_object failed: {e}", key=key) from e

    def exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                return False
            raise PaperStorageError(f"head_object failed: {e}", key=key) from e
        except BotoCoreError as e:
            raise PaperStorageError(f"head_object failed: {e}", key=key) from e

    def delete(self, key: str) -> bool:
        if not self.exists(key):
            return False
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise PaperStorageError(f"delete_object failed: {e}", key=key) from e
        return True

    def list_keys(self, prefix: str = "") -> list[str]:
        keys: list[str] = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for obj in page.get("Contents") or []:
                    keys.append(obj["Key"])
        except (ClientError, BotoCoreError) as e:
            raise PaperStorageError(f"list_objects_v2 failed: {e}") from e
        return keys
