from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterable, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from jose import JWTError

from casino_crm.core.config import Settings
from casino_crm.core.security import create_signed_token, decode_token

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    pass


class Storage:
    def upload(self, key: str, data: bytes, *, content_type: str | None = None) -> None:
        raise NotImplementedError

    def remove(self, keys: Iterable[str]) -> None:
        """Delete objects; keys that do not exist are ignored."""
        raise NotImplementedError

    def exists(self, key: str) -> bool:
        raise NotImplementedError

    def open(self, key: str) -> BinaryIO:
        raise NotImplementedError

    def create_signed_url(self, key: str, expires_in: int, *, download: str | None = None) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class LocalStorage(Storage):
    """
    Blobs under a local directory.

    Signed URLs point at the API's ``/files/{token}`` route; the token is a
    JWT carrying the object key, the optional download filename and expiry.
    """
    root: Path
    base_url: str
    secret: str
    files_path: str = "/api/files"

    def _path(self, key: str) -> Path:
        safe_key = key.lstrip("/").replace("\\", "/")
        p = (self.root / safe_key).resolve()
        if self.root.resolve() not in p.parents:
            raise StorageError(f"Invalid object key: {key}")
        return p

    def upload(self, key: str, data: bytes, *, content_type: str | None = None) -> None:
        p = self._path(key)
        if p.exists():
            raise StorageError(f"Object already exists: {key}")
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_bytes(data)
        except OSError as e:
            raise StorageError(str(e)) from e

    def remove(self, keys: Iterable[str]) -> None:
        for key in keys:
            try:
                self._path(key).unlink(missing_ok=True)
            except OSError as e:
                raise StorageError(str(e)) from e

    def exists(self, key: str) -> bool:
        return self._path(key).exists()

    def open(self, key: str) -> BinaryIO:
        p = self._path(key)
        if not p.exists():
            raise StorageError(f"Object not found: {key}")
        return p.open("rb")

    def local_path(self, key: str) -> Path:
        return self._path(key)

    def create_signed_url(self, key: str, expires_in: int, *, download: str | None = None) -> str:
        claims = {"key": key}
        if download:
            claims["download"] = download
        token = create_signed_token(claims, expires_in, self.secret)
        return f"{self.base_url.rstrip('/')}{self.files_path}/{token}"

    def read_token(self, token: str) -> dict:
        """Claims of a signed-URL token; StorageError when invalid or expired."""
        try:
            claims = decode_token(token, self.secret)
        except JWTError as e:
            raise StorageError("Invalid or expired link") from e
        if "key" not in claims:
            raise StorageError("Invalid or expired link")
        return claims


@dataclass(frozen=True)
class S3Storage(Storage):
    bucket: str
    endpoint_url: Optional[str] = None
    region: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None

    def _client(self):
        return boto3.client(
            "s3",
            endpoint_url=self.endpoint_url or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
        )

    def upload(self, key: str, data: bytes, *, content_type: str | None = None) -> None:
        extra: dict[str, object] = {}
        if content_type:
            extra["ContentType"] = content_type
        try:
            self._client().put_object(Bucket=self.bucket, Key=key, Body=data, **extra)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(str(e)) from e

    def remove(self, keys: Iterable[str]) -> None:
        objects = [{"Key": key} for key in keys]
        if not objects:
            return
        try:
            self._client().delete_objects(Bucket=self.bucket, Delete={"Objects": objects, "Quiet": True})
        except (BotoCoreError, ClientError) as e:
            raise StorageError(str(e)) from e

    def exists(self, key: str) -> bool:
        try:
            self._client().head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError:
            return False

    def open(self, key: str) -> BinaryIO:
        try:
            obj = self._client().get_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(str(e)) from e
        return obj["Body"]  # type: ignore[return-value]

    def create_signed_url(self, key: str, expires_in: int, *, download: str | None = None) -> str:
        params: dict[str, object] = {"Bucket": self.bucket, "Key": key}
        if download:
            params["ResponseContentDisposition"] = f'attachment; filename="{download}"'
        try:
            return self._client().generate_presigned_url(
                "get_object", Params=params, ExpiresIn=expires_in
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(str(e)) from e


def storage_from_settings(settings: Settings) -> Storage:
    backend = (settings.STORAGE_BACKEND or "local").strip().lower()
    if backend == "s3":
        return S3Storage(
            bucket=settings.STORAGE_BUCKET,
            endpoint_url=settings.S3_ENDPOINT_URL,
            region=settings.S3_REGION,
            access_key_id=settings.S3_ACCESS_KEY_ID,
            secret_access_key=settings.S3_SECRET_ACCESS_KEY,
        )
    # default local
    root = Path(settings.STORAGE_ROOT) / settings.STORAGE_BUCKET
    logger.info("Using local file storage at %s", root)
    return LocalStorage(
        root=root,
        base_url=settings.PUBLIC_BASE_URL,
        secret=settings.SECRET_KEY,
        files_path=f"{settings.API_PREFIX}/files",
    )
