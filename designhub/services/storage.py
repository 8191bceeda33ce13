"""Opaque blob storage for order files and deliverables: put bytes, get bytes back."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Protocol

import httpx

from designhub.core.config import get_settings
from designhub.core.errors import NotFoundError, StorageError

if TYPE_CHECKING:
    from designhub.core.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class StoredObject:
    key: str
    url: str


class BlobStore(Protocol):
    def put(self, key: str, data: bytes, content_type: str | None = None) -> StoredObject: ...

    def get(self, key: str) -> bytes: ...


def _normalize_key(key: str) -> str:
    """Reject absolute keys and parent traversal; return a clean relative posix key."""
    path = PurePosixPath(key.strip().lstrip("/"))
    if not path.parts or any(part in ("", ".", "..") for part in path.parts):
        raise StorageError(f"Invalid storage key: {key!r}")
    return path.as_posix()


class LocalBlobStore:
    """Stores blobs as files under a root directory. Locators are file:// URIs."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def _path(self, key: str) -> Path:
        return self.root / _normalize_key(key)

    def put(self, key: str, data: bytes, content_type: str | None = None) -> StoredObject:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info("Stored blob", extra={"storage_key": key, "size_bytes": len(data)})
        return StoredObject(key=_normalize_key(key), url=path.as_uri())

    def get(self, key: str) -> bytes:
        path = self._path(key)
        if not path.is_file():
            raise NotFoundError("Stored file not found")
        return path.read_bytes()


class HttpBlobStore:
    """
    Remote storage proxy.

    Upload: POST {base}/upload?path=<key> (multipart field "file"), JSON response {"url": ...}.
    Download: GET {base}/download?path=<key>, raw bytes.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.Client()
        self._headers = {"Authorization": f"Bearer {api_key}"}

    def put(self, key: str, data: bytes, content_type: str | None = None) -> StoredObject:
        key = _normalize_key(key)
        file_name = PurePosixPath(key).name
        try:
            resp = self._client.post(
                f"{self.base_url}/upload",
                params={"path": key},
                files={"file": (file_name, data, content_type or DEFAULT_CONTENT_TYPE)},
                headers=self._headers,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise StorageError("Storage upload timed out") from e
        except httpx.HTTPError as e:
            raise StorageError(f"Storage unreachable: {e!s}") from e
        if resp.status_code >= 400:
            detail = resp.text[:500] if resp.text else "Unknown error"
            raise StorageError(
                f"Storage upload failed ({resp.status_code}): {detail}",
                resp.status_code,
            )
        try:
            url = resp.json().get("url")
        except ValueError:
            url = None
        if not url:
            raise StorageError("Storage response missing url")
        logger.info("Stored blob", extra={"storage_key": key, "size_bytes": len(data)})
        return StoredObject(key=key, url=url)

    def get(self, key: str) -> bytes:
        key = _normalize_key(key)
        try:
            resp = self._client.get(
                f"{self.base_url}/download",
                params={"path": key},
                headers=self._headers,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise StorageError("Storage download timed out") from e
        except httpx.HTTPError as e:
            raise StorageError(f"Storage unreachable: {e!s}") from e
        if resp.status_code == 404:
            raise NotFoundError("Stored file not found")
        if resp.status_code >= 400:
            raise StorageError(f"Storage download failed ({resp.status_code})", resp.status_code)
        return resp.content


def build_blob_store(settings: Settings) -> BlobStore:
    if settings.STORAGE_BACKEND == "http":
        if not settings.STORAGE_API_URL or settings.STORAGE_API_KEY is None:
            raise StorageError("STORAGE_API_URL and STORAGE_API_KEY are required for http storage")
        return HttpBlobStore(
            settings.STORAGE_API_URL,
            settings.STORAGE_API_KEY.get_secret_value(),
            timeout=settings.STORAGE_REQUEST_TIMEOUT_SEC,
        )
    return LocalBlobStore(settings.STORAGE_DIR)


@lru_cache
def get_blob_store() -> BlobStore:
    """Dependency: process-wide blob store built from settings."""
    return build_blob_store(get_settings())
