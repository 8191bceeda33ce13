"""Unit tests for designhub.services.storage: local and HTTP blob stores."""

import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

import httpx

from designhub.core.errors import NotFoundError, StorageError
from designhub.services.storage import HttpBlobStore, LocalBlobStore, build_blob_store


class TestLocalBlobStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.store = LocalBlobStore(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_put_then_get(self) -> None:
        stored = self.store.put("/orders/1/files/abc-brief.pdf", b"%PDF", "application/pdf")
        self.assertEqual(stored.key, "orders/1/files/abc-brief.pdf")
        self.assertTrue(stored.url.startswith("file://"))
        self.assertTrue((Path(self._tmp.name) / stored.key).is_file())
        self.assertEqual(self.store.get(stored.key), b"%PDF")

    def test_missing_key(self) -> None:
        with self.assertRaises(NotFoundError):
            self.store.get("orders/1/files/missing")

    def test_traversal_rejected(self) -> None:
        with self.assertRaises(StorageError):
            self.store.put("../outside.txt", b"x")


class TestHttpBlobStore(unittest.TestCase):
    """HttpBlobStore against an httpx.MockTransport standing in for the storage proxy."""

    def _store(self, handler) -> HttpBlobStore:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return HttpBlobStore("https://storage.example.com/", "key-123", timeout=5, client=client)

    def test_upload_sends_key_and_auth(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["key"] = request.url.params["path"]
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json={"url": "https://cdn.example.com/orders/1/x.png"})

        stored = self._store(handler).put("orders/1/x.png", b"png", "image/png")
        self.assertEqual(stored.url, "https://cdn.example.com/orders/1/x.png")
        self.assertEqual(stored.key, "orders/1/x.png")
        self.assertEqual(seen, {"path": "/upload", "key": "orders/1/x.png", "auth": "Bearer key-123"})

    def test_upload_error_status(self) -> None:
        store = self._store(lambda request: httpx.Response(500, text="boom"))
        with self.assertRaises(StorageError) as ctx:
            store.put("orders/1/x.png", b"png")
        self.assertEqual(ctx.exception.upstream_status, 500)
        self.assertIn("boom", ctx.exception.message)

    def test_upload_response_without_url(self) -> None:
        store = self._store(lambda request: httpx.Response(200, content=json.dumps({}).encode()))
        with self.assertRaises(StorageError):
            store.put("orders/1/x.png", b"png")

    def test_timeout_maps_to_storage_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        with self.assertRaises(StorageError) as ctx:
            self._store(handler).put("orders/1/x.png", b"png")
        self.assertIn("timed out", ctx.exception.message)

    def test_download(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            self.assertEqual(request.url.path, "/download")
            return httpx.Response(200, content=b"bytes")

        self.assertEqual(self._store(handler).get("orders/1/x.png"), b"bytes")

    def test_download_missing(self) -> None:
        store = self._store(lambda request: httpx.Response(404))
        with self.assertRaises(NotFoundError):
            store.get("orders/1/x.png")


class TestBuildBlobStore(unittest.TestCase):
    def test_http_backend_requires_url_and_key(self) -> None:
        settings = MagicMock()
        settings.STORAGE_BACKEND = "http"
        settings.STORAGE_API_URL = None
        settings.STORAGE_API_KEY = None
        with self.assertRaises(StorageError):
            build_blob_store(settings)

    def test_local_backend(self) -> None:
        settings = MagicMock()
        settings.STORAGE_BACKEND = "local"
        settings.STORAGE_DIR = tempfile.gettempdir()
        self.assertIsInstance(build_blob_store(settings), LocalBlobStore)
