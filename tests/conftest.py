"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import copy
import io
import zipfile
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from pitchperfect.config import Settings
from pitchperfect.main import create_app
from pitchperfect.store import PresentationStore


class MemoryPresentationStore(PresentationStore):
    """In-memory stand-in for the JSON file store."""

    def __init__(self) -> None:
        self.docs: dict[str, dict[str, Any]] = {}

    def ids(self) -> list[str]:
        return sorted(self.docs)

    def _read(self, presentation_id: str) -> dict[str, Any] | None:
        doc = self.docs.get(presentation_id)
        return copy.deepcopy(doc) if doc is not None else None

    def _write(self, presentation_id: str, doc: dict[str, Any]) -> None:
        self.docs[presentation_id] = copy.deepcopy(doc)

    def _remove(self, presentation_id: str) -> bool:
        return self.docs.pop(presentation_id, None) is not None


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    s = Settings(
        upload_dir=tmp_path / "uploads",
        presentations_dir=tmp_path / "presentations",
        client_build_dir=tmp_path / "client-build",
        max_upload_bytes=1024 * 1024,
        external_timeout_s=2.0,
    )
    s.ensure_dirs()
    return s


@pytest.fixture
def memory_store() -> MemoryPresentationStore:
    return MemoryPresentationStore()


@pytest.fixture
def remote_media() -> dict[str, Any]:
    """
    url -> bytes, or an exception instance to raise for that url.
    Unknown urls answer 404. `calls` records every requested url and
    `requests` the request objects themselves.
    """
    return {"routes": {}, "calls": [], "requests": []}


@pytest.fixture
def mock_transport(remote_media: dict[str, Any]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        remote_media["calls"].append(url)
        remote_media["requests"].append(request)
        answer = remote_media["routes"].get(url)
        if isinstance(answer, Exception):
            raise answer
        if answer is None:
            return httpx.Response(404, request=request)
        content_type = "application/octet-stream"
        if isinstance(answer, tuple):
            answer, content_type = answer
        return httpx.Response(200, content=answer, headers={"content-type": content_type}, request=request)

    return httpx.MockTransport(handler)


@pytest.fixture
def make_client(settings: Settings, mock_transport: httpx.MockTransport) -> Callable[..., TestClient]:
    def factory(store: PresentationStore | None = None) -> TestClient:
        app = create_app(settings=settings, store=store, http_transport=mock_transport)
        return TestClient(app)

    return factory


@pytest.fixture
def client(make_client: Callable[..., TestClient]) -> TestClient:
    return make_client()


@pytest.fixture
def unzip() -> Callable[[bytes], zipfile.ZipFile]:
    def _open(data: bytes) -> zipfile.ZipFile:
        return zipfile.ZipFile(io.BytesIO(data))

    return _open


@pytest.fixture
def full_presentation() -> dict[str, Any]:
    """One slide of each kind with a media reference in every possible field."""
    return {
        "title": "Everything",
        "template": "business-pitch",
        "slides": [
            {"id": "s1", "type": "title", "title": "Hello", "content": "World", "subtitle": "Sub"},
            {"id": "s2", "type": "content", "title": "Text", "content": "Body"},
            {"id": "s3", "type": "image", "title": "Pic", "imageUrl": "/uploads/pic.png"},
            {"id": "s4", "type": "video", "title": "Clip", "videoUrl": "https://cdn.example.com/v/clip.mp4"},
            {"id": "s5", "type": "contact", "title": "Call", "email": "a@b.c", "phone": "1", "website": "x.y"},
            {
                "id": "s6",
                "type": "multi-media",
                "title": "Grid",
                "mediaItems": [
                    {"id": "m1", "type": "image", "url": "/uploads/one.jpg", "position": {"x": 5, "y": 5, "width": 40, "height": 40}},
                    {"id": "m2", "type": "video", "url": "http://media.example.org/two.webm", "position": {"x": 50, "y": 5, "width": 40, "height": 40}},
                ],
            },
            {
                "id": "s7",
                "type": "custom-layout",
                "layoutId": "layout-1",
                "layoutSlots": [
                    {"id": "a", "type": "image", "position": {"x": 0, "y": 0}, "size": {"width": 400, "height": 300}, "content": "/uploads/slot.gif"},
                    {"id": "b", "type": "video", "position": {"x": 400, "y": 0}, "size": {"width": 400, "height": 300}, "content": "https://cdn.example.com/slot.mp4", "autoplay": True, "muted": True},
                    {"id": "c", "type": "text", "position": {"x": 0, "y": 300}, "size": {"width": 800, "height": 300}, "content": "/uploads/not-media.png"},
                ],
            },
        ],
        "settings": {},
    }
