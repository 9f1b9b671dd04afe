from __future__ import annotations

import asyncio
import hashlib
import logging
import mimetypes
import re
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit

import httpx

logger = logging.getLogger("pp.resolver")

UPLOADS_MARKER = "/uploads/"
LARGE_FILE_BYTES = 50 * 1024 * 1024


class RefKind(str, Enum):
    LOCAL = "local"
    EXTERNAL = "external"


def classify_ref(ref: str) -> RefKind | None:
    if UPLOADS_MARKER in ref:
        return RefKind.LOCAL
    if ref.startswith("http://") or ref.startswith("https://"):
        return RefKind.EXTERNAL
    return None


def upload_filename(ref: str) -> str:
    """Text after the last `/uploads/` occurrence."""
    return ref.rsplit(UPLOADS_MARKER, 1)[1]


_SAFE_STEM_RE = re.compile(r"[^A-Za-z0-9_\-]+")


def external_filename(url: str, content_type: str | None = None, now_ms: int | None = None) -> str:
    """
    Synthesize an archive filename for an external URL:
    `<stem>-<8 hex chars of sha256(url)>-<epoch ms><ext>`.
    The extension comes from the URL path, else from the response content type.
    """
    path = PurePosixPath(urlsplit(url).path)
    ext = path.suffix if re.match(r"^\.[A-Za-z0-9]{1,8}$", path.suffix or "") else ""
    if not ext and content_type:
        guessed = mimetypes.guess_extension(content_type.split(";", 1)[0].strip().lower())
        if guessed:
            ext = ".jpg" if guessed == ".jpe" else guessed

    stem = _SAFE_STEM_RE.sub("_", path.stem).strip("_")[:40] or "external"
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:8]
    ts = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{stem}-{digest}-{ts}{ext}"


@dataclass
class ResolvedMedia:
    # reference string -> archived filename (the MediaFileMap)
    file_map: dict[str, str] = field(default_factory=dict)
    # archived filename -> bytes
    files: dict[str, bytes] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def add(self, ref: str, filename: str, data: bytes) -> None:
        self.file_map[ref] = filename
        self.files.setdefault(filename, data)


class MediaResolver:
    def __init__(self, upload_dir: Path, client: httpx.AsyncClient, deadline_s: float | None = None) -> None:
        self.upload_dir = upload_dir
        self.client = client
        # wall-clock ceiling for one download, on top of the per-phase client timeouts
        self.deadline_s = deadline_s

    async def resolve_all(self, refs: set[str] | list[str]) -> ResolvedMedia:
        """
        Obtain bytes for each distinct reference. Local and external references
        are resolved concurrently; a failing reference is recorded as missing.
        """
        result = ResolvedMedia()
        ordered = sorted(set(refs))
        pending: list[str] = []
        for ref in ordered:
            if classify_ref(ref) is None:
                logger.info("Skipping unsupported media reference: %r", ref)
                result.skipped.append(ref)
            else:
                pending.append(ref)

        outcomes = await asyncio.gather(*(self.resolve_one(ref) for ref in pending))
        for ref, outcome in zip(pending, outcomes):
            if outcome is None:
                result.missing.append(ref)
                continue
            filename, data = outcome
            result.add(ref, filename, data)

        logger.info(
            "Media resolved: %d included, %d missing, %d skipped",
            len(result.file_map),
            len(result.missing),
            len(result.skipped),
        )
        if result.missing:
            logger.warning("Missing media references: %s", result.missing)
        return result

    async def resolve_one(self, ref: str) -> tuple[str, bytes] | None:
        kind = classify_ref(ref)
        if kind is RefKind.LOCAL:
            return await self._read_local(ref)
        if kind is RefKind.EXTERNAL:
            return await self._download(ref)
        return None

    async def _read_local(self, ref: str) -> tuple[str, bytes] | None:
        filename = upload_filename(ref)
        try:
            root = self.upload_dir.resolve()
            p = (root / filename).resolve()
            if not filename or p.parent != root:
                logger.warning("Rejected upload reference outside the upload directory: %r", ref)
                return None
            if not p.is_file():
                logger.warning("Media file not found: %s", p)
                return None
            size = p.stat().st_size
            if size > LARGE_FILE_BYTES:
                logger.warning("Large file detected: %s (%.1fMB) - this may take a while", filename, size / 1024 / 1024)
            data = await asyncio.to_thread(p.read_bytes)
        except (OSError, ValueError) as e:
            logger.error("Error reading media file %r: %s", filename, e)
            return None
        logger.info("Read media file: %s (%d bytes)", filename, len(data))
        return filename, data

    async def _download(self, url: str) -> tuple[str, bytes] | None:
        logger.info("Downloading external media: %s", url)
        try:
            r = await asyncio.wait_for(self.client.get(url), self.deadline_s)
            r.raise_for_status()
        except asyncio.TimeoutError:
            logger.warning("Gave up on %s after %.1fs", url, self.deadline_s)
            return None
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            # ValueError covers UnicodeError from IDNA host encoding
            logger.warning("Failed to download %s: %s", url, e)
            return None
        data = r.content
        filename = external_filename(url, r.headers.get("content-type"))
        logger.info("Downloaded %s -> %s (%d bytes)", url, filename, len(data))
        return filename, data
