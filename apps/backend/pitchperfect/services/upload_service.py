from __future__ import annotations

import logging
import random
import re
import time
from pathlib import Path

from fastapi import UploadFile

from ..errors import UploadRejected

logger = logging.getLogger("pp.uploads")

ALLOWED_TYPES_RE = re.compile(r"jpeg|jpg|png|gif|svg|webp|mp4|mov|avi|pdf|doc|docx|ppt|pptx")
CHUNK_SIZE = 1024 * 1024


def _sanitize(name: str) -> str:
    safe = "".join(ch for ch in name if ch.isalnum() or ch in ("-", "_", ".", " ")).strip().replace(" ", "_")
    if not safe or safe.startswith("."):
        safe = "file" + (safe if safe.startswith(".") else "")
    return safe


def is_allowed(filename: str, content_type: str) -> bool:
    ext = Path(filename).suffix.lower()
    return bool(ALLOWED_TYPES_RE.search(ext)) and bool(ALLOWED_TYPES_RE.search(content_type.lower()))


def unique_upload_name(original: str) -> str:
    return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}-{_sanitize(original)}"


async def save_upload(file: UploadFile | None, upload_dir: Path, max_bytes: int) -> dict:
    """
    Store an uploaded file under `upload_dir` and describe it.
    Raises UploadRejected for a missing file, a disallowed type or an oversized body.
    """
    if file is None or not (file.filename or "").strip():
        raise UploadRejected(400, "No file uploaded")

    original = file.filename.strip()
    ct = (file.content_type or "").lower()
    if not is_allowed(original, ct):
        raise UploadRejected(400, "Only image, video, and document files are allowed!")

    upload_dir.mkdir(parents=True, exist_ok=True)
    filename = unique_upload_name(original)
    out = upload_dir / filename

    size = 0
    try:
        with out.open("wb") as f:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise UploadRejected(413, f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB.")
                f.write(chunk)
    except BaseException:
        out.unlink(missing_ok=True)
        raise

    logger.info("File uploaded: %s (%d bytes) -> %s", original, size, filename)
    return {
        "filename": filename,
        "originalname": original,
        "url": f"/uploads/{filename}",
        "size": size,
        "mimetype": ct,
    }
