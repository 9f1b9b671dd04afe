from __future__ import annotations

import json
import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .errors import PresentationNotFound

logger = logging.getLogger("pp.store")

_ID_RE = re.compile(r"^[A-Za-z0-9_\-]{1,64}$")


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_presentation_id() -> str:
    return str(uuid.uuid4())


class PresentationStore:
    """
    One JSON document per presentation.
    Subclasses provide the raw persistence; id and timestamp rules live here.
    """

    def ids(self) -> list[str]:
        raise NotImplementedError

    def _read(self, presentation_id: str) -> dict[str, Any] | None:
        raise NotImplementedError

    def _write(self, presentation_id: str, doc: dict[str, Any]) -> None:
        raise NotImplementedError

    def _remove(self, presentation_id: str) -> bool:
        raise NotImplementedError

    def _fallback_created_at(self, presentation_id: str) -> str | None:
        return None

    def get(self, presentation_id: str) -> dict[str, Any]:
        if not _ID_RE.match(presentation_id or ""):
            raise PresentationNotFound(presentation_id)
        doc = self._read(presentation_id)
        if doc is None:
            raise PresentationNotFound(presentation_id)
        return doc

    def entries(self) -> list[tuple[str, dict[str, Any], str | None]]:
        """(id, document, created_at) for every stored presentation."""
        out = []
        for pid in self.ids():
            doc = self._read(pid)
            if doc is None:
                continue
            created = doc.get("createdAt") or self._fallback_created_at(pid)
            out.append((pid, doc, created))
        return out

    def create(self, fields: dict[str, Any]) -> dict[str, Any]:
        pid = new_presentation_id()
        doc = {
            "id": pid,
            "title": fields.get("title"),
            "template": fields.get("template"),
            "slides": fields.get("slides"),
            "settings": fields.get("settings"),
            "createdAt": now_iso(),
        }
        self._write(pid, doc)
        logger.info("Created presentation %s (%r)", pid, doc.get("title"))
        return doc

    def update(self, presentation_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        existing = self.get(presentation_id)
        doc = dict(existing)
        # full replace of the editable fields; absent ones are dropped
        for key in ("title", "template", "slides", "settings"):
            if key in fields:
                doc[key] = fields[key]
            else:
                doc.pop(key, None)
        doc["id"] = existing.get("id", presentation_id)
        doc["updatedAt"] = now_iso()
        self._write(presentation_id, doc)
        logger.info("Updated presentation %s", presentation_id)
        return doc

    def delete(self, presentation_id: str) -> None:
        self.get(presentation_id)
        if not self._remove(presentation_id):
            raise PresentationNotFound(presentation_id)
        logger.info("Deleted presentation %s", presentation_id)


class JsonFilePresentationStore(PresentationStore):
    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, presentation_id: str) -> Path:
        return self.root / f"{presentation_id}.json"

    def ids(self) -> list[str]:
        return sorted(p.stem for p in self.root.glob("*.json") if _ID_RE.match(p.stem))

    def _read(self, presentation_id: str) -> dict[str, Any] | None:
        p = self._path(presentation_id)
        if not p.is_file():
            return None
        try:
            obj = json.loads(p.read_text(encoding="utf-8"))
        except ValueError as e:
            logger.error("Unreadable presentation file %s: %s", p, e)
            return None
        if not isinstance(obj, dict):
            logger.error("Presentation file %s does not hold an object", p)
            return None
        return obj

    def _write(self, presentation_id: str, doc: dict[str, Any]) -> None:
        p = self._path(presentation_id)
        tmp = p.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(doc, ensure_ascii=False), encoding="utf-8")
        tmp.replace(p)

    def _remove(self, presentation_id: str) -> bool:
        p = self._path(presentation_id)
        try:
            p.unlink()
        except FileNotFoundError:
            return False
        return True

    def _fallback_created_at(self, presentation_id: str) -> str | None:
        p = self._path(presentation_id)
        try:
            mtime = p.stat().st_mtime
        except OSError:
            return None
        return datetime.fromtimestamp(mtime, tz=timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
