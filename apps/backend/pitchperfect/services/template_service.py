from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..config import TEMPLATES_FILE
from ..errors import TemplateNotFound

logger = logging.getLogger("pp.template_service")


class TemplateCatalog:
    """Starter slide sets offered when a presentation is created."""

    def __init__(self, templates: list[dict[str, Any]]) -> None:
        self._templates = [t for t in templates if isinstance(t, dict) and t.get("id")]

    @classmethod
    def from_file(cls, path: Path = TEMPLATES_FILE) -> "TemplateCatalog":
        obj = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(obj, list):
            raise ValueError(f"{path.name} must hold a list of templates")
        logger.info("Loaded %d templates from %s", len(obj), path)
        return cls(obj)

    def list(self) -> list[dict[str, Any]]:
        return list(self._templates)

    def get(self, template_id: str) -> dict[str, Any]:
        for t in self._templates:
            if t.get("id") == template_id:
                return t
        raise TemplateNotFound(template_id)
