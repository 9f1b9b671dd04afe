from __future__ import annotations

from typing import Any

from ..bundle.refs import collect_media_refs
from ..errors import InvalidPresentation
from ..models import slides_of
from ..store import PresentationStore


def summarize(store: PresentationStore) -> list[dict[str, Any]]:
    out = []
    for pid, doc, created in store.entries():
        out.append(
            {
                "id": pid,
                "title": doc.get("title") or "Untitled Presentation",
                "createdAt": created,
                "slideCount": len(slides_of(doc)),
                "hasMedia": bool(collect_media_refs(doc)),
            }
        )
    # ISO-8601 UTC strings sort chronologically.
    out.sort(key=lambda s: s["createdAt"] or "", reverse=True)
    return out


def presentation_fields(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise InvalidPresentation("Invalid presentation data")
    slides = payload.get("slides")
    if slides is not None and not isinstance(slides, list):
        raise InvalidPresentation("slides must be a list")
    return payload
