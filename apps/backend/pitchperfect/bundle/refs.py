from __future__ import annotations

import copy
from typing import Any, Iterator

from ..models import MEDIA_SLOT_TYPES, slides_of, slot_type

MEDIA_PREFIX = "media/"


def iter_media_fields(doc: dict[str, Any]) -> Iterator[tuple[dict[str, Any], str]]:
    """
    Yield (owner, key) for every media reference in a presentation document.

    Every slide is inspected regardless of its type:
    - slide.imageUrl / slide.videoUrl
    - slide.mediaItems[].url
    - slide.layoutSlots[].content for image/video slots
    Only non-empty string values are yielded.
    """
    for slide in slides_of(doc):
        for key in ("imageUrl", "videoUrl"):
            if _is_ref(slide.get(key)):
                yield slide, key

        items = slide.get("mediaItems") or []
        if isinstance(items, list):
            for item in items:
                if isinstance(item, dict) and _is_ref(item.get("url")):
                    yield item, "url"

        slots = slide.get("layoutSlots") or []
        if isinstance(slots, list):
            for slot in slots:
                if not isinstance(slot, dict):
                    continue
                if slot_type(slot) in MEDIA_SLOT_TYPES and _is_ref(slot.get("content")):
                    yield slot, "content"


def _is_ref(v: Any) -> bool:
    return isinstance(v, str) and bool(v.strip())


def collect_media_refs(doc: dict[str, Any]) -> set[str]:
    return {owner[key] for owner, key in iter_media_fields(doc)}


def rewrite_media_refs(doc: dict[str, Any], file_map: dict[str, str]) -> dict[str, Any]:
    """
    Return a deep copy of `doc` where every reference found in `file_map`
    points at `media/<archived name>`. References missing from the map are
    left untouched so the viewer can still try the original URL.
    """
    out = copy.deepcopy(doc)
    for owner, key in iter_media_fields(out):
        name = file_map.get(owner[key])
        if name:
            owner[key] = MEDIA_PREFIX + name
    return out
