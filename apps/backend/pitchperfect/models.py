from __future__ import annotations

from enum import Enum
from typing import Any


class SlideType(str, Enum):
    TITLE = "title"
    CONTENT = "content"
    IMAGE = "image"
    VIDEO = "video"
    CONTACT = "contact"
    MULTI_MEDIA = "multi-media"
    CUSTOM_LAYOUT = "custom-layout"


class SlotType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    TEXT = "text"


MEDIA_SLOT_TYPES = frozenset({SlotType.IMAGE, SlotType.VIDEO})


def slide_type(slide: dict[str, Any]) -> SlideType | None:
    try:
        return SlideType(slide.get("type"))
    except ValueError:
        return None


def slot_type(slot: dict[str, Any]) -> SlotType | None:
    try:
        return SlotType(slot.get("type"))
    except ValueError:
        return None


def slides_of(doc: dict[str, Any]) -> list[dict[str, Any]]:
    """Slides of a presentation document, skipping anything that is not an object."""
    slides = doc.get("slides") or []
    if not isinstance(slides, list):
        return []
    return [s for s in slides if isinstance(s, dict)]
