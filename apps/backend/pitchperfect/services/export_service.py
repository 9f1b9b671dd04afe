from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ..bundle.archive import BundleAssembler
from ..bundle.refs import collect_media_refs, rewrite_media_refs
from ..bundle.resolver import MediaResolver, ResolvedMedia
from ..errors import ExportFailed, InvalidPresentation
from ..models import slide_type, slides_of
from ..state import AppState

logger = logging.getLogger("pp.export")


@dataclass(frozen=True)
class ExportResult:
    archive: bytes
    media: ResolvedMedia
    document: dict[str, Any]


def validate_export_payload(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict) or not isinstance(payload.get("slides"), list):
        raise InvalidPresentation("Invalid presentation data")
    return payload


async def export_presentation(doc: dict[str, Any], state: AppState) -> ExportResult:
    """
    Build the standalone bundle for an in-memory presentation document.
    Media is resolved and references rewritten before anything is templated.
    """
    slides = slides_of(doc)
    logger.info("Exporting %r with %d slides", doc.get("title"), len(slides))
    for i, slide in enumerate(slides):
        if slide_type(slide) is None:
            logger.warning("Slide %d has unknown type %r; it will render as a content slide", i, slide.get("type"))

    refs = collect_media_refs(doc)
    logger.info("Media references found: %s", sorted(refs))

    settings = state.settings
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(settings.external_timeout_s),
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
        transport=state.http_transport,
    ) as client:
        media = await MediaResolver(settings.upload_dir, client, deadline_s=settings.external_timeout_s).resolve_all(refs)

    rewritten = rewrite_media_refs(doc, media.file_map)
    try:
        archive = await asyncio.to_thread(BundleAssembler().build, rewritten, media)
    except Exception as e:
        logger.exception("Bundle assembly failed")
        raise ExportFailed(str(e) or "Failed to generate presentation") from e
    return ExportResult(archive=archive, media=media, document=rewritten)


def bundle_filename(presentation_id: str) -> str:
    safe = "".join(ch for ch in presentation_id if ch.isalnum() or ch in ("-", "_")) or "export"
    return f"presentation-{safe}.zip"
