from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import Response

from ..errors import ExportFailed, InvalidPresentation, PresentationNotFound, error_response
from ..services.export_service import ExportResult, bundle_filename, export_presentation, validate_export_payload
from ..state import AppState, get_state

router = APIRouter()


def _zip_response(presentation_id: str, result: ExportResult) -> Response:
    return Response(
        content=result.archive,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{bundle_filename(presentation_id)}"',
            "X-Media-Included": str(len(result.media.files)),
            "X-Media-Missing": str(len(result.media.missing)),
        },
    )


@router.post("/api/presentations/{presentation_id}/generate")
async def generate(presentation_id: str, payload: Any = Body(None), state: AppState = Depends(get_state)):
    # The caller sends its current in-memory document; storage is not consulted.
    try:
        doc = validate_export_payload(payload)
    except InvalidPresentation as e:
        return error_response(e)
    try:
        result = await export_presentation(doc, state)
    except ExportFailed as e:
        return error_response(e)
    return _zip_response(presentation_id, result)


@router.get("/api/presentations/{presentation_id}/download")
async def download(presentation_id: str, state: AppState = Depends(get_state)):
    try:
        doc = validate_export_payload(state.store.get(presentation_id))
    except (PresentationNotFound, InvalidPresentation) as e:
        return error_response(e)
    try:
        result = await export_presentation(doc, state)
    except ExportFailed as e:
        return error_response(e)
    return _zip_response(presentation_id, result)
