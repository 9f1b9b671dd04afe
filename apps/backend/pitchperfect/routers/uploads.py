from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from ..errors import UploadRejected, error_response
from ..services.upload_service import save_upload
from ..state import AppState, get_state

router = APIRouter()


@router.post("/api/upload")
async def upload(file: UploadFile | None = File(None), state: AppState = Depends(get_state)):
    settings = state.settings
    try:
        info = await save_upload(file, settings.upload_dir, settings.max_upload_bytes)
    except UploadRejected as e:
        return error_response(e)
    return {"success": True, "file": info}
