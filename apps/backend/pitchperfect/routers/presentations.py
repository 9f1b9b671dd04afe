from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from ..errors import InvalidPresentation, PresentationNotFound, error_response
from ..services.presentation_service import presentation_fields, summarize
from ..state import AppState, get_state

router = APIRouter()


@router.get("/api/presentations")
def list_presentations(state: AppState = Depends(get_state)):
    return summarize(state.store)


@router.post("/api/presentations")
def create_presentation(payload: Any = Body(None), state: AppState = Depends(get_state)):
    try:
        fields = presentation_fields(payload)
    except InvalidPresentation as e:
        return error_response(e)
    doc = state.store.create(fields)
    return {"success": True, "presentationId": doc["id"], "message": "Presentation saved successfully"}


@router.get("/api/presentations/{presentation_id}")
def get_presentation(presentation_id: str, state: AppState = Depends(get_state)):
    try:
        return state.store.get(presentation_id)
    except PresentationNotFound as e:
        return error_response(e)


@router.put("/api/presentations/{presentation_id}")
def update_presentation(presentation_id: str, payload: Any = Body(None), state: AppState = Depends(get_state)):
    try:
        state.store.update(presentation_id, presentation_fields(payload))
    except (PresentationNotFound, InvalidPresentation) as e:
        return error_response(e)
    return {"success": True, "message": "Presentation updated successfully"}


@router.delete("/api/presentations/{presentation_id}")
def delete_presentation(presentation_id: str, state: AppState = Depends(get_state)):
    try:
        state.store.delete(presentation_id)
    except PresentationNotFound as e:
        return error_response(e)
    return {"success": True, "message": "Presentation deleted successfully"}
