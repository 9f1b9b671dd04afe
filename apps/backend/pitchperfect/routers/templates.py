from __future__ import annotations

from fastapi import APIRouter, Depends

from ..errors import TemplateNotFound, error_response
from ..state import AppState, get_state

router = APIRouter()


@router.get("/api/templates")
def list_templates(state: AppState = Depends(get_state)):
    return state.templates.list()


@router.get("/api/templates/{template_id}")
def get_template(template_id: str, state: AppState = Depends(get_state)):
    try:
        return state.templates.get(template_id)
    except TemplateNotFound as e:
        return error_response(e)
