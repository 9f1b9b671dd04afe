from __future__ import annotations

from fastapi import APIRouter, Depends

from ..state import AppState, get_state

router = APIRouter()


@router.get("/api/health")
def health(state: AppState = Depends(get_state)):
    return {"ok": True, "templates": len(state.templates.list())}
