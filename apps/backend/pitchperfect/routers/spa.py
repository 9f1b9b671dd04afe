from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, Response

from ..state import AppState, get_state

router = APIRouter()


@router.get("/{full_path:path}")
def spa_fallback(full_path: str, state: AppState = Depends(get_state)):
    # Serve the built client for any non-API path; API and upload misses stay 404.
    if full_path.startswith(("api/", "uploads/")):
        return Response(status_code=404)

    build_dir = state.settings.client_build_dir
    candidate = (build_dir / full_path).resolve()
    if full_path and candidate.is_file() and str(candidate).startswith(str(build_dir.resolve())):
        return FileResponse(candidate)

    index = build_dir / "index.html"
    if index.exists():
        return FileResponse(index)

    return Response(
        content="Client not built. Run `npm run build` in client/ (or `python run_builder.py`).",
        media_type="text/plain",
        status_code=503,
    )
