from __future__ import annotations

from dataclasses import dataclass

import httpx
from fastapi import Request

from .config import Settings
from .services.template_service import TemplateCatalog
from .store import PresentationStore


@dataclass
class AppState:
    """Collaborators shared by the request handlers of one app instance."""

    settings: Settings
    store: PresentationStore
    templates: TemplateCatalog
    # Outbound transport for external media; None means the real network.
    http_transport: httpx.AsyncBaseTransport | None = None


def get_state(request: Request) -> AppState:
    return request.app.state.pp
