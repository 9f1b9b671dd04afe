from __future__ import annotations

from .config import Settings
from .main import configure_logging, create_app

settings = Settings.from_env()
configure_logging(settings.log_level)
app = create_app(settings)
