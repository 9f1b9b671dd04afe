from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


REPO_ROOT = Path(__file__).resolve().parents[3]
PACKAGE_DIR = Path(__file__).resolve().parent
ASSETS_DIR = PACKAGE_DIR / "assets"
VIEWER_ASSETS_DIR = ASSETS_DIR / "viewer"
TEMPLATES_FILE = ASSETS_DIR / "templates.json"

DATA_DIR = REPO_ROOT / "data"
CLIENT_BUILD_DIR = REPO_ROOT / "client" / "build"

# Layout designer canvas used for custom-layout slot coordinates (passed to the viewer).
DESIGN_CANVAS_WIDTH = 800
DESIGN_CANVAS_HEIGHT = 600
AUTOPLAY_INTERVAL_MS = 5000

BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

DEV_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:8080",
    "http://127.0.0.1:8080",
    "capacitor://localhost",
    "ionic://localhost",
]


def _env_int(name: str, default: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_path(name: str, default: Path) -> Path:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    p = Path(raw)
    if not p.is_absolute():
        p = REPO_ROOT / p
    return p


@dataclass(frozen=True)
class Settings:
    upload_dir: Path = DATA_DIR / "uploads"
    presentations_dir: Path = DATA_DIR / "presentations"
    client_build_dir: Path = CLIENT_BUILD_DIR
    port: int = 5001
    client_url: str = "http://localhost:3000"
    max_upload_bytes: int = 200 * 1024 * 1024
    external_timeout_s: float = 30.0
    user_agent: str = BROWSER_USER_AGENT
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: list(DEV_CORS_ORIGINS))

    @classmethod
    def from_env(cls) -> "Settings":
        client_url = (os.environ.get("CLIENT_URL") or "http://localhost:3000").strip().rstrip("/")
        origins = list(DEV_CORS_ORIGINS)
        if client_url not in origins:
            origins.insert(0, client_url)
        return cls(
            upload_dir=_env_path("UPLOAD_DIR", DATA_DIR / "uploads"),
            presentations_dir=_env_path("PRESENTATIONS_DIR", DATA_DIR / "presentations"),
            client_build_dir=_env_path("CLIENT_BUILD_DIR", CLIENT_BUILD_DIR),
            port=_env_int("PORT", 5001),
            client_url=client_url,
            max_upload_bytes=_env_int("MAX_FILE_SIZE", 200 * 1024 * 1024),
            external_timeout_s=_env_float("EXTERNAL_MEDIA_TIMEOUT", 30.0),
            log_level=(os.environ.get("LOG_LEVEL") or "INFO").strip().upper(),
            cors_origins=origins,
        )

    def ensure_dirs(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self.presentations_dir.mkdir(parents=True, exist_ok=True)
