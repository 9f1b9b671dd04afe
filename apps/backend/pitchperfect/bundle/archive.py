from __future__ import annotations

import base64
import io
import json
import logging
import zipfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..config import AUTOPLAY_INTERVAL_MS, DESIGN_CANVAS_HEIGHT, DESIGN_CANVAS_WIDTH, VIEWER_ASSETS_DIR
from .refs import MEDIA_PREFIX
from .resolver import ResolvedMedia

logger = logging.getLogger("pp.archive")

# Static viewer files copied verbatim into every bundle.
STATIC_ASSETS = ("styles.css", "presentation.js")


def _inline_json(obj: Any) -> str:
    """JSON literal that is safe to place inside a <script> element."""
    s = json.dumps(obj, ensure_ascii=False)
    return (
        s.replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


def _b64_json(obj: Any) -> str:
    raw = json.dumps(obj, ensure_ascii=False).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


class BundleAssembler:
    """Renders the viewer shell and packs a presentation into a standalone zip."""

    def __init__(self, assets_dir: Path = VIEWER_ASSETS_DIR) -> None:
        self.assets_dir = assets_dir
        self.env = Environment(
            loader=FileSystemLoader(str(assets_dir)),
            autoescape=select_autoescape(enabled_extensions=("html", "html.j2"), default_for_string=False),
            keep_trailing_newline=True,
        )

    def render_index_html(self, doc: dict[str, Any]) -> str:
        viewer_config = {
            "autoplayMs": AUTOPLAY_INTERVAL_MS,
            "canvasWidth": DESIGN_CANVAS_WIDTH,
            "canvasHeight": DESIGN_CANVAS_HEIGHT,
        }
        return self.env.get_template("index.html.j2").render(
            title=doc.get("title") or "Presentation",
            data_b64=_b64_json(doc),
            data_json=_inline_json(doc),
            viewer_config=_inline_json(viewer_config),
        )

    def render_readme(self, doc: dict[str, Any], media: ResolvedMedia, generated_at: str | None = None) -> str:
        return self.env.get_template("README.md.j2").render(
            title=doc.get("title") or "Presentation",
            media_files=[MEDIA_PREFIX + name for name in sorted(media.files)],
            missing=list(media.missing),
            generated_at=generated_at or datetime.now(timezone.utc).isoformat(timespec="seconds"),
        )

    def static_asset(self, name: str) -> str:
        return (self.assets_dir / name).read_text(encoding="utf-8")

    def build(self, doc: dict[str, Any], media: ResolvedMedia) -> bytes:
        """
        `doc` must already be rewritten (media references point at media/...).
        Returns the zip archive bytes.
        """
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            zf.writestr("presentation.json", json.dumps(doc, indent=2, ensure_ascii=False))
            zf.writestr("index.html", self.render_index_html(doc))
            for name in STATIC_ASSETS:
                zf.writestr(name, self.static_asset(name))
            zf.writestr("README.md", self.render_readme(doc, media))
            # Explicit directory entry so media/ exists even when nothing resolved.
            zf.writestr(zipfile.ZipInfo(MEDIA_PREFIX), b"")
            for name in sorted(media.files):
                # media is mostly already compressed (jpg, mp4, webm)
                zf.writestr(MEDIA_PREFIX + name, media.files[name], compress_type=zipfile.ZIP_STORED)
        data = buf.getvalue()
        logger.info("Bundle archive built: %d entries, %d bytes", 6 + len(media.files), len(data))
        return data
