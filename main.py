"""Production-friendly ASGI entrypoint."""

from __future__ import annotations

import sys
from pathlib import Path


def _ensure_src_on_path() -> None:
    root = Path(__file__).resolve().parent
    src = root / "src"
    candidate_str = str(src)
    if candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)


_ensure_src_on_path()

from address_pool.infrastructure.api.routes import create_app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=9191)
