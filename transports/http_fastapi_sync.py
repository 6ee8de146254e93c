"""Serve the parse API with uvicorn."""

from __future__ import annotations

import os

import uvicorn

from postrecord.main import create_app
from postrecord.settings import get_settings

app = create_app(get_settings())


if __name__ == "__main__":  # pragma: no cover - manual run helper
    uvicorn.run(
        app,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8080")),
        log_level=get_settings().log_level.lower(),
    )
