"""Helpers for URL construction and running the ASGI server."""

from __future__ import annotations

from typing import Any

import uvicorn
from fastapi import FastAPI, Request


def build_location_url(request: Request, path: str) -> str:
    """Build an absolute URL for a resource below the current request path."""
    base = str(request.url.replace(query="", fragment="")).rstrip("/")
    return f"{base}{path}"


def run_app(
    app: FastAPI | str,
    *,
    host: str = "127.0.0.1",
    port: int = 8080,
    reload: bool = False,
    **kwargs: Any,
) -> None:
    """Run a FastAPI app (or an 'module:attr' import string) with uvicorn."""
    if reload and not isinstance(app, str):
        raise ValueError("reload=True requires the app as an import string, e.g. 'taskmanager.main:app'")
    uvicorn.run(app, host=host, port=port, reload=reload, **kwargs)
