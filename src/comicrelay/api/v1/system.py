# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Liveness check and the single-page-app fallback.

``frontend_router`` holds a catch-all GET route and must be included after
every API router.
"""

from __future__ import annotations

import datetime
from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from comicrelay.api.v1.common import error_json
from comicrelay.core.config import RelayConfig, get_config

router = APIRouter(tags=["System"])
frontend_router = APIRouter(include_in_schema=False)


def utc_timestamp() -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/api/health")
async def api_health() -> dict:
    return {"status": "ok", "timestamp": utc_timestamp()}


def resolve_static_file(static_dir: Path, rel_path: str) -> Path | None:
    """Return the file under ``static_dir`` named by ``rel_path``, never escaping it."""
    if not rel_path:
        return None
    root = static_dir.resolve()
    candidate = (root / rel_path).resolve()
    if root not in candidate.parents or not candidate.is_file():
        return None
    return candidate


@frontend_router.get("/{full_path:path}")
async def spa_fallback(full_path: str, config: RelayConfig = Depends(get_config)):
    static_file = resolve_static_file(config.static_dir, full_path)
    if static_file is not None:
        return FileResponse(static_file)
    index = config.static_dir / "index.html"
    if not index.is_file():
        return error_json("Frontend not found", 404)
    return FileResponse(index)
