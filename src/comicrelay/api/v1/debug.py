# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Inspection of recent provider traffic.

Entries come from ``post_json``: at most ``MAX_LOG_ENTRIES`` of them, oldest
dropped first, with ``Authorization`` and ``x-goog-api-key`` replaced by
``***`` and long strings (inline images) clipped.
"""

from fastapi import APIRouter

from comicrelay.services.providers.llm_logs import MAX_LOG_ENTRIES, llm_logs

router = APIRouter(prefix="/api/debug", tags=["debug"])


@router.get("/llm_logs")
async def get_provider_logs(provider: str | None = None):
    """Return logged exchanges, newest last; ``?provider=DeepSeek`` filters by label."""
    if provider:
        return [e for e in llm_logs if e.get("provider") == provider]
    return llm_logs


@router.delete("/llm_logs")
async def clear_provider_logs():
    cleared = len(llm_logs)
    llm_logs.clear()
    return {"status": "ok", "cleared": cleared, "capacity": MAX_LOG_ENTRIES}
