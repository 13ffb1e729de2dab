# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from comicrelay.api.v1.common import map_relay_exception, ok_json
from comicrelay.api.v1.dependencies import get_story_store
from comicrelay.core.errors import BadRequestError
from comicrelay.services.stories.story_store import StoryStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Stories"])


@router.get("/api/stories")
async def api_list_stories(store: StoryStore = Depends(get_story_store)) -> dict:
    stories = store.list_all()
    logger.info("Loaded %d stories", len(stories))
    return {"success": True, "stories": stories}


@router.get("/api/stories/{story_id}")
async def api_get_story(
    story_id: str, store: StoryStore = Depends(get_story_store)
) -> JSONResponse:
    try:
        story = store.get(story_id)
    except Exception as exc:
        return map_relay_exception(exc)
    return ok_json({"success": True, "story": story})


@router.post("/api/stories")
async def api_save_story(
    request: Request, store: StoryStore = Depends(get_story_store)
) -> JSONResponse:
    try:
        try:
            record = await request.json()
        except Exception as exc:
            raise BadRequestError("Invalid JSON body") from exc
        store.upsert(record)
    except Exception as exc:
        return map_relay_exception(exc)
    return ok_json({"success": True, "message": "Story saved"})


@router.delete("/api/stories/{story_id}")
async def api_delete_story(
    story_id: str, store: StoryStore = Depends(get_story_store)
) -> JSONResponse:
    try:
        store.delete(story_id)
    except Exception as exc:
        return map_relay_exception(exc)
    return ok_json({"success": True, "message": "Story deleted"})
