# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""FastAPI dependencies; tests replace them through ``app.dependency_overrides``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from comicrelay.core.config import RelayConfig, get_config
from comicrelay.services.stories.story_store import JsonFileStoryStore, StoryStore


@lru_cache(maxsize=None)
def _file_store(path: Path) -> JsonFileStoryStore:
    # One store (and lock) per backing file.
    return JsonFileStoryStore(path)


def get_story_store(config: RelayConfig = Depends(get_config)) -> StoryStore:
    return _file_store(config.stories_file)
