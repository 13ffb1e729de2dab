# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Defines the story store so persistence stays behind one swappable interface.

"""Story persistence.

Stories are caller-defined JSON objects keyed by ``id``, kept newest first.
``JsonFileStoryStore`` rewrites the whole ``stories.json`` array on every
mutation. A missing or unreadable file loads as an empty list
(:func:`load_stories_or_empty`), so a corrupt file never fails a request.
"""

from __future__ import annotations

import copy
import json as _json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Protocol

from comicrelay.core.errors import (
    StorageWriteError,
    StoryNotFoundError,
    StoryValidationError,
)

logger = logging.getLogger(__name__)

StoryRecord = Dict[str, Any]


class StoryStore(Protocol):
    def list_all(self) -> List[StoryRecord]: ...

    def get(self, story_id: str) -> StoryRecord: ...

    def upsert(self, record: StoryRecord) -> None: ...

    def delete(self, story_id: str) -> None: ...


def validate_story(record: Any) -> str:
    if not isinstance(record, dict):
        raise StoryValidationError("Story must be a JSON object")
    story_id = record.get("id")
    if not isinstance(story_id, str) or not story_id:
        raise StoryValidationError()
    return story_id


def upsert_into(stories: List[StoryRecord], record: StoryRecord) -> bool:
    """Replace the record with the same id in place, else prepend. True when replaced."""
    for i, existing in enumerate(stories):
        if existing.get("id") == record["id"]:
            stories[i] = record
            return True
    stories.insert(0, record)
    return False


def load_stories_or_empty(path: Path) -> List[StoryRecord]:
    if not path.exists():
        return []
    try:
        data = _json.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:
        logger.error("Error loading stories from %s: %s", path, exc)
        return []
    if not isinstance(data, list):
        logger.error("Error loading stories from %s: expected a JSON array", path)
        return []
    return [s for s in data if isinstance(s, dict)]


class JsonFileStoryStore:
    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Serializes read-modify-write within this process only.
        self._lock = threading.Lock()

    def _save(self, stories: List[StoryRecord], failure: str) -> None:
        try:
            self.path.write_text(
                _json.dumps(stories, ensure_ascii=False, indent=2), encoding="utf-8"
            )
        except Exception as exc:
            logger.error("Error saving stories to %s: %s", self.path, exc)
            raise StorageWriteError(failure) from exc

    def list_all(self) -> List[StoryRecord]:
        return load_stories_or_empty(self.path)

    def get(self, story_id: str) -> StoryRecord:
        for story in self.list_all():
            if story.get("id") == story_id:
                return story
        raise StoryNotFoundError()

    def upsert(self, record: StoryRecord) -> None:
        validate_story(record)
        with self._lock:
            stories = load_stories_or_empty(self.path)
            replaced = upsert_into(stories, record)
            self._save(stories, "Failed to save story")
        logger.info(
            "%s story %s (%s)",
            "Updated" if replaced else "Added",
            record["id"],
            record.get("name"),
        )

    def delete(self, story_id: str) -> None:
        with self._lock:
            stories = load_stories_or_empty(self.path)
            remaining = [s for s in stories if s.get("id") != story_id]
            if len(remaining) == len(stories):
                raise StoryNotFoundError()
            self._save(remaining, "Failed to delete story")
        logger.info("Deleted story %s", story_id)


class InMemoryStoryStore:
    """Store with the same semantics as the file store, kept in a list."""

    def __init__(self, stories: List[StoryRecord] | None = None):
        self._stories: List[StoryRecord] = copy.deepcopy(stories or [])
        self._lock = threading.Lock()

    def list_all(self) -> List[StoryRecord]:
        return copy.deepcopy(self._stories)

    def get(self, story_id: str) -> StoryRecord:
        for story in self._stories:
            if story.get("id") == story_id:
                return copy.deepcopy(story)
        raise StoryNotFoundError()

    def upsert(self, record: StoryRecord) -> None:
        validate_story(record)
        with self._lock:
            upsert_into(self._stories, copy.deepcopy(record))

    def delete(self, story_id: str) -> None:
        with self._lock:
            remaining = [s for s in self._stories if s.get("id") != story_id]
            if len(remaining) == len(self._stories):
                raise StoryNotFoundError()
            self._stories = remaining
