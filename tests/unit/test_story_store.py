import json
import tempfile
import threading
from pathlib import Path
from unittest import TestCase
from unittest.mock import patch

from comicrelay.core.errors import (
    StorageWriteError,
    StoryNotFoundError,
    StoryValidationError,
)
from comicrelay.services.stories.story_store import (
    InMemoryStoryStore,
    JsonFileStoryStore,
    load_stories_or_empty,
)


class StoreSemanticsMixin:
    """Behaviour shared by every StoryStore implementation."""

    def make_store(self):
        raise NotImplementedError

    def test_new_story_is_listed_once_at_front(self):
        store = self.make_store()
        store.upsert({"id": "a", "name": "A"})
        store.upsert({"id": "b", "name": "B"})
        stories = store.list_all()
        self.assertEqual([s["id"] for s in stories], ["b", "a"])
        self.assertEqual(sum(1 for s in stories if s["id"] == "b"), 1)

    def test_existing_id_replaced_in_place(self):
        store = self.make_store()
        for sid in ("a", "b", "c"):
            store.upsert({"id": sid, "name": sid.upper()})
        store.upsert({"id": "b", "name": "Renamed", "panels": [1, 2]})
        stories = store.list_all()
        self.assertEqual([s["id"] for s in stories], ["c", "b", "a"])
        self.assertEqual(stories[1], {"id": "b", "name": "Renamed", "panels": [1, 2]})

    def test_replacement_is_wholesale(self):
        store = self.make_store()
        store.upsert({"id": "a", "name": "A", "cover": "x.png"})
        store.upsert({"id": "a", "name": "A2"})
        self.assertEqual(store.get("a"), {"id": "a", "name": "A2"})

    def test_get_unknown_raises_not_found(self):
        store = self.make_store()
        with self.assertRaises(StoryNotFoundError) as ctx:
            store.get("missing")
        self.assertEqual(ctx.exception.status_code, 404)

    def test_upsert_requires_id(self):
        store = self.make_store()
        for bad in ({"name": "no id"}, {"id": "", "name": "empty"}, ["not", "a", "dict"]):
            with self.assertRaises(StoryValidationError):
                store.upsert(bad)
        self.assertEqual(store.list_all(), [])

    def test_delete_missing_leaves_store_unchanged(self):
        store = self.make_store()
        store.upsert({"id": "a", "name": "A"})
        before = store.list_all()
        with self.assertRaises(StoryNotFoundError):
            store.delete("zzz")
        self.assertEqual(store.list_all(), before)

    def test_delete_removes_exactly_one(self):
        store = self.make_store()
        for sid in ("a", "b", "c"):
            store.upsert({"id": sid, "name": sid})
        store.delete("b")
        ids = [s["id"] for s in store.list_all()]
        self.assertEqual(ids, ["c", "a"])
        with self.assertRaises(StoryNotFoundError):
            store.get("b")

    def test_concurrent_upserts_of_distinct_ids_all_persist(self):
        store = self.make_store()
        ids = [f"story-{i}" for i in range(25)]
        threads = [
            threading.Thread(target=store.upsert, args=({"id": sid, "name": sid},))
            for sid in ids
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        stored = sorted(s["id"] for s in store.list_all())
        self.assertEqual(stored, sorted(ids))


class InMemoryStoryStoreTest(StoreSemanticsMixin, TestCase):
    def make_store(self):
        return InMemoryStoryStore()

    def test_returned_records_are_copies(self):
        store = InMemoryStoryStore([{"id": "a", "name": "A"}])
        story = store.get("a")
        story["name"] = "mutated"
        self.assertEqual(store.get("a")["name"], "A")


class JsonFileStoryStoreTest(StoreSemanticsMixin, TestCase):
    def setUp(self):
        self.td = tempfile.TemporaryDirectory()
        self.addCleanup(self.td.cleanup)
        self.path = Path(self.td.name) / "data" / "stories.json"

    def make_store(self):
        return JsonFileStoryStore(self.path)

    def test_creates_data_directory(self):
        JsonFileStoryStore(self.path)
        self.assertTrue(self.path.parent.is_dir())
        self.assertFalse(self.path.exists())

    def test_file_is_pretty_printed_json_array(self):
        store = self.make_store()
        store.upsert({"id": "a", "name": "Café"})
        raw = self.path.read_text(encoding="utf-8")
        self.assertEqual(json.loads(raw), [{"id": "a", "name": "Café"}])
        self.assertIn('\n  {\n    "id": "a"', raw)
        self.assertIn("Café", raw)

    def test_data_survives_new_store_instance(self):
        self.make_store().upsert({"id": "a", "name": "A"})
        self.assertEqual(JsonFileStoryStore(self.path).get("a")["name"], "A")

    def test_malformed_file_lists_empty(self):
        store = self.make_store()
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertLogs("comicrelay.services.stories.story_store", level="ERROR"):
            self.assertEqual(store.list_all(), [])

    def test_non_array_file_lists_empty(self):
        store = self.make_store()
        self.path.write_text('{"id": "a"}', encoding="utf-8")
        with self.assertLogs("comicrelay.services.stories.story_store", level="ERROR"):
            self.assertEqual(store.list_all(), [])

    def test_missing_file_loads_empty(self):
        self.assertEqual(load_stories_or_empty(Path(self.td.name) / "nope.json"), [])

    def test_write_failure_raises_storage_error(self):
        store = self.make_store()
        # A directory where the file should be makes every write fail.
        self.path.mkdir()
        with self.assertRaises(StorageWriteError) as ctx:
            store.upsert({"id": "a", "name": "A"})
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.detail, "Failed to save story")

    def test_delete_write_failure_keeps_record(self):
        store = self.make_store()
        store.upsert({"id": "a", "name": "A"})
        with patch.object(Path, "write_text", side_effect=OSError("read-only")):
            with self.assertRaises(StorageWriteError) as ctx:
                store.delete("a")
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.detail, "Failed to delete story")
        self.assertEqual(store.get("a"), {"id": "a", "name": "A"})
