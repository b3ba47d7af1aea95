from unittest.mock import patch

import pytest

from spec_studio.editor import commands as cmd
from spec_studio.editor.session import Editor
from spec_studio.editor.state import EditorState
from spec_studio.editor.store import STORAGE_KEY, FileSnapshotStore, MemorySnapshotStore
from spec_studio.errors import SnapshotError
from spec_studio.model.defaults import create_demo_spec, create_empty_spec


class TestMemorySnapshotStore:
    def test_write_read(self):
        store = MemorySnapshotStore()
        store.write({"openapi": "3.0.3"})
        assert store.read() == {"openapi": "3.0.3"}

    def test_read_returns_copy(self):
        store = MemorySnapshotStore()
        doc = {"info": {"title": "a"}}
        store.write(doc)
        doc["info"]["title"] = "b"
        assert store.read() == {"info": {"title": "a"}}

    def test_empty(self):
        assert MemorySnapshotStore().read() is None


class TestFileSnapshotStore:
    def test_writes_under_storage_key(self, tmp_path):
        store = FileSnapshotStore(tmp_path / "store")
        store.write(create_empty_spec())
        assert (tmp_path / "store" / f"{STORAGE_KEY}.json").exists()
        assert store.read() == create_empty_spec()

    def test_missing_file(self, tmp_path):
        assert FileSnapshotStore(tmp_path).read() is None

    def test_corrupt_snapshot_ignored(self, tmp_path, caplog):
        (tmp_path / f"{STORAGE_KEY}.json").write_text("{not json", encoding="utf-8")
        assert FileSnapshotStore(tmp_path).read() is None
        assert "corrupt snapshot" in caplog.text

    def test_non_object_snapshot_ignored(self, tmp_path):
        (tmp_path / f"{STORAGE_KEY}.json").write_text("[1, 2]", encoding="utf-8")
        assert FileSnapshotStore(tmp_path).read() is None

    def test_write_failure_raises(self, tmp_path):
        store = FileSnapshotStore(tmp_path)
        with patch("pathlib.Path.write_text", side_effect=OSError("disk full")):
            with pytest.raises(SnapshotError, match="disk full"):
                store.write({})

    def test_clear(self, tmp_path):
        store = FileSnapshotStore(tmp_path)
        store.write({})
        store.clear()
        store.clear()
        assert store.read() is None


class TestEditor:
    def test_starts_with_demo(self):
        assert Editor().document == create_demo_spec()

    def test_dispatch(self):
        editor = Editor()
        editor.dispatch(cmd.RemoveAllPaths())
        assert editor.document["paths"] == {}

    def test_save_persists_snapshot(self):
        store = MemorySnapshotStore()
        editor = Editor(store=store)
        editor.save()
        assert store.read() == create_demo_spec()
        assert editor.state.snapshot == create_demo_spec()

    def test_undo_restores_saved_document(self):
        editor = Editor()
        editor.save()
        editor.dispatch_all([cmd.RemoveAllPaths(), cmd.AddSchema()])
        editor.undo()
        assert editor.document == create_demo_spec()

    def test_undo_reads_store_from_new_session(self, tmp_path):
        first = Editor(EditorState(document=create_empty_spec()), FileSnapshotStore(tmp_path))
        first.dispatch(cmd.AddPath())
        first.save()

        second = Editor(store=FileSnapshotStore(tmp_path))
        second.undo()
        assert list(second.document["paths"]) == ["/newPath"]

    def test_undo_falls_back_to_memory_snapshot(self, tmp_path):
        editor = Editor(EditorState(document=create_empty_spec(), snapshot=create_demo_spec()), FileSnapshotStore(tmp_path))
        editor.undo()
        assert editor.document == create_demo_spec()

    def test_undo_without_any_snapshot_is_noop(self):
        editor = Editor()
        before = editor.state
        editor.undo()
        assert editor.state is before
