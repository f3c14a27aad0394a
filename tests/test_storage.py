"""Tests for the blob store backends."""

import asyncio
import os

import pytest

from mes_comptes.services.storage import (
    DEFAULT_STORAGE_KEY,
    FileBlobStore,
    KeyValueBlobStore,
    StoreUnavailable,
)


class TestFileBlobStore:
    """Tests for the file backend."""

    def test_missing_file_is_absent(self, tmp_path):
        """Test reading a file that was never written returns None."""
        store = FileBlobStore(tmp_path / "donnees-comptes.json")
        assert asyncio.run(store.read()) is None

    def test_write_then_read(self, tmp_path):
        """Test the written text comes back unchanged."""
        store = FileBlobStore(tmp_path / "donnees-comptes.json")
        assert asyncio.run(store.write("abc=")) is True
        assert asyncio.run(store.read()) == "abc="

    def test_write_creates_parent_directories(self, tmp_path):
        """Test the data directory is created on first save."""
        path = tmp_path / "nested" / "dir" / "data.json"
        asyncio.run(FileBlobStore(path).write("x"))
        assert path.read_text(encoding="utf-8") == "x"

    def test_write_overwrites_whole_document(self, tmp_path):
        """Test a shorter document fully replaces a longer one."""
        store = FileBlobStore(tmp_path / "data.json")
        asyncio.run(store.write("a much longer document"))
        asyncio.run(store.write("short"))
        assert asyncio.run(store.read()) == "short"

    def test_write_leaves_no_temp_files(self, tmp_path):
        """Test only the data file remains after a save."""
        store = FileBlobStore(tmp_path / "data.json")
        asyncio.run(store.write("x"))
        assert os.listdir(tmp_path) == ["data.json"]

    def test_failed_write_keeps_previous_document(self, tmp_path, monkeypatch):
        """Test a failing replace leaves the old file and no temp file."""
        store = FileBlobStore(tmp_path / "data.json")
        asyncio.run(store.write("original"))

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", failing_replace)
        with pytest.raises(StoreUnavailable):
            asyncio.run(store.write("new"))

        monkeypatch.undo()
        assert asyncio.run(store.read()) == "original"
        assert os.listdir(tmp_path) == ["data.json"]

    def test_unwritable_location(self, tmp_path):
        """Test a parent path that is a file raises StoreUnavailable."""
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = FileBlobStore(blocker / "data.json")
        with pytest.raises(StoreUnavailable):
            asyncio.run(store.write("x"))

    def test_unreadable_location(self, tmp_path):
        """Test reading a directory raises StoreUnavailable, not absent."""
        store = FileBlobStore(tmp_path)
        with pytest.raises(StoreUnavailable):
            asyncio.run(store.read())

    def test_location(self, tmp_path):
        """Test the location names the file."""
        store = FileBlobStore(tmp_path / "data.json")
        assert store.location.startswith("file:")
        assert store.location.endswith("data.json")


class TestKeyValueBlobStore:
    """Tests for the key/value backend."""

    def test_missing_key_is_absent(self):
        """Test an empty namespace reads as absent."""
        assert asyncio.run(KeyValueBlobStore().read()) is None

    def test_default_key(self):
        """Test the default storage key."""
        namespace = {}
        asyncio.run(KeyValueBlobStore(namespace).write("abc"))
        assert namespace == {DEFAULT_STORAGE_KEY: "abc"}

    def test_write_then_read(self):
        """Test the stored text comes back unchanged."""
        store = KeyValueBlobStore({}, key="k")
        asyncio.run(store.write("payload"))
        assert asyncio.run(store.read()) == "payload"
        assert store.location == "key:k"

    def test_other_keys_untouched(self):
        """Test writing only touches the store's key."""
        namespace = {"theme": "dark"}
        asyncio.run(KeyValueBlobStore(namespace, key="k").write("v"))
        assert namespace["theme"] == "dark"

    def test_non_text_value_is_unavailable(self):
        """Test a non-string value under the key raises StoreUnavailable."""
        store = KeyValueBlobStore({"k": b"bytes"}, key="k")
        with pytest.raises(StoreUnavailable):
            asyncio.run(store.read())

    def test_failing_namespace(self):
        """Test namespace errors surface as StoreUnavailable."""

        class ReadOnly(dict):
            def __setitem__(self, key, value):
                raise PermissionError("quota exceeded")

        store = KeyValueBlobStore(ReadOnly(), key="k")
        with pytest.raises(StoreUnavailable):
            asyncio.run(store.write("x"))

    def test_shelf_persists_across_instances(self, tmp_path):
        """Test a shelf-backed store keeps data after reopening."""
        path = tmp_path / "shelf" / "store"
        store = KeyValueBlobStore.open_shelf(path)
        asyncio.run(store.write("persisted"))
        store.close()

        reopened = KeyValueBlobStore.open_shelf(path)
        try:
            assert asyncio.run(reopened.read()) == "persisted"
        finally:
            reopened.close()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
