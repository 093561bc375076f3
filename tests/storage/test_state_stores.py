# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for the persistence media backing the filesystem."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from termvfs.config import ShellConfig
from termvfs.errors import ConfigError, StateStoreError
from termvfs.filesystem import DEFAULT_STORAGE_KEY, VirtualFilesystem
from termvfs.storage import (
    FileStateStore,
    InMemoryStateStore,
    RedisStateStore,
    StateStore,
    build_state_store,
)


class _FakeRedis:
    """Minimal stand-in for a redis client storing bytes like the real one."""

    def __init__(self, *, fail: bool = False) -> None:
        self.data: dict[str, bytes] = {}
        self.fail = fail

    def get(self, key: str) -> bytes | None:
        if self.fail:
            raise RedisConnectionError("connection refused")
        return self.data.get(key)

    def set(self, key: str, value: str) -> bool:
        if self.fail:
            raise RedisConnectionError("connection refused")
        self.data[key] = value.encode("utf-8")
        return True


class TestInMemoryStateStore:
    def test_get_missing(self) -> None:
        assert InMemoryStateStore().get("absent") is None

    def test_set_then_get(self) -> None:
        store = InMemoryStateStore()

        store.set("k", "v")
        store.set("k", "w")

        assert store.get("k") == "w"
        assert store.keys() == ("k",)

    def test_seeded_copies_values(self) -> None:
        values = {"k": "v"}
        store = InMemoryStateStore.seeded(values)
        values["k"] = "changed"

        assert store.get("k") == "v"

    def test_satisfies_protocol(self) -> None:
        assert isinstance(InMemoryStateStore(), StateStore)


class TestFileStateStore:
    def test_missing_file_reads_none(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path / "state.json")

        assert store.get(DEFAULT_STORAGE_KEY) is None

    def test_round_trip_creates_parents(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "state.json"
        store = FileStateStore(path)

        store.set("a", "1")
        store.set("b", "2")

        assert store.get("a") == "1"
        assert json.loads(path.read_text(encoding="utf-8")) == {"a": "1", "b": "2"}
        assert store.lock_path.exists()

    def test_survives_new_instance(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        first = VirtualFilesystem(FileStateStore(path))
        assert first.write("/sandbox/kept.txt", "across restarts")

        second = VirtualFilesystem(FileStateStore(path))

        assert second.read("/sandbox/kept.txt") == "across restarts"

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        _ = path.write_text("{oops", encoding="utf-8")

        with pytest.raises(StateStoreError):
            _ = FileStateStore(path).get("k")

    def test_non_object_document_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        _ = path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(StateStoreError):
            _ = FileStateStore(path).get("k")

    def test_non_string_values_are_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        _ = path.write_text(json.dumps({"k": 1, "ok": "yes"}), encoding="utf-8")

        store = FileStateStore(path)

        assert store.get("k") is None
        assert store.get("ok") == "yes"

    def test_unwritable_location_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        _ = blocker.write_text("", encoding="utf-8")

        with pytest.raises(StateStoreError):
            FileStateStore(blocker / "state.json").set("k", "v")

    def test_corrupt_file_falls_back_to_fresh_tree(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        _ = path.write_text("garbage", encoding="utf-8")

        vfs = VirtualFilesystem(FileStateStore(path))

        assert vfs.is_directory("/sandbox")

    def test_write_replaces_corrupt_document(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / "state.json"
        _ = path.write_text("{corrupt", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            vfs = VirtualFilesystem(FileStateStore(path))
            assert vfs.write("/sandbox/todo.txt", "buy milk")

        reopened = VirtualFilesystem(FileStateStore(path))

        assert reopened.read("/sandbox/todo.txt") == "buy milk"
        assert any(
            getattr(record, "event", None) == "storage.file.reset"
            for record in caplog.records
        )

    def test_set_overwrites_non_object_document(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        _ = path.write_text("[1, 2]", encoding="utf-8")
        store = FileStateStore(path)

        store.set("k", "v")

        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}
        assert store.get("k") == "v"

    def test_get_on_missing_file_creates_nothing(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path / "absent" / "state.json")

        assert store.get("k") is None
        assert not (tmp_path / "absent").exists()

    @pytest.mark.skipif(sys.platform == "win32", reason="flock is POSIX only")
    def test_get_shares_the_lock_with_other_readers(self, tmp_path: Path) -> None:
        import fcntl

        store = FileStateStore(tmp_path / "state.json")
        store.set("k", "v")

        with store.lock_path.open("a", encoding="utf-8") as other_reader:
            fcntl.flock(other_reader.fileno(), fcntl.LOCK_SH)
            try:
                assert store.get("k") == "v"
            finally:
                fcntl.flock(other_reader.fileno(), fcntl.LOCK_UN)


class TestRedisStateStore:
    def test_keys_are_namespaced(self) -> None:
        client = _FakeRedis()
        store = RedisStateStore(client=client)  # type: ignore[arg-type]

        store.set(DEFAULT_STORAGE_KEY, "payload")

        assert list(client.data) == [f"termvfs:{DEFAULT_STORAGE_KEY}"]
        assert store.get(DEFAULT_STORAGE_KEY) == "payload"

    def test_custom_namespace(self) -> None:
        client = _FakeRedis()
        store = RedisStateStore(client=client, namespace="tenant-1")  # type: ignore[arg-type]

        store.set("k", "v")

        assert "tenant-1:k" in client.data

    def test_missing_key(self) -> None:
        store = RedisStateStore(client=_FakeRedis())  # type: ignore[arg-type]

        assert store.get("absent") is None

    def test_errors_are_wrapped(self) -> None:
        store = RedisStateStore(client=_FakeRedis(fail=True))  # type: ignore[arg-type]

        with pytest.raises(StateStoreError):
            _ = store.get("k")
        with pytest.raises(StateStoreError):
            store.set("k", "v")

    def test_filesystem_survives_unreachable_redis(self) -> None:
        vfs = VirtualFilesystem(RedisStateStore(client=_FakeRedis(fail=True)))  # type: ignore[arg-type]

        assert vfs.write("/sandbox/f", "in memory only")
        assert vfs.read("/sandbox/f") == "in memory only"

    def test_from_url_builds_client(self) -> None:
        store = RedisStateStore.from_url("redis://localhost:6379/3", namespace="t")

        assert store.namespace == "t"
        assert store.client.connection_pool.connection_kwargs["db"] == 3


class TestBuildStateStore:
    def test_memory(self) -> None:
        assert isinstance(build_state_store(ShellConfig()), InMemoryStateStore)

    def test_file_expands_user(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))

        store = build_state_store(
            ShellConfig(store_backend="file", state_path="~/state.json")
        )

        assert isinstance(store, FileStateStore)
        assert store.path == tmp_path / "state.json"

    def test_redis(self) -> None:
        store = build_state_store(
            ShellConfig(store_backend="redis", redis_url="redis://localhost:6379/0")
        )

        assert isinstance(store, RedisStateStore)

    def test_unknown_backend(self) -> None:
        config = ShellConfig(store_backend="memcached")  # type: ignore[arg-type]

        with pytest.raises(ConfigError):
            _ = build_state_store(config)
