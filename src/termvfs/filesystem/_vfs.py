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

"""Virtual filesystem operations over a persisted node tree.

Example usage::

    from termvfs.filesystem import VirtualFilesystem
    from termvfs.storage import InMemoryStateStore

    vfs = VirtualFilesystem(InMemoryStateStore())
    assert vfs.write("notes.txt", "hello", cwd="/sandbox")
    assert vfs.read("/sandbox/notes.txt") == "hello"

The working directory is always supplied by the caller; the filesystem keeps
no notion of a current location. Operations never raise. Queries return
``None``/``False``/empty results for missing paths, and mutations return a
:class:`VfsResult` naming the failure. Every successful mutation writes the
whole serialized tree to the state store.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence

from ..errors import StateDecodeError, StateStoreError
from ..logging import StructuredLogger, get_logger
from ..storage import InMemoryStateStore, StateStore
from ._codec import PlainNode, decode_tree, encode_tree, serialize
from ._nodes import DirectoryNode, FileNode, FSNode, deep_copy, new_root
from ._path import ROOT_PATH, is_within, join_segments, resolve_path, resolve_segments
from ._tree import get_node, locate_parent
from ._types import (
    DEFAULT_HOME,
    DEFAULT_SNAPSHOT_ITEMS,
    DEFAULT_SNAPSHOT_PREVIEW,
    DEFAULT_STORAGE_KEY,
    MAX_SNAPSHOT_DEPTH,
    FileEntry,
    SnapshotEntry,
    VfsErrorKind,
    VfsResult,
)


def _entry(node: FSNode, segments: Sequence[str]) -> FileEntry:
    if isinstance(node, FileNode):
        return FileEntry(
            name=node.name,
            path=join_segments(segments),
            is_file=True,
            is_directory=False,
            size=len(node.content),
        )
    return FileEntry(
        name=node.name,
        path=join_segments(segments),
        is_file=False,
        is_directory=True,
        size=len(node.children),
    )


class VirtualFilesystem:
    """In-memory directory tree persisted through a :class:`StateStore`.

    The tree is hydrated once from ``store`` on construction. When the store
    has no usable state the tree starts with a single ``home`` directory.
    All operations run under one re-entrant lock, so an instance may be
    shared by several terminal sessions.
    """

    def __init__(
        self,
        store: StateStore | None = None,
        *,
        storage_key: str = DEFAULT_STORAGE_KEY,
        home: str = DEFAULT_HOME,
        logger: StructuredLogger | None = None,
    ) -> None:
        self._store: StateStore = store if store is not None else InMemoryStateStore()
        self._storage_key = storage_key
        self._home = resolve_path(home)
        self._lock = threading.RLock()
        self._logger = get_logger(
            __name__,
            logger_override=logger,
            context={"component": "vfs", "storage_key": storage_key},
        )
        self._root: DirectoryNode = new_root()
        self._hydrate()

    @property
    def home(self) -> str:
        """Directory created in a fresh tree and used as the default ``cd``."""
        return self._home

    @property
    def store(self) -> StateStore:
        return self._store

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _hydrate(self) -> None:
        payload: str | None
        try:
            payload = self._store.get(self._storage_key)
        except StateStoreError:
            self._logger.exception(
                "Could not read persisted filesystem; starting fresh.",
                event="vfs.hydrate.store_error",
            )
            payload = None

        if payload is not None:
            try:
                self._root = decode_tree(payload)
            except StateDecodeError as error:
                self._logger.warning(
                    "Persisted filesystem is corrupt; starting fresh.",
                    event="vfs.hydrate.corrupt",
                    context={"error": str(error)},
                )
            else:
                self._logger.info(
                    "Filesystem restored.",
                    event="vfs.hydrate.loaded",
                    context={"entries": len(self._root.children)},
                )
                return

        self._root = new_root()
        _ = self.mkdir(self._home)
        self._logger.info(
            "Filesystem initialized.",
            event="vfs.hydrate.initialized",
            context={"home": self._home},
        )

    def _persist(self) -> None:
        try:
            self._store.set(self._storage_key, encode_tree(self._root))
        except (StateStoreError, RecursionError):
            self._logger.exception(
                "Could not persist filesystem; keeping in-memory state.",
                event="vfs.persist.failed",
            )

    def _committed(self, operation: str, **context: object) -> VfsResult:
        self._persist()
        self._logger.debug(
            f"{operation} succeeded.", event=f"vfs.{operation}", context=context
        )
        return VfsResult.success()

    def dump(self) -> PlainNode:
        """Return the plain-data form of the whole tree."""
        with self._lock:
            return serialize(self._root)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self, path: str = ROOT_PATH, cwd: str = ROOT_PATH) -> tuple[FileEntry, ...]:
        """List a directory's children, or the file itself.

        Missing paths list as empty, like empty directories.
        """
        with self._lock:
            segments = resolve_segments(path, cwd)
            node = get_node(self._root, segments)
            if node is None:
                return ()
            if isinstance(node, FileNode):
                return (_entry(node, segments),)
            return tuple(
                _entry(child, (*segments, name)) for name, child in node.children.items()
            )

    def read(self, path: str, cwd: str = ROOT_PATH) -> str | None:
        """Return file content, or ``None`` for missing paths and directories."""
        with self._lock:
            node = get_node(self._root, resolve_segments(path, cwd))
            return node.content if isinstance(node, FileNode) else None

    def get_absolute_path(self, path: str, cwd: str = ROOT_PATH) -> str:
        return resolve_path(path, cwd)

    def exists(self, path: str, cwd: str = ROOT_PATH) -> bool:
        with self._lock:
            return get_node(self._root, resolve_segments(path, cwd)) is not None

    def is_directory(self, path: str, cwd: str = ROOT_PATH) -> bool:
        with self._lock:
            node = get_node(self._root, resolve_segments(path, cwd))
            return isinstance(node, DirectoryNode)

    def is_file(self, path: str, cwd: str = ROOT_PATH) -> bool:
        with self._lock:
            node = get_node(self._root, resolve_segments(path, cwd))
            return isinstance(node, FileNode)

    def get_snapshot(
        self,
        root_path: str = DEFAULT_HOME,
        max_items: int = DEFAULT_SNAPSHOT_ITEMS,
        max_preview: int = DEFAULT_SNAPSHOT_PREVIEW,
    ) -> list[SnapshotEntry]:
        """Flatten the subtree at ``root_path`` for the agent collaborator.

        Nodes are visited depth-first in listing order. The walk stops after
        ``max_items`` entries and never descends below ``MAX_SNAPSHOT_DEPTH``
        levels; both caps truncate silently.
        """
        with self._lock:
            segments = resolve_segments(root_path)
            start = get_node(self._root, segments)
            snapshot: list[SnapshotEntry] = []
            if start is None:
                return snapshot

            preview_length = max(max_preview, 0)
            pending: list[tuple[FSNode, tuple[str, ...], int]] = [(start, segments, 0)]
            while pending and len(snapshot) < max_items:
                node, node_segments, depth = pending.pop()
                path = join_segments(node_segments)
                if isinstance(node, FileNode):
                    snapshot.append(
                        SnapshotEntry(
                            path=path,
                            type="file",
                            size=len(node.content),
                            preview=node.content[:preview_length],
                        )
                    )
                    continue
                snapshot.append(SnapshotEntry(path=path, type="dir"))
                if depth >= MAX_SNAPSHOT_DEPTH:
                    continue
                pending.extend(
                    (child, (*node_segments, name), depth + 1)
                    for name, child in reversed(node.children.items())
                )
            return snapshot

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def write(self, path: str, content: str, cwd: str = ROOT_PATH) -> VfsResult:
        """Create or overwrite the file at ``path``.

        The parent directory must exist; an existing directory at ``path`` is
        never replaced.
        """
        with self._lock:
            segments = resolve_segments(path, cwd)
            if not segments:
                return VfsResult.failure(VfsErrorKind.ROOT)
            parent = locate_parent(self._root, segments)
            if isinstance(parent, VfsErrorKind):
                return VfsResult.failure(parent)

            name = segments[-1]
            existing = parent.children.get(name)
            if isinstance(existing, DirectoryNode):
                return VfsResult.failure(VfsErrorKind.TYPE_CONFLICT)
            if existing is not None:
                existing.content = content
            else:
                parent.children[name] = FileNode(name=name, content=content)
            return self._committed(
                "write", path=join_segments(segments), size=len(content)
            )

    def touch(self, path: str, cwd: str = ROOT_PATH) -> VfsResult:
        """Write an empty file at ``path``, truncating an existing one."""
        with self._lock:
            node = get_node(self._root, resolve_segments(path, cwd))
            if isinstance(node, DirectoryNode):
                return VfsResult.failure(VfsErrorKind.TYPE_CONFLICT)
            return self.write(path, "", cwd)

    def mkdir(self, path: str, cwd: str = ROOT_PATH) -> VfsResult:
        """Create ``path`` and any missing parents.

        Succeeds without changes when every segment already is a directory.
        """
        with self._lock:
            segments = resolve_segments(path, cwd)
            if not segments:
                return VfsResult.failure(VfsErrorKind.ROOT)

            current = self._root
            created = 0
            for index, segment in enumerate(segments):
                existing = current.children.get(segment)
                if isinstance(existing, FileNode):
                    last = index == len(segments) - 1
                    return VfsResult.failure(
                        VfsErrorKind.TYPE_CONFLICT if last else VfsErrorKind.NOT_A_DIRECTORY
                    )
                if existing is None:
                    existing = DirectoryNode(name=segment)
                    current.children[segment] = existing
                    created += 1
                current = existing

            if not created:
                return VfsResult.success()
            return self._committed("mkdir", path=join_segments(segments), created=created)

    def rm(self, path: str, cwd: str = ROOT_PATH) -> VfsResult:
        """Remove a file or an empty directory."""
        with self._lock:
            segments = resolve_segments(path, cwd)
            if not segments:
                return VfsResult.failure(VfsErrorKind.ROOT)
            parent = locate_parent(self._root, segments)
            if isinstance(parent, VfsErrorKind):
                return VfsResult.failure(parent)

            name = segments[-1]
            node = parent.children.get(name)
            if node is None:
                return VfsResult.failure(VfsErrorKind.NOT_FOUND)
            if isinstance(node, DirectoryNode) and node.children:
                return VfsResult.failure(VfsErrorKind.NOT_EMPTY)
            del parent.children[name]
            return self._committed("rm", path=join_segments(segments))

    def rmdir(self, path: str, cwd: str = ROOT_PATH) -> VfsResult:
        return self.rm(path, cwd)

    def _destination(
        self, dst: str, cwd: str
    ) -> tuple[DirectoryNode, tuple[str, ...]] | VfsErrorKind:
        segments = resolve_segments(dst, cwd)
        if not segments:
            return VfsErrorKind.ROOT
        parent = locate_parent(self._root, segments)
        if isinstance(parent, VfsErrorKind):
            return parent
        if segments[-1] in parent.children:
            return VfsErrorKind.ALREADY_EXISTS
        return parent, segments

    def mv(self, src: str, dst: str, cwd: str = ROOT_PATH) -> VfsResult:
        """Detach the node at ``src`` and re-attach it as ``dst``."""
        with self._lock:
            src_segments = resolve_segments(src, cwd)
            if not src_segments:
                return VfsResult.failure(VfsErrorKind.ROOT)
            src_parent = locate_parent(self._root, src_segments)
            if isinstance(src_parent, VfsErrorKind):
                return VfsResult.failure(src_parent)
            node = src_parent.children.get(src_segments[-1])
            if node is None:
                return VfsResult.failure(VfsErrorKind.NOT_FOUND)

            destination = self._destination(dst, cwd)
            if isinstance(destination, VfsErrorKind):
                return VfsResult.failure(destination)
            dst_parent, dst_segments = destination
            if isinstance(node, DirectoryNode) and is_within(dst_segments, src_segments):
                return VfsResult.failure(VfsErrorKind.INVALID_TARGET)

            del src_parent.children[src_segments[-1]]
            node.name = dst_segments[-1]
            dst_parent.children[node.name] = node
            return self._committed(
                "mv", src=join_segments(src_segments), dst=join_segments(dst_segments)
            )

    def cp(self, src: str, dst: str, cwd: str = ROOT_PATH) -> VfsResult:
        """Copy the subtree at ``src`` to ``dst``; the copy shares nothing."""
        with self._lock:
            src_segments = resolve_segments(src, cwd)
            node = get_node(self._root, src_segments)
            if node is None:
                return VfsResult.failure(VfsErrorKind.NOT_FOUND)

            destination = self._destination(dst, cwd)
            if isinstance(destination, VfsErrorKind):
                return VfsResult.failure(destination)
            dst_parent, dst_segments = destination

            copy = deep_copy(node, name=dst_segments[-1])
            dst_parent.children[copy.name] = copy
            return self._committed(
                "cp", src=join_segments(src_segments), dst=join_segments(dst_segments)
            )


__all__ = ["VirtualFilesystem"]
