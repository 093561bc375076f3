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

"""In-memory virtual filesystem backing the terminal.

Example usage::

    from termvfs.filesystem import VirtualFilesystem

    vfs = VirtualFilesystem()
    vfs.mkdir("/sandbox/notes")
    vfs.write("todo.txt", "buy milk", cwd="/sandbox/notes")
    [entry.name for entry in vfs.list("/sandbox/notes")]  # ['todo.txt']

Submodules:

- ``_path``: path resolution against a caller-held working directory
- ``_nodes`` / ``_tree``: node types and lookups
- ``_codec``: plain-data serializer used for persistence
- ``_vfs``: the :class:`VirtualFilesystem` operations surface
"""

from __future__ import annotations

from ._codec import (
    PlainNode,
    decode_tree,
    deserialize,
    deserialize_tree,
    encode_tree,
    serialize,
)
from ._nodes import DirectoryNode, FileNode, FSNode, NodeType, deep_copy, new_root
from ._path import ROOT_PATH, join_segments, resolve_path, resolve_segments
from ._tree import get_node, get_parent
from ._types import (
    DEFAULT_HOME,
    DEFAULT_SNAPSHOT_ITEMS,
    DEFAULT_SNAPSHOT_PREVIEW,
    DEFAULT_STORAGE_KEY,
    MAX_SNAPSHOT_DEPTH,
    FileEntry,
    SnapshotEntry,
    SnapshotType,
    VfsErrorKind,
    VfsResult,
)
from ._vfs import VirtualFilesystem

__all__ = [
    "DEFAULT_HOME",
    "DEFAULT_SNAPSHOT_ITEMS",
    "DEFAULT_SNAPSHOT_PREVIEW",
    "DEFAULT_STORAGE_KEY",
    "MAX_SNAPSHOT_DEPTH",
    "ROOT_PATH",
    "DirectoryNode",
    "FSNode",
    "FileEntry",
    "FileNode",
    "NodeType",
    "PlainNode",
    "SnapshotEntry",
    "SnapshotType",
    "VfsErrorKind",
    "VfsResult",
    "VirtualFilesystem",
    "decode_tree",
    "deep_copy",
    "deserialize",
    "deserialize_tree",
    "encode_tree",
    "get_node",
    "get_parent",
    "join_segments",
    "new_root",
    "resolve_path",
    "resolve_segments",
    "serialize",
]
