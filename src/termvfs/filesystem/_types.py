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

"""Result, listing and snapshot types returned by the virtual filesystem.

Types:

- ``VfsErrorKind`` / ``VfsResult``: outcome of mutating operations
- ``FileEntry``: immutable listing view of a node
- ``SnapshotEntry``: one row of the flattened agent snapshot

Constants:

- ``DEFAULT_HOME``: directory created in a fresh tree (``/sandbox``)
- ``DEFAULT_STORAGE_KEY``: persistence key of the serialized tree
- ``MAX_SNAPSHOT_DEPTH``: deepest level visited by ``get_snapshot`` (10)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Literal

DEFAULT_HOME: Final[str] = "/sandbox"
DEFAULT_STORAGE_KEY: Final[str] = "terminal.vfs.v1"
DEFAULT_SNAPSHOT_ITEMS: Final[int] = 100
DEFAULT_SNAPSHOT_PREVIEW: Final[int] = 120
MAX_SNAPSHOT_DEPTH: Final[int] = 10

SnapshotType = Literal["file", "dir"]


class VfsErrorKind(Enum):
    """Why a filesystem operation failed.

    NOT_FOUND: the path (or the source of a move/copy) does not exist
    NOT_A_DIRECTORY: a segment that must be a directory is a file
    TYPE_CONFLICT: a node of the other type already holds the name
    NOT_EMPTY: the directory still has children
    ALREADY_EXISTS: the destination of a move/copy is taken
    ROOT: the operation would remove, replace or relocate the root
    INVALID_TARGET: a directory cannot be moved into its own subtree
    """

    NOT_FOUND = "not_found"
    NOT_A_DIRECTORY = "not_a_directory"
    TYPE_CONFLICT = "type_conflict"
    NOT_EMPTY = "not_empty"
    ALREADY_EXISTS = "already_exists"
    ROOT = "root"
    INVALID_TARGET = "invalid_target"


@dataclass(slots=True, frozen=True)
class VfsResult:
    """Outcome of a mutating operation.

    Truthy exactly when the operation succeeded, so it can stand in for the
    plain success flag::

        if not vfs.rm("/d", cwd):
            print("rm failed")
    """

    ok: bool
    error: VfsErrorKind | None = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls) -> VfsResult:
        return _SUCCESS

    @classmethod
    def failure(cls, error: VfsErrorKind) -> VfsResult:
        return cls(ok=False, error=error)


_SUCCESS: Final[VfsResult] = VfsResult(ok=True)


@dataclass(slots=True, frozen=True)
class FileEntry:
    """Read-only view of a node returned by ``VirtualFilesystem.list()``.

    Attributes:
        name: Entry name without path (e.g., "todo.txt").
        path: Canonical absolute path (e.g., "/sandbox/todo.txt").
        is_file: True for files.
        is_directory: True for directories.
        size: Content length for files, child count for directories.
    """

    name: str
    path: str
    is_file: bool
    is_directory: bool
    size: int


@dataclass(slots=True, frozen=True)
class SnapshotEntry:
    """One flattened row of ``VirtualFilesystem.get_snapshot()``.

    ``size`` and ``preview`` are only set for files.
    """

    path: str
    type: SnapshotType
    size: int | None = None
    preview: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Plain-data form that omits the absent optional keys."""
        data: dict[str, object] = {"path": self.path, "type": self.type}
        if self.size is not None:
            data["size"] = self.size
        if self.preview is not None:
            data["preview"] = self.preview
        return data


__all__ = [
    "DEFAULT_HOME",
    "DEFAULT_SNAPSHOT_ITEMS",
    "DEFAULT_SNAPSHOT_PREVIEW",
    "DEFAULT_STORAGE_KEY",
    "MAX_SNAPSHOT_DEPTH",
    "FileEntry",
    "SnapshotEntry",
    "SnapshotType",
    "VfsErrorKind",
    "VfsResult",
]
