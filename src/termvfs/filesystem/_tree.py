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

"""Lookups over the node tree.

These helpers only read. Structural changes happen in
:class:`termvfs.filesystem.VirtualFilesystem` so that every mutation is
followed by persistence.
"""

from __future__ import annotations

from collections.abc import Sequence

from ._nodes import DirectoryNode, FileNode, FSNode
from ._types import VfsErrorKind


def locate(root: DirectoryNode, segments: Sequence[str]) -> FSNode | VfsErrorKind:
    """Walk ``segments`` from ``root``.

    Returns the node, ``NOT_A_DIRECTORY`` when a file sits where a directory
    is needed, or ``NOT_FOUND`` when a segment is missing.
    """
    current: FSNode = root
    for segment in segments:
        if isinstance(current, FileNode):
            return VfsErrorKind.NOT_A_DIRECTORY
        child = current.children.get(segment)
        if child is None:
            return VfsErrorKind.NOT_FOUND
        current = child
    return current


def locate_parent(
    root: DirectoryNode, segments: Sequence[str]
) -> DirectoryNode | VfsErrorKind:
    """Return the directory that owns the last segment.

    The root is its own parent for the empty segment list.
    """
    if not segments:
        return root
    parent = locate(root, segments[:-1])
    if isinstance(parent, FileNode):
        return VfsErrorKind.NOT_A_DIRECTORY
    return parent


def get_node(root: DirectoryNode, segments: Sequence[str]) -> FSNode | None:
    node = locate(root, segments)
    return None if isinstance(node, VfsErrorKind) else node


def get_parent(root: DirectoryNode, segments: Sequence[str]) -> DirectoryNode | None:
    parent = locate_parent(root, segments)
    return None if isinstance(parent, VfsErrorKind) else parent


__all__ = ["get_node", "get_parent", "locate", "locate_parent"]
