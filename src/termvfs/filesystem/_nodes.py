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

"""Mutable node types making up the virtual filesystem tree.

Nodes hold no parent pointers; ownership is expressed only by a directory's
``children`` mapping, so the structure is a tree by construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

NodeType = Literal["file", "directory"]


def _empty_children() -> dict[str, FSNode]:
    return {}


@dataclass(slots=True)
class FileNode:
    """Leaf node holding opaque text content."""

    name: str
    content: str = ""

    @property
    def type(self) -> NodeType:
        return "file"


@dataclass(slots=True)
class DirectoryNode:
    """Directory node; ``children`` keeps insertion order for listings."""

    name: str
    children: dict[str, FSNode] = field(default_factory=_empty_children)

    @property
    def type(self) -> NodeType:
        return "directory"


type FSNode = FileNode | DirectoryNode


def new_root() -> DirectoryNode:
    """Return an empty root directory (the only node with an empty name)."""
    return DirectoryNode(name="")


def deep_copy(node: FSNode, *, name: str | None = None) -> FSNode:
    """Return an independent copy of ``node``, optionally renamed.

    Implemented with an explicit stack so arbitrarily deep trees copy without
    hitting the interpreter's recursion limit.
    """
    if isinstance(node, FileNode):
        return FileNode(name=node.name if name is None else name, content=node.content)

    copy_root = DirectoryNode(name=node.name if name is None else name)
    pending: list[tuple[DirectoryNode, DirectoryNode]] = [(node, copy_root)]
    while pending:
        source, target = pending.pop()
        for child_name, child in source.children.items():
            if isinstance(child, FileNode):
                target.children[child_name] = FileNode(
                    name=child.name, content=child.content
                )
            else:
                child_copy = DirectoryNode(name=child.name)
                target.children[child_name] = child_copy
                pending.append((child, child_copy))
    return copy_root


__all__ = [
    "DirectoryNode",
    "FSNode",
    "FileNode",
    "NodeType",
    "deep_copy",
    "new_root",
]
