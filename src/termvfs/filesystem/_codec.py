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

"""Plain-data codec for the node tree.

Files serialize as ``{"type": "file", "name": ..., "content": ...}``.
Directories serialize as ``{"type": "directory", "name": ..., "children":
[[name, child], ...]}``; children are an ordered list of pairs rather than an
object so listing order survives media that do not preserve key order.

Decoding is lenient: malformed ``children`` entries are skipped and a missing
``content`` becomes the empty string. Only a payload whose top level is not a
directory mapping is rejected, with :class:`termvfs.errors.StateDecodeError`.

Both directions walk the tree with an explicit stack, so nesting depth is not
bounded by Python's recursion limit.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any, cast

from ..errors import StateDecodeError
from ._nodes import DirectoryNode, FileNode, FSNode

type PlainNode = dict[str, Any]


def _file_data(node: FileNode) -> PlainNode:
    return {"type": "file", "name": node.name, "content": node.content}


def _directory_data(node: DirectoryNode) -> PlainNode:
    return {"type": "directory", "name": node.name, "children": []}


def serialize(node: FSNode) -> PlainNode:
    """Return the plain-data form of ``node`` and its whole subtree."""
    if isinstance(node, FileNode):
        return _file_data(node)

    top = _directory_data(node)
    pending: list[tuple[DirectoryNode, PlainNode]] = [(node, top)]
    while pending:
        directory, data = pending.pop()
        children = cast(list[list[object]], data["children"])
        for name, child in directory.children.items():
            if isinstance(child, FileNode):
                children.append([name, _file_data(child)])
            else:
                child_data = _directory_data(child)
                children.append([name, child_data])
                pending.append((child, child_data))
    return top


def _is_pair(entry: object) -> bool:
    return (
        isinstance(entry, Sequence)
        and not isinstance(entry, str | bytes)
        and len(cast(Sequence[object], entry)) == 2
    )


def _decode_leaf(data: Mapping[str, object], name: str) -> FSNode:
    if data.get("type") == "file":
        content = data.get("content")
        return FileNode(name=name, content=content if isinstance(content, str) else "")
    return DirectoryNode(name=name)


def deserialize(data: Mapping[str, object]) -> FSNode:
    """Rebuild a node (and its subtree) from plain data."""
    raw_name = data.get("name")
    top = _decode_leaf(data, raw_name if isinstance(raw_name, str) else "")
    if isinstance(top, FileNode):
        return top

    pending: list[tuple[Mapping[str, object], DirectoryNode]] = [(data, top)]
    while pending:
        source, directory = pending.pop()
        entries = source.get("children")
        if not isinstance(entries, list):
            continue
        for entry in cast(list[object], entries):
            if not _is_pair(entry):
                continue
            name, child_data = cast(Sequence[object], entry)
            if not isinstance(name, str) or not name or not isinstance(child_data, Mapping):
                continue
            child_mapping = cast(Mapping[str, object], child_data)
            child = _decode_leaf(child_mapping, name)
            directory.children[name] = child
            if isinstance(child, DirectoryNode):
                pending.append((child_mapping, child))
    return top


def deserialize_tree(data: object) -> DirectoryNode:
    """Rebuild a root directory, rejecting payloads that are not directories."""
    if not isinstance(data, Mapping):
        msg = f"Persisted tree must be a mapping, got {type(data).__name__}."
        raise StateDecodeError(msg)
    root = deserialize(cast(Mapping[str, object], data))
    if not isinstance(root, DirectoryNode):
        raise StateDecodeError("Persisted tree root must be a directory.")
    root.name = ""
    return root


def encode_tree(root: DirectoryNode) -> str:
    """Serialize ``root`` to the JSON text stored in the persistence medium."""
    return json.dumps(serialize(root), separators=(",", ":"), ensure_ascii=False)


def decode_tree(payload: str) -> DirectoryNode:
    """Parse JSON text written by :func:`encode_tree`."""
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, RecursionError) as error:
        raise StateDecodeError(f"Persisted tree is not valid JSON: {error}") from error
    return deserialize_tree(data)


__all__ = [
    "PlainNode",
    "decode_tree",
    "deserialize",
    "deserialize_tree",
    "encode_tree",
    "serialize",
]
