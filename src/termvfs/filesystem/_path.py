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

"""Path resolution against a caller-held working directory.

Paths never fail to resolve: every input, however odd, maps onto a canonical
absolute segment list. ``..`` above the root is absorbed.

Functions:
    resolve_segments: Resolve ``path`` against ``cwd`` into canonical segments
    join_segments: Render canonical segments as an absolute path string
    resolve_path: ``join_segments(resolve_segments(path, cwd))``
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

SEPARATOR: Final[str] = "/"
ROOT_PATH: Final[str] = "/"


def _split(path: str) -> list[str]:
    return [segment for segment in path.split(SEPARATOR) if segment]


def resolve_segments(path: str, cwd: str = ROOT_PATH) -> tuple[str, ...]:
    """Resolve ``path`` relative to ``cwd`` into canonical segments.

    Absolute paths ignore ``cwd``. Empty segments collapse, ``.`` is dropped
    and ``..`` pops the previous segment when there is one.

    Examples:
        >>> resolve_segments("./a/../b", "/x")
        ('x', 'b')
        >>> resolve_segments("../../..", "/a")
        ()
        >>> resolve_segments("", "/home/user")
        ('home', 'user')
    """
    if path.startswith(SEPARATOR):
        raw = _split(path)
    else:
        raw = [*_split(cwd), *_split(path)]

    resolved: list[str] = []
    for segment in raw:
        if segment == "..":
            if resolved:
                _ = resolved.pop()
        elif segment != ".":
            resolved.append(segment)
    return tuple(resolved)


def join_segments(segments: Sequence[str]) -> str:
    """Render segments as an absolute path (``()`` renders as ``/``)."""
    return SEPARATOR + SEPARATOR.join(segments)


def resolve_path(path: str, cwd: str = ROOT_PATH) -> str:
    """Return the canonical absolute path string for ``path`` under ``cwd``."""
    return join_segments(resolve_segments(path, cwd))


def is_within(segments: Sequence[str], ancestor: Sequence[str]) -> bool:
    """True when ``segments`` equals ``ancestor`` or lies underneath it."""
    return tuple(segments[: len(ancestor)]) == tuple(ancestor)


__all__ = [
    "ROOT_PATH",
    "SEPARATOR",
    "is_within",
    "join_segments",
    "resolve_path",
    "resolve_segments",
]
