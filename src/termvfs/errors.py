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

"""Base exception hierarchy for :mod:`termvfs`.

Filesystem operations never raise: they report failures through
:class:`termvfs.filesystem.VfsResult`. The exceptions below belong to the
layers around the tree (persistence and configuration) and are caught at the
boundaries where a degraded result is acceptable.
"""

from __future__ import annotations


class TermVfsError(Exception):
    """Base class for all termvfs exceptions.

    Example:
        Catch any library-specific error::

            try:
                store.set("terminal.vfs.v1", payload)
            except TermVfsError as e:
                logger.error("Library error: %s", e)
    """


class StateStoreError(TermVfsError, RuntimeError):
    """Raised when the persistence medium cannot be read or written.

    Backends wrap their native failures (``OSError`` for files, redis
    connection errors, ...) in this type so callers handle every backend
    the same way.
    """


class StateDecodeError(TermVfsError, ValueError):
    """Raised when a persisted payload does not describe a directory tree."""


class ConfigError(TermVfsError, ValueError):
    """Raised when the termvfs configuration is invalid."""


__all__ = [
    "ConfigError",
    "StateDecodeError",
    "StateStoreError",
    "TermVfsError",
]
