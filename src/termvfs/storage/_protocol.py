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

"""Persistence medium protocol.

The virtual filesystem keeps its whole tree under one string key. Backends
only need to get and set strings; they raise
:class:`termvfs.errors.StateStoreError` when the medium itself fails.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class StateStore(Protocol):
    """Durable string-keyed store holding serialized filesystem trees."""

    def get(self, key: str) -> str | None:
        """Return the value stored under ``key`` or ``None`` when absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...


__all__ = ["StateStore"]
