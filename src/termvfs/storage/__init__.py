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

"""Persistence media for the serialized filesystem tree.

Backends:

- ``InMemoryStateStore``: process-local dictionary (default, tests)
- ``FileStateStore``: one JSON document on disk
- ``RedisStateStore``: string keys in Redis
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import ConfigError
from ._file import FileStateStore
from ._memory import InMemoryStateStore
from ._protocol import StateStore
from ._redis import RedisStateStore

if TYPE_CHECKING:
    from ..config import ShellConfig


def build_state_store(config: ShellConfig) -> StateStore:
    """Return the backend selected by ``config.store_backend``."""

    backend = config.store_backend
    if backend == "memory":
        return InMemoryStateStore()
    if backend == "file":
        return FileStateStore(Path(config.state_path).expanduser())
    if backend == "redis":
        return RedisStateStore.from_url(config.redis_url)
    raise ConfigError(f"Unknown store backend: {backend!r}")


__all__ = [
    "FileStateStore",
    "InMemoryStateStore",
    "RedisStateStore",
    "StateStore",
    "build_state_store",
]
