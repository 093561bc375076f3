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

"""Redis-backed state store.

Each key lives at ``{namespace}:{key}`` as a plain string value. The client
is injected, so standalone and cluster clients both work::

    from redis import Redis

    store = RedisStateStore(client=Redis(host="localhost", port=6379))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from redis.exceptions import RedisError

from ..errors import StateStoreError

if TYPE_CHECKING:
    from redis import Redis
    from redis.cluster import RedisCluster


@dataclass(slots=True, frozen=True)
class RedisStateStore:
    """State store persisting serialized trees in Redis.

    Args:
        client: A Redis or RedisCluster client instance.
        namespace: Prefix applied to every key.
    """

    client: Redis | RedisCluster
    namespace: str = "termvfs"

    @classmethod
    def from_url(cls, url: str, *, namespace: str = "termvfs") -> RedisStateStore:
        """Build a store around ``redis.Redis.from_url(url)``."""
        from redis import Redis

        return cls(client=Redis.from_url(url), namespace=namespace)

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> str | None:
        try:
            value = self.client.get(self._key(key))
        except RedisError as error:
            raise StateStoreError(f"Redis get failed: {error}") from error
        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else str(value)

    def set(self, key: str, value: str) -> None:
        try:
            _ = self.client.set(self._key(key), value)
        except RedisError as error:
            raise StateStoreError(f"Redis set failed: {error}") from error


__all__ = ["RedisStateStore"]
