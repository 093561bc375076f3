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

"""Dictionary-backed state store."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field


def _empty_values() -> dict[str, str]:
    return {}


@dataclass(slots=True)
class InMemoryStateStore:
    """Process-local store; state lives as long as the instance."""

    _values: dict[str, str] = field(default_factory=_empty_values)

    @classmethod
    def seeded(cls, values: Mapping[str, str]) -> InMemoryStateStore:
        """Return a store pre-populated with ``values``."""
        return cls(_values=dict(values))

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def keys(self) -> tuple[str, ...]:
        return tuple(self._values)


__all__ = ["InMemoryStateStore"]
