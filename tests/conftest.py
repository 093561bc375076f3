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

from __future__ import annotations

import pytest

from termvfs.filesystem import VirtualFilesystem
from termvfs.shell import CommandInterpreter, TerminalSession
from termvfs.storage import InMemoryStateStore


@pytest.fixture
def store() -> InMemoryStateStore:
    """Return an empty in-memory persistence medium."""

    return InMemoryStateStore()


@pytest.fixture
def vfs(store: InMemoryStateStore) -> VirtualFilesystem:
    """Return a fresh filesystem containing only ``/sandbox``."""

    return VirtualFilesystem(store)


@pytest.fixture
def interpreter(vfs: VirtualFilesystem) -> CommandInterpreter:
    return CommandInterpreter(vfs)


@pytest.fixture
def session(interpreter: CommandInterpreter) -> TerminalSession:
    return TerminalSession(interpreter)
