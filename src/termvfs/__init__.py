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

"""Virtual filesystem and command interpreter for in-browser terminals."""

from __future__ import annotations

from . import agent, config, errors, filesystem, shell, storage
from .filesystem import VfsErrorKind, VfsResult, VirtualFilesystem
from .shell import CommandInterpreter, CommandResult, TerminalSession

__all__ = [
    "CommandInterpreter",
    "CommandResult",
    "TerminalSession",
    "VfsErrorKind",
    "VfsResult",
    "VirtualFilesystem",
    "agent",
    "config",
    "errors",
    "filesystem",
    "shell",
    "storage",
]
