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

"""Terminal command language over the virtual filesystem."""

from __future__ import annotations

from ._commands import (
    COMMANDS,
    DIRECTORY_MARKER,
    FILE_MARKER,
    KNOWN_COMMANDS,
    CommandContext,
    CommandResult,
    CommandSpec,
    is_known_command,
)
from ._interpreter import CommandInterpreter
from ._session import DEFAULT_HISTORY_LINES, HistoryEntry, TerminalSession
from ._tokenizer import ParsedCommand, parse_command, tokenize

__all__ = [
    "COMMANDS",
    "DEFAULT_HISTORY_LINES",
    "DIRECTORY_MARKER",
    "FILE_MARKER",
    "KNOWN_COMMANDS",
    "CommandContext",
    "CommandInterpreter",
    "CommandResult",
    "CommandSpec",
    "HistoryEntry",
    "ParsedCommand",
    "TerminalSession",
    "is_known_command",
    "parse_command",
    "tokenize",
]
