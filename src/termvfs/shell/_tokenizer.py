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

"""Command line tokenizer.

Whitespace separates tokens except inside a quoted region. A ``'`` or ``"``
opens a region that lasts until the same character appears again; the
quote characters themselves are dropped. There are no escapes, and an
unterminated quote simply runs to the end of the line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

_QUOTES: Final[frozenset[str]] = frozenset({"'", '"'})


@dataclass(slots=True, frozen=True)
class ParsedCommand:
    """Lower-cased command name plus positional arguments."""

    command: str
    args: tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return not self.command


def tokenize(line: str) -> list[str]:
    """Split ``line`` into tokens.

    Examples:
        >>> tokenize('write notes.txt "buy milk"')
        ['write', 'notes.txt', 'buy milk']
        >>> tokenize("echo 'unterminated text")
        ['echo', 'unterminated text']
    """
    tokens: list[str] = []
    current: list[str] = []
    quote: str | None = None

    for char in line.strip():
        if quote is None and char in _QUOTES:
            quote = char
        elif char == quote:
            quote = None
        elif quote is None and char.isspace():
            if current:
                tokens.append("".join(current))
                current.clear()
        else:
            current.append(char)

    if current:
        tokens.append("".join(current))
    return tokens


def parse_command(line: str) -> ParsedCommand:
    """Tokenize ``line`` and split off the lower-cased command name."""
    tokens = tokenize(line)
    if not tokens:
        return ParsedCommand(command="", args=())
    return ParsedCommand(command=tokens[0].lower(), args=tuple(tokens[1:]))


__all__ = ["ParsedCommand", "parse_command", "tokenize"]
