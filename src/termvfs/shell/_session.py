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

"""Caller-side terminal state: working directory and scrollback history."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Final

from ._commands import CommandResult
from ._interpreter import CommandInterpreter

DEFAULT_HISTORY_LINES: Final[int] = 20


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, frozen=True)
class HistoryEntry:
    """One executed line with the output it produced."""

    command: str
    output: tuple[str, ...]
    cwd: str
    timestamp: datetime

    def lines(self) -> tuple[str, ...]:
        return (f"$ {self.command}", *self.output)


class TerminalSession:
    """One terminal window driving a shared interpreter.

    The session owns what the terminal UI owns: the current directory and
    the visible history. ``clear`` wipes the history instead of adding to it.
    """

    def __init__(
        self,
        interpreter: CommandInterpreter,
        *,
        cwd: str | None = None,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._interpreter = interpreter
        self._cwd = (
            interpreter.home
            if cwd is None
            else interpreter.vfs.get_absolute_path(cwd)
        )
        self._now = now
        self._history: list[HistoryEntry] = []

    @property
    def cwd(self) -> str:
        return self._cwd

    @property
    def interpreter(self) -> CommandInterpreter:
        return self._interpreter

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._history)

    def run(self, line: str) -> CommandResult:
        """Execute ``line``, record it, and adopt the resulting cwd."""
        result = self._interpreter.execute(line, self._cwd)
        if result.clear:
            self._history.clear()
        elif line.strip():
            self._history.append(
                HistoryEntry(
                    command=line.strip(),
                    output=result.output,
                    cwd=self._cwd,
                    timestamp=self._now(),
                )
            )
        self._cwd = result.cwd
        return result

    def history_lines(self, limit: int = DEFAULT_HISTORY_LINES) -> list[str]:
        """Most recent ``limit`` rendered history lines, oldest first."""
        if limit <= 0:
            return []
        lines = [line for entry in self._history for line in entry.lines()]
        return lines[-limit:]


__all__ = ["DEFAULT_HISTORY_LINES", "HistoryEntry", "TerminalSession"]
