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

"""Line interpreter dispatching to the built-in command table."""

from __future__ import annotations

from ..filesystem import VirtualFilesystem
from ..logging import StructuredLogger, get_logger
from ._commands import COMMANDS, CommandContext, CommandResult
from ._tokenizer import parse_command


class CommandInterpreter:
    """Run terminal lines against a shared :class:`VirtualFilesystem`.

    The interpreter holds no per-session state: callers pass the current
    working directory with every line and adopt ``CommandResult.cwd``.

    Example::

        interpreter = CommandInterpreter(vfs)
        result = interpreter.execute("cd /sandbox/notes", cwd="/sandbox")
        result.cwd  # '/sandbox/notes'
    """

    def __init__(
        self,
        vfs: VirtualFilesystem,
        *,
        home: str | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        self._vfs = vfs
        self._home = vfs.home if home is None else vfs.get_absolute_path(home)
        self._logger = get_logger(
            __name__, logger_override=logger, context={"component": "shell"}
        )

    @property
    def vfs(self) -> VirtualFilesystem:
        return self._vfs

    @property
    def home(self) -> str:
        return self._home

    def execute(self, line: str, cwd: str) -> CommandResult:
        """Interpret one raw input line relative to ``cwd``.

        Unknown command names produce a ``command not found`` line with
        ``recognized=False`` and touch neither the tree nor the cwd.
        """
        parsed = parse_command(line)
        if parsed.is_empty:
            return CommandResult(output=(), cwd=cwd)

        spec = COMMANDS.get(parsed.command)
        if spec is None:
            self._logger.info(
                "Unknown command.",
                event="shell.unknown_command",
                context={"command": parsed.command},
            )
            return CommandResult(
                output=(f"{parsed.command}: command not found",),
                cwd=cwd,
                recognized=False,
            )

        self._logger.debug(
            "Running command.",
            event="shell.command",
            context={"command": spec.name, "args": len(parsed.args), "cwd": cwd},
        )
        return spec.handler(
            CommandContext(vfs=self._vfs, cwd=cwd, home=self._home), parsed.args
        )


__all__ = ["CommandInterpreter"]
