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

"""Built-in terminal commands.

Each handler receives a :class:`CommandContext` and the positional arguments
and returns a :class:`CommandResult`. Handlers turn failed filesystem results
into the exact error lines shown in the terminal; they never raise.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from ..filesystem import FileEntry, VirtualFilesystem

DIRECTORY_MARKER: Final[str] = "\U0001f4c1"
FILE_MARKER: Final[str] = "\U0001f4c4"


@dataclass(slots=True, frozen=True)
class CommandResult:
    """Output of one interpreted line.

    Attributes:
        output: Lines to render, in order.
        cwd: Working directory the caller should adopt.
        clear: True when the caller should discard all prior output.
        recognized: False when the command name is not built in; the caller
            may hand the line to the agent collaborator instead.
    """

    output: tuple[str, ...]
    cwd: str
    clear: bool = False
    recognized: bool = True


@dataclass(slots=True, frozen=True)
class CommandContext:
    vfs: VirtualFilesystem
    cwd: str
    home: str

    def done(self, *lines: str, cwd: str | None = None) -> CommandResult:
        return CommandResult(output=lines, cwd=self.cwd if cwd is None else cwd)


type CommandHandler = Callable[[CommandContext, tuple[str, ...]], CommandResult]


@dataclass(slots=True, frozen=True)
class CommandSpec:
    """Name, help text and handler of a built-in command."""

    name: str
    usage: str
    summary: str
    handler: CommandHandler

    @property
    def help_line(self) -> str:
        return f"  {self.usage.ljust(13)} - {self.summary}"


def _missing_operand(name: str, ctx: CommandContext) -> CommandResult:
    return ctx.done(f"{name}: missing operand")


def _format_entry(entry: FileEntry) -> str:
    if entry.is_directory:
        return f"{DIRECTORY_MARKER} {entry.name}/"
    return f"{FILE_MARKER} {entry.name}"


def _help(ctx: CommandContext, args: tuple[str, ...]) -> CommandResult:
    del args
    return ctx.done(
        "Available commands:", *(spec.help_line for spec in COMMANDS.values())
    )


def _pwd(ctx: CommandContext, args: tuple[str, ...]) -> CommandResult:
    del args
    return ctx.done(ctx.cwd)


def _ls(ctx: CommandContext, args: tuple[str, ...]) -> CommandResult:
    path = args[0] if args else "."
    return ctx.done(*(_format_entry(entry) for entry in ctx.vfs.list(path, ctx.cwd)))


def _cd(ctx: CommandContext, args: tuple[str, ...]) -> CommandResult:
    path = args[0] if args else ctx.home
    if not ctx.vfs.is_directory(path, ctx.cwd):
        return ctx.done(f"cd: {path}: No such directory")
    return ctx.done(cwd=ctx.vfs.get_absolute_path(path, ctx.cwd))


def _mkdir(ctx: CommandContext, args: tuple[str, ...]) -> CommandResult:
    if not args:
        return _missing_operand("mkdir", ctx)
    if ctx.vfs.mkdir(args[0], ctx.cwd):
        return ctx.done()
    return ctx.done(f"mkdir: cannot create directory '{args[0]}'")


def _rmdir(ctx: CommandContext, args: tuple[str, ...]) -> CommandResult:
    if not args:
        return _missing_operand("rmdir", ctx)
    if ctx.vfs.rmdir(args[0], ctx.cwd):
        return ctx.done()
    return ctx.done(f"rmdir: cannot remove '{args[0]}'")


def _touch(ctx: CommandContext, args: tuple[str, ...]) -> CommandResult:
    if not args:
        return _missing_operand("touch", ctx)
    if ctx.vfs.touch(args[0], ctx.cwd):
        return ctx.done()
    return ctx.done(f"touch: cannot create '{args[0]}'")


def _reader(name: str) -> CommandHandler:
    def handler(ctx: CommandContext, args: tuple[str, ...]) -> CommandResult:
        if not args:
            return _missing_operand(name, ctx)
        content = ctx.vfs.read(args[0], ctx.cwd)
        if content is None:
            return ctx.done(f"{name}: {args[0]}: No such file")
        return ctx.done(*content.split("\n"))

    return handler


def _echo(ctx: CommandContext, args: tuple[str, ...]) -> CommandResult:
    return ctx.done(" ".join(args))


def _write(ctx: CommandContext, args: tuple[str, ...]) -> CommandResult:
    if not args:
        return _missing_operand("write", ctx)
    if len(args) < 2:
        return ctx.done("write: usage: write <file> <content>")
    path = args[0]
    if ctx.vfs.write(path, " ".join(args[1:]), ctx.cwd):
        return ctx.done()
    return ctx.done(f"write: cannot write to '{path}'")


def _rm(ctx: CommandContext, args: tuple[str, ...]) -> CommandResult:
    if not args:
        return _missing_operand("rm", ctx)
    if ctx.vfs.rm(args[0], ctx.cwd):
        return ctx.done()
    return ctx.done(f"rm: cannot remove '{args[0]}'")


def _mv(ctx: CommandContext, args: tuple[str, ...]) -> CommandResult:
    if not args:
        return _missing_operand("mv", ctx)
    if len(args) < 2:
        return ctx.done("mv: usage: mv <src> <dst>")
    src, dst = args[0], args[1]
    if ctx.vfs.mv(src, dst, ctx.cwd):
        return ctx.done()
    return ctx.done(f"mv: cannot move '{src}' to '{dst}'")


def _cp(ctx: CommandContext, args: tuple[str, ...]) -> CommandResult:
    if not args:
        return _missing_operand("cp", ctx)
    if len(args) < 2:
        return ctx.done("cp: usage: cp <src> <dst>")
    src, dst = args[0], args[1]
    if ctx.vfs.cp(src, dst, ctx.cwd):
        return ctx.done()
    return ctx.done(f"cp: cannot copy '{src}' to '{dst}'")


def _clear(ctx: CommandContext, args: tuple[str, ...]) -> CommandResult:
    del args
    return CommandResult(output=(), cwd=ctx.cwd, clear=True)


_SPECS: Final[tuple[CommandSpec, ...]] = (
    CommandSpec("help", "help", "Show this help message", _help),
    CommandSpec("pwd", "pwd", "Print working directory", _pwd),
    CommandSpec("ls", "ls [path]", "List directory contents", _ls),
    CommandSpec("cd", "cd [path]", "Change directory", _cd),
    CommandSpec("mkdir", "mkdir <path>", "Create directory", _mkdir),
    CommandSpec("rmdir", "rmdir <path>", "Remove directory", _rmdir),
    CommandSpec("touch", "touch <file>", "Create empty file", _touch),
    CommandSpec("cat", "cat <file>", "Display file contents", _reader("cat")),
    CommandSpec("echo", "echo <text>", "Print text", _echo),
    CommandSpec(
        "write", "write <file> <content>", "Write content to file", _write
    ),
    CommandSpec("read", "read <file>", "Read file contents", _reader("read")),
    CommandSpec("rm", "rm <path>", "Remove file or directory", _rm),
    CommandSpec("mv", "mv <src> <dst>", "Move/rename file or directory", _mv),
    CommandSpec("cp", "cp <src> <dst>", "Copy file or directory", _cp),
    CommandSpec("clear", "clear", "Clear terminal", _clear),
)

COMMANDS: Final[Mapping[str, CommandSpec]] = MappingProxyType(
    {spec.name: spec for spec in _SPECS}
)
KNOWN_COMMANDS: Final[frozenset[str]] = frozenset(COMMANDS)


def is_known_command(name: str) -> bool:
    """Case-insensitive membership test against the built-in command set."""
    return name.lower() in KNOWN_COMMANDS


__all__ = [
    "COMMANDS",
    "DIRECTORY_MARKER",
    "FILE_MARKER",
    "KNOWN_COMMANDS",
    "CommandContext",
    "CommandHandler",
    "CommandResult",
    "CommandSpec",
    "is_known_command",
]
