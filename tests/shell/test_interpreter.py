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

"""Interpreter tests covering every built-in command and its error lines."""

from __future__ import annotations

import logging

import pytest

from termvfs.filesystem import VirtualFilesystem
from termvfs.shell import (
    COMMANDS,
    DIRECTORY_MARKER,
    FILE_MARKER,
    KNOWN_COMMANDS,
    CommandInterpreter,
    CommandResult,
    is_known_command,
)
from termvfs.storage import InMemoryStateStore

HOME = "/sandbox"


def _run(interpreter: CommandInterpreter, line: str, cwd: str = HOME) -> CommandResult:
    return interpreter.execute(line, cwd)


def _output(interpreter: CommandInterpreter, line: str, cwd: str = HOME) -> list[str]:
    return list(_run(interpreter, line, cwd).output)


class TestScenario:
    def test_notes_workflow(self, interpreter: CommandInterpreter) -> None:
        cwd = HOME
        for line in (
            "mkdir /sandbox/notes",
            'write /sandbox/notes/todo.txt "buy milk"',
            "cd /sandbox/notes",
        ):
            result = _run(interpreter, line, cwd)
            assert result.output == ()
            cwd = result.cwd

        assert cwd == "/sandbox/notes"
        assert _output(interpreter, "ls", cwd) == [f"{FILE_MARKER} todo.txt"]
        assert _output(interpreter, "cat todo.txt", cwd) == ["buy milk"]

    def test_unknown_command(
        self, interpreter: CommandInterpreter, caplog: pytest.LogCaptureFixture
    ) -> None:
        before = interpreter.vfs.dump()

        with caplog.at_level(logging.INFO):
            result = _run(interpreter, "FooBar baz", "/sandbox")

        assert result.output == ("foobar: command not found",)
        assert result.cwd == "/sandbox"
        assert not result.recognized
        assert interpreter.vfs.dump() == before
        assert any(
            getattr(record, "event", None) == "shell.unknown_command"
            for record in caplog.records
        )

    def test_blank_line_is_noop(self, interpreter: CommandInterpreter) -> None:
        result = _run(interpreter, "   ", "/sandbox")

        assert result == CommandResult(output=(), cwd="/sandbox")

    def test_command_names_are_case_insensitive(
        self, interpreter: CommandInterpreter
    ) -> None:
        assert _output(interpreter, "PWD") == [HOME]


class TestCommandTable:
    def test_known_commands(self) -> None:
        assert KNOWN_COMMANDS == {
            "help", "pwd", "ls", "cd", "mkdir", "rmdir", "touch", "cat",
            "echo", "write", "read", "rm", "mv", "cp", "clear",
        }

    def test_is_known_command(self) -> None:
        assert is_known_command("LS")
        assert not is_known_command("vim")

    def test_help_lists_every_command(self, interpreter: CommandInterpreter) -> None:
        output = _output(interpreter, "help")

        assert output[0] == "Available commands:"
        assert len(output) == len(COMMANDS) + 1
        assert "  help          - Show this help message" in output
        assert "  ls [path]     - List directory contents" in output
        assert "  write <file> <content> - Write content to file" in output


class TestNavigation:
    def test_pwd(self, interpreter: CommandInterpreter) -> None:
        assert _output(interpreter, "pwd", "/sandbox") == ["/sandbox"]

    def test_cd_relative_and_parent(self, interpreter: CommandInterpreter) -> None:
        assert _run(interpreter, "mkdir a/b").output == ()

        assert _run(interpreter, "cd a/b").cwd == "/sandbox/a/b"
        assert _run(interpreter, "cd ..", "/sandbox/a/b").cwd == "/sandbox/a"
        assert _run(interpreter, "cd /").cwd == "/"

    def test_cd_without_argument_goes_home(self, interpreter: CommandInterpreter) -> None:
        assert _run(interpreter, "cd", "/").cwd == HOME

    def test_cd_missing(self, interpreter: CommandInterpreter) -> None:
        result = _run(interpreter, "cd nowhere")

        assert result.output == ("cd: nowhere: No such directory",)
        assert result.cwd == HOME

    def test_cd_into_file(self, interpreter: CommandInterpreter) -> None:
        _ = _run(interpreter, "touch f")

        assert _output(interpreter, "cd f") == ["cd: f: No such directory"]

    def test_custom_home(self) -> None:
        vfs = VirtualFilesystem(InMemoryStateStore())
        assert vfs.mkdir("/home/guest")
        interpreter = CommandInterpreter(vfs, home="/home/guest")

        assert interpreter.home == "/home/guest"
        assert _run(interpreter, "cd", "/").cwd == "/home/guest"


class TestListing:
    def test_ls_markers(self, interpreter: CommandInterpreter) -> None:
        _ = _run(interpreter, "mkdir docs")
        _ = _run(interpreter, "touch readme")

        assert _output(interpreter, "ls") == [
            f"{DIRECTORY_MARKER} docs/",
            f"{FILE_MARKER} readme",
        ]

    def test_ls_path_argument(self, interpreter: CommandInterpreter) -> None:
        assert _output(interpreter, "ls /", "/sandbox") == [f"{DIRECTORY_MARKER} sandbox/"]

    def test_ls_missing_prints_nothing(self, interpreter: CommandInterpreter) -> None:
        assert _output(interpreter, "ls missing") == []


class TestFileCommands:
    def test_echo(self, interpreter: CommandInterpreter) -> None:
        assert _output(interpreter, "echo hello   big 'wide world'") == [
            "hello big wide world"
        ]
        assert _output(interpreter, "echo") == [""]

    def test_write_joins_remaining_arguments(self, interpreter: CommandInterpreter) -> None:
        assert _output(interpreter, "write f.txt one two three") == []

        assert interpreter.vfs.read("/sandbox/f.txt") == "one two three"

    def test_cat_splits_lines(self, interpreter: CommandInterpreter) -> None:
        assert interpreter.vfs.write("/sandbox/multi", "a\nb\n")

        assert _output(interpreter, "cat multi") == ["a", "b", ""]

    def test_read_is_cat(self, interpreter: CommandInterpreter) -> None:
        _ = _run(interpreter, "write f hi")

        assert _output(interpreter, "read f") == ["hi"]

    def test_touch_empty_file(self, interpreter: CommandInterpreter) -> None:
        assert _output(interpreter, "touch new") == []
        assert _output(interpreter, "cat new") == [""]

    def test_touch_truncates(self, interpreter: CommandInterpreter) -> None:
        _ = _run(interpreter, "write notes.txt old text")

        assert _output(interpreter, "touch notes.txt") == []
        assert _output(interpreter, "cat notes.txt") == [""]

    def test_rm_mv_cp(self, interpreter: CommandInterpreter) -> None:
        _ = _run(interpreter, "write a content")

        assert _output(interpreter, "cp a b") == []
        assert _output(interpreter, "mv b c") == []
        assert _output(interpreter, "rm a") == []

        assert _output(interpreter, "ls") == [f"{FILE_MARKER} c"]
        assert _output(interpreter, "cat c") == ["content"]

    def test_mkdir_rmdir(self, interpreter: CommandInterpreter) -> None:
        assert _output(interpreter, "mkdir d") == []
        assert _output(interpreter, "rmdir d") == []
        assert _output(interpreter, "ls") == []

    def test_clear(self, interpreter: CommandInterpreter) -> None:
        result = _run(interpreter, "clear")

        assert result.clear
        assert result.output == ()
        assert result.cwd == HOME


class TestErrorLines:
    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("mkdir", "mkdir: missing operand"),
            ("rmdir", "rmdir: missing operand"),
            ("touch", "touch: missing operand"),
            ("cat", "cat: missing operand"),
            ("read", "read: missing operand"),
            ("rm", "rm: missing operand"),
            ("write", "write: missing operand"),
            ("mv", "mv: missing operand"),
            ("cp", "cp: missing operand"),
            ("write only-file", "write: usage: write <file> <content>"),
            ("mv only-src", "mv: usage: mv <src> <dst>"),
            ("cp only-src", "cp: usage: cp <src> <dst>"),
            ("cat missing", "cat: missing: No such file"),
            ("read missing", "read: missing: No such file"),
            ("cat /sandbox", "cat: /sandbox: No such file"),
            ("rm missing", "rm: cannot remove 'missing'"),
            ("rmdir missing", "rmdir: cannot remove 'missing'"),
            ("mkdir /", "mkdir: cannot create directory '/'"),
            ("touch /nope/f", "touch: cannot create '/nope/f'"),
            ("write /nope/f text", "write: cannot write to '/nope/f'"),
            ("mv missing x", "mv: cannot move 'missing' to 'x'"),
            ("cp missing x", "cp: cannot copy 'missing' to 'x'"),
        ],
    )
    def test_error_line(
        self, interpreter: CommandInterpreter, line: str, expected: str
    ) -> None:
        assert _output(interpreter, line) == [expected]

    def test_rm_non_empty_directory(self, interpreter: CommandInterpreter) -> None:
        _ = _run(interpreter, "mkdir d")
        _ = _run(interpreter, "touch d/f")

        assert _output(interpreter, "rm d") == ["rm: cannot remove 'd'"]
        assert interpreter.vfs.exists("/sandbox/d/f")

    def test_mv_onto_existing(self, interpreter: CommandInterpreter) -> None:
        _ = _run(interpreter, "write a A")
        _ = _run(interpreter, "write b B")

        assert _output(interpreter, "mv a b") == ["mv: cannot move 'a' to 'b'"]
        assert _output(interpreter, "cat a") == ["A"]
        assert _output(interpreter, "cat b") == ["B"]

    def test_mkdir_over_file(self, interpreter: CommandInterpreter) -> None:
        _ = _run(interpreter, "touch f")

        assert _output(interpreter, "mkdir f") == ["mkdir: cannot create directory 'f'"]

    def test_errors_keep_cwd(self, interpreter: CommandInterpreter) -> None:
        assert _run(interpreter, "rm missing", "/sandbox").cwd == "/sandbox"
