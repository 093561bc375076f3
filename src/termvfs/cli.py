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

"""Command line entry points for the ``termvfs`` executable."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from .agent import render_agent_context
from .config import ShellConfig, load_config
from .errors import ConfigError
from .filesystem import VirtualFilesystem
from .logging import StructuredLogger, configure_logging, get_logger
from .shell import CommandInterpreter, TerminalSession
from .storage import build_state_store

EXIT_COMMAND_NOT_FOUND = 127
_CLEAR_SCREEN = "\033[2J\033[H"
_EXIT_WORDS = frozenset({"exit", "quit", "logout"})


def main(
    argv: Sequence[str] | None = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Run the termvfs CLI."""

    parser = _build_parser()
    try:
        args = parser.parse_args(list(argv) if argv is not None else None)
    except SystemExit as exc:  # argparse exits with code 2 on errors
        code = exc.code if isinstance(exc.code, int) else 2
        return int(code)

    configure_logging(level=args.log_level, json_mode=args.json_logs)
    logger = get_logger(__name__, context={"component": "cli"})
    out = stdout if stdout is not None else sys.stdout

    try:
        config = load_config(
            Path(args.config) if args.config is not None else None,
            {"store_backend": args.store, "state_path": args.state_path},
        )
    except (ConfigError, FileNotFoundError) as error:
        logger.error(
            "Invalid configuration.",
            event="termvfs.config_error",
            context={"error": str(error)},
        )
        return 2

    session = _open_session(config, cwd=getattr(args, "cwd", None), logger=logger)

    if args.command == "repl":
        return _run_repl(session, stdin if stdin is not None else sys.stdin, out)
    if args.command == "exec":
        return _run_exec(session, args.line, out, logger)
    if args.command == "snapshot":
        return _run_snapshot(session.interpreter.vfs, args, config, out)
    return _run_context(session, config, out)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termvfs",
        description="Virtual filesystem terminal.",
    )
    _ = parser.add_argument(
        "--config",
        default=None,
        help="Path to a TOML or YAML configuration file.",
    )
    _ = parser.add_argument(
        "--store",
        choices=("memory", "file", "redis"),
        default=None,
        help="Override the persistence backend.",
    )
    _ = parser.add_argument(
        "--state-path",
        default=None,
        help="State file used by the file backend.",
    )
    _ = parser.add_argument(
        "--log-level",
        choices=("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"),
        default=None,
        help="Override the log level emitted by the CLI.",
    )
    _ = parser.add_argument(
        "--json-logs",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Emit structured JSON logs (disable with --no-json-logs).",
    )

    subcommands = parser.add_subparsers(dest="command", required=True)

    repl_parser = subcommands.add_parser("repl", help="Start an interactive terminal.")
    _ = repl_parser.add_argument("--cwd", default=None, help="Starting directory.")

    exec_parser = subcommands.add_parser("exec", help="Run a single command line.")
    _ = exec_parser.add_argument("line", help="Command line, quoted as one argument.")
    _ = exec_parser.add_argument("--cwd", default=None, help="Working directory.")

    snapshot_parser = subcommands.add_parser(
        "snapshot", help="Print the agent snapshot as JSON lines."
    )
    _ = snapshot_parser.add_argument("--root", default=None)
    _ = snapshot_parser.add_argument("--max-items", type=int, default=None)
    _ = snapshot_parser.add_argument("--max-preview", type=int, default=None)

    context_parser = subcommands.add_parser(
        "context", help="Print the context block handed to the chat agent."
    )
    _ = context_parser.add_argument("--cwd", default=None, help="Working directory.")

    return parser


def _open_session(
    config: ShellConfig, *, cwd: str | None, logger: StructuredLogger
) -> TerminalSession:
    vfs = VirtualFilesystem(
        build_state_store(config),
        storage_key=config.storage_key,
        home=config.home,
        logger=logger,
    )
    return TerminalSession(CommandInterpreter(vfs, logger=logger), cwd=cwd)


def _write_lines(out: TextIO, lines: Sequence[str]) -> None:
    for line in lines:
        _ = out.write(line + "\n")
    out.flush()


def _run_repl(session: TerminalSession, stdin: TextIO, out: TextIO) -> int:
    interactive = stdin.isatty()
    while True:
        if interactive:
            _ = out.write(f"{session.cwd}$ ")
            out.flush()
        line = stdin.readline()
        if not line:
            return 0
        if line.strip().lower() in _EXIT_WORDS:
            return 0
        result = session.run(line)
        if result.clear:
            _ = out.write(_CLEAR_SCREEN)
        _write_lines(out, result.output)


def _run_exec(
    session: TerminalSession, line: str, out: TextIO, logger: StructuredLogger
) -> int:
    result = session.run(line)
    logger.debug(
        "Command finished.",
        event="cli.exec",
        context={"cwd": result.cwd, "recognized": result.recognized},
    )
    _write_lines(out, result.output)
    return 0 if result.recognized else EXIT_COMMAND_NOT_FOUND


def _run_snapshot(
    vfs: VirtualFilesystem, args: argparse.Namespace, config: ShellConfig, out: TextIO
) -> int:
    entries = vfs.get_snapshot(
        args.root if args.root is not None else config.snapshot_root,
        args.max_items if args.max_items is not None else config.snapshot_max_items,
        args.max_preview if args.max_preview is not None else config.snapshot_max_preview,
    )
    _write_lines(out, [json.dumps(entry.to_dict(), ensure_ascii=False) for entry in entries])
    return 0


def _run_context(session: TerminalSession, config: ShellConfig, out: TextIO) -> int:
    vfs = session.interpreter.vfs
    snapshot = vfs.get_snapshot(
        config.snapshot_root, config.snapshot_max_items, config.snapshot_max_preview
    )
    _ = out.write(render_agent_context(session.cwd, session.history_lines(), snapshot))
    out.flush()
    return 0


__all__ = ["EXIT_COMMAND_NOT_FOUND", "main"]
