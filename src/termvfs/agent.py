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

"""Read-only context exchanged with the terminal's chat agent.

Lines the interpreter does not recognize are forwarded to a chat agent. The
agent sees the working directory, recent history and a filesystem snapshot
rendered by :func:`render_agent_context`, and it lists any shell commands it
suggests under a ``Commands:`` heading, which :func:`parse_suggested_commands`
extracts.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from .filesystem import SnapshotEntry
from .shell import is_known_command, tokenize

MAX_CONTEXT_HISTORY: Final[int] = 20
MAX_CONTEXT_ENTRIES: Final[int] = 50
MAX_CONTEXT_PREVIEW: Final[int] = 60
COMMANDS_HEADING: Final[str] = "commands:"


def _render_snapshot_entry(entry: SnapshotEntry) -> str:
    if entry.type == "dir":
        return f"  DIR:  {entry.path}"
    line = f"  FILE: {entry.path} ({entry.size or 0} bytes)"
    if entry.preview:
        line += f" - Preview: {entry.preview[:MAX_CONTEXT_PREVIEW]}..."
    return line


def render_agent_context(
    cwd: str,
    history: Sequence[str] = (),
    snapshot: Sequence[SnapshotEntry] | None = None,
) -> str:
    """Render the context block prepended to the agent's prompt.

    Only the last 20 history lines and the first 50 snapshot entries are
    included; previews are cut to 60 characters.
    """
    parts = [f"Current working directory: {cwd or '/'}\n\n"]
    if history:
        recent = "\n".join(history[-MAX_CONTEXT_HISTORY:])
        parts.append(f"Recent terminal history:\n{recent}\n\n")
    if snapshot is not None:
        parts.append("Filesystem snapshot:\n")
        parts.extend(
            _render_snapshot_entry(entry) + "\n"
            for entry in snapshot[:MAX_CONTEXT_ENTRIES]
        )
        parts.append("\n")
    return "".join(parts)


def _clean_command_line(line: str) -> str:
    cleaned = line.strip().strip("`").strip()
    if cleaned.startswith("$ "):
        cleaned = cleaned[2:].strip()
    return cleaned


def parse_suggested_commands(reply: str) -> list[str]:
    """Return the known commands listed under a ``Commands:`` heading.

    Code fences and backticks are ignored. The section ends at the first
    blank line after a command. Lines whose command name is not built in are
    dropped so that nothing unrecognized is ever executed.
    """
    commands: list[str] = []
    in_section = False
    for raw_line in reply.splitlines():
        stripped = raw_line.strip()
        if not in_section:
            in_section = stripped.lower() == COMMANDS_HEADING
            continue
        if stripped.startswith("```"):
            continue
        if not stripped:
            if commands:
                break
            continue
        command = _clean_command_line(stripped)
        tokens = tokenize(command)
        if tokens and is_known_command(tokens[0]):
            commands.append(command)
    return commands


__all__ = [
    "MAX_CONTEXT_ENTRIES",
    "MAX_CONTEXT_HISTORY",
    "MAX_CONTEXT_PREVIEW",
    "parse_suggested_commands",
    "render_agent_context",
]
