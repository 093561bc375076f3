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

"""JSON file-backed state store.

All keys share one JSON document (``{"key": "value", ...}``). Writes go to a
temporary file in the same directory which then replaces the document, so a
crash never leaves a half-written tree behind. A sidecar ``.lock`` file is
held shared by readers and exclusively by writers across processes.

Reading an unparseable document raises :class:`StateStoreError`. Writing over
one logs a warning and starts a new document, so the store recovers on the
next successful write.
"""

from __future__ import annotations

import json
import os
import sys
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import IO, cast

from ..errors import StateStoreError
from ..logging import StructuredLogger, get_logger

if sys.platform == "win32":  # pragma: no cover
    import msvcrt as _msvcrt
else:
    import fcntl as _fcntl

logger: StructuredLogger = get_logger(__name__, context={"component": "file_store"})


def _lock_shared(f: IO[str]) -> None:
    if sys.platform == "win32":  # pragma: no cover
        # msvcrt has no shared mode
        _msvcrt.locking(f.fileno(), _msvcrt.LK_LOCK, 1)
    else:
        _fcntl.flock(f.fileno(), _fcntl.LOCK_SH)


def _lock_exclusive(f: IO[str]) -> None:
    if sys.platform == "win32":  # pragma: no cover
        _msvcrt.locking(f.fileno(), _msvcrt.LK_LOCK, 1)
    else:
        _fcntl.flock(f.fileno(), _fcntl.LOCK_EX)


def _unlock(f: IO[str]) -> None:
    if sys.platform == "win32":  # pragma: no cover
        _msvcrt.locking(f.fileno(), _msvcrt.LK_UNLCK, 1)
    else:
        _fcntl.flock(f.fileno(), _fcntl.LOCK_UN)


@dataclass(slots=True, frozen=True)
class FileStateStore:
    """Store keeping every key in a single JSON document at ``path``.

    Example::

        store = FileStateStore(Path("~/.local/state/termvfs/state.json").expanduser())
        vfs = VirtualFilesystem(store)
    """

    path: Path

    @property
    def lock_path(self) -> Path:
        return self.path.with_name(self.path.name + ".lock")

    @contextmanager
    def _locked(self, *, exclusive: bool) -> Iterator[None]:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.lock_path.open("a", encoding="utf-8") as handle:
            if exclusive:
                _lock_exclusive(handle)
            else:
                _lock_shared(handle)
            try:
                yield
            finally:
                _unlock(handle)

    def _read_document(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as error:
            raise StateStoreError(f"State file {self.path} is not valid JSON.") from error
        if not isinstance(data, dict):
            raise StateStoreError(f"State file {self.path} must contain an object.")
        document = cast(dict[object, object], data)
        return {
            key: value
            for key, value in document.items()
            if isinstance(key, str) and isinstance(value, str)
        }

    def get(self, key: str) -> str | None:
        if not self.path.exists():
            return None
        try:
            with self._locked(exclusive=False):
                return self._read_document().get(key)
        except OSError as error:
            raise StateStoreError(f"Cannot read state file {self.path}: {error}") from error

    def set(self, key: str, value: str) -> None:
        try:
            with self._locked(exclusive=True):
                try:
                    document = self._read_document()
                except StateStoreError as error:
                    logger.warning(
                        "Replacing unreadable state file.",
                        event="storage.file.reset",
                        context={"path": str(self.path), "error": str(error)},
                    )
                    document = {}
                document[key] = value
                self._replace(document)
        except OSError as error:
            raise StateStoreError(f"Cannot write state file {self.path}: {error}") from error

    def _replace(self, document: dict[str, str]) -> None:
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False)
            os.replace(temp_name, self.path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise


__all__ = ["FileStateStore"]
