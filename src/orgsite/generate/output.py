"""Destinations for generated files."""

from datetime import datetime, timezone
import os
from pathlib import Path
import sys
from typing import Protocol, TextIO


class Output(Protocol):
    def write(self, path: str, data: str | bytes, mtime: datetime | None) -> None: ...


def _header(path: str, mtime: datetime | None) -> str:
    return f"{path} ({mtime}):\n" if mtime is not None else f"{path}:\n"


class StdoutOutput:
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def write(self, path: str, data: str | bytes, mtime: datetime | None) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        if isinstance(data, bytes):
            data = data.decode("utf-8", errors="replace")
        stream.write(_header(path, mtime))
        stream.write(data)


class DirectoryOutput:
    def __init__(self, root: Path) -> None:
        self.root = root

    def write(self, path: str, data: str | bytes, mtime: datetime | None) -> None:
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(data, str):
            target.write_text(data, encoding="utf-8")
        else:
            target.write_bytes(data)
        if mtime is not None:
            # naive org timestamps are treated as UTC
            ts = mtime.replace(tzinfo=timezone.utc).timestamp()
            os.utime(target, (ts, ts))


class MemoryOutput:
    """Keeps every write in ``files``; used by tests."""

    def __init__(self) -> None:
        self.files: dict[str, tuple[str | bytes, datetime | None]] = {}

    def write(self, path: str, data: str | bytes, mtime: datetime | None) -> None:
        self.files[path] = (data, mtime)

    def text(self, path: str) -> str:
        data = self.files[path][0]
        return data if isinstance(data, str) else data.decode("utf-8")
