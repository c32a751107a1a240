"""File system access used by the template repository."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol


class TemplateFileSystem(Protocol):
    """Protocol implemented by both the local and in-memory file systems."""

    def read_text(self, path: Path, encoding: str) -> str: ...

    def write_text(self, path: Path, content: str, encoding: str) -> None: ...

    def stat(self, path: Path) -> os.stat_result: ...


class LocalTemplateFileSystem:
    """Reads and writes template files on the local disk."""

    def read_text(self, path: Path, encoding: str) -> str:
        return path.read_text(encoding=encoding)

    def write_text(self, path: Path, content: str, encoding: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding=encoding)

    def stat(self, path: Path) -> os.stat_result:
        return path.stat()
