"""Local file system access."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .base import Tool, ToolResponse, tool_function


class FileSystem(Tool):
    """Lists, reads and writes files, optionally confined to a root directory."""

    description = "Interact with the local file system: list directories, read and write files."

    def __init__(self, root: Optional[str] = None):
        self.root = Path(root).resolve() if root else None

    def _resolve(self, path: str) -> Path:
        if self.root is None:
            return Path(path)
        resolved = (self.root / path).resolve()
        if resolved != self.root and self.root not in resolved.parents:
            raise PermissionError(f"Path {path} is outside of {self.root}")
        return resolved

    @tool_function("List the contents of a directory", directory_path="directory to list")
    def list_directory(self, directory_path: str = ".") -> ToolResponse:
        directory = self._resolve(directory_path)
        if not directory.is_dir():
            return ToolResponse.error(f"No such directory: {directory_path}")
        entries = sorted(
            f"{entry.name}/" if entry.is_dir() else entry.name for entry in directory.iterdir()
        )
        return ToolResponse(content="\n".join(entries) or "(empty directory)")

    @tool_function("Read the contents of a file", file_path="path to the file")
    def read_file(self, file_path: str) -> ToolResponse:
        path = self._resolve(file_path)
        if not path.is_file():
            return ToolResponse.error(f"File not found: {file_path}")
        return ToolResponse(content=path.read_text(encoding="utf-8"))

    @tool_function(
        "Write content to a file, creating parent directories",
        file_path="path to the file",
        content="text to write",
    )
    def write_file(self, file_path: str, content: str) -> ToolResponse:
        path = self._resolve(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return ToolResponse(content=f"File written successfully: {file_path}")


__all__ = ["FileSystem"]
