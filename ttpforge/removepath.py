"""Step action that deletes a file or directory."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .fsys import FileSystem, OsFileSystem
from .logs import get_logger
from .results import ActResult


class RemovePathError(ValueError):
    """The path could not be removed or the action is misconfigured."""


@dataclass
class RemovePathAction:
    """Delete the file at ``path``; directories need ``recursive=True``."""

    path: str = ""
    recursive: bool = False
    file_system: FileSystem | None = None

    def is_nil(self) -> bool:
        """Return whether no path was given."""
        return self.path == ""

    def execute(self, exec_ctx: Any = None) -> ActResult:
        """Remove the path, refusing missing paths and non-recursive directories."""
        get_logger().info("Removing path %s", self.path)
        fsys = self.file_system if self.file_system is not None else OsFileSystem()

        if not fsys.exists(self.path):
            raise RemovePathError(f"path {self.path} does not exist")

        # Like `rm`, even empty directories need an explicit recursive flag.
        if fsys.is_dir(self.path) and not self.recursive:
            raise RemovePathError(
                f"path {self.path} is a directory and `recursive: true` was not "
                "specified - refusing to remove"
            )

        fsys.remove_all(self.path)
        return ActResult()

    def validate(self, exec_ctx: Any = None) -> None:
        """Raise if the action has no path."""
        if self.path == "":
            raise RemovePathError("path field cannot be empty")