"""Repositories of TTPs and templates described by a config file."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field
from typing import Any

import yaml

from .fsys import FileSystem

REPO_CONFIG_FILE_NAME = "ttpforge-repo-config.yaml"
REPO_PREFIX_SEP = "//"


class RepoError(ValueError):
    """A repository could not be loaded or searched."""


def _join(*parts: str) -> str:
    present = [p for p in parts if p]
    if not present:
        return ""
    return os.path.normpath(os.sep.join(present))


def _string_list(config: dict[str, Any], key: str, config_path: str) -> list[str]:
    value = config.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise RepoError(f"invalid config file found at {config_path}: `{key}` must be a list of strings")
    return list(value)


@dataclass
class GitConfig:
    """Instructions for cloning a repository."""

    url: str = ""
    branch: str = ""


@dataclass
class Repo:
    """A loaded repository that can be searched for TTPs and templates."""

    fsys: FileSystem
    full_path: str
    spec: RepoSpec
    ttp_search_paths: list[str] = field(default_factory=list)
    template_search_paths: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        """The repository's name."""
        return self.spec.name

    def list_ttps(self) -> list[str]:
        """Return references of the form ``name//path`` to every TTP."""
        return self._list(self.ttp_search_paths)

    def find_ttp(self, ttp_path: str) -> str:
        """Return the full path of a TTP in this repository."""
        return self._search(self.ttp_search_paths, ttp_path)

    def find_template(self, template_path: str) -> str:
        """Return the full path of a template in this repository."""
        return self._search(self.template_search_paths, template_path)

    def _search(self, dirs: list[str], rel_path: str) -> str:
        for directory in dirs:
            candidate = _join(self.full_path, directory, rel_path)
            if self.fsys.exists(candidate):
                return candidate
        raise RepoError(f"path {rel_path} not found in repo {self.name}")

    def _list(self, dirs: list[str]) -> list[str]:
        results: list[str] = []
        for directory in dirs:
            prefix = _join(self.full_path, directory)
            for path, _is_dir in self.fsys.walk(prefix):
                if not path.endswith(".yaml"):
                    continue
                trimmed = path[len(prefix):] if path.startswith(prefix) else path
                trimmed = trimmed.replace(os.sep, "/").lstrip("/")
                results.append(self.name + REPO_PREFIX_SEP + trimmed)
        return results


@dataclass
class RepoSpec:
    """Where a repository lives and, optionally, how to clone it."""

    name: str = ""
    path: str = ""
    git: GitConfig = field(default_factory=GitConfig)

    def load(self, fsys: FileSystem, base_path: str = "") -> Repo:
        """Clone the repository if needed and read its configuration."""
        if not self.name:
            raise RepoError("repository field `name:` cannot be empty")
        if not self.path:
            raise RepoError("repository field `path:` cannot be empty")

        self._ensure_present(fsys, base_path)

        config_path = _join(base_path, self.path, REPO_CONFIG_FILE_NAME)
        try:
            contents = fsys.read_file(config_path)
        except OSError as exc:
            raise RepoError(f"could not read repo config at path {config_path}: {exc}") from exc
        try:
            config = yaml.safe_load(contents)
        except yaml.YAMLError as exc:
            raise RepoError(f"invalid config file found at {config_path}: {exc}") from exc
        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise RepoError(f"invalid config file found at {config_path}: not a mapping")

        return Repo(
            fsys=fsys,
            full_path=_join(base_path, self.path),
            spec=self,
            ttp_search_paths=_string_list(config, "ttp_search_paths", config_path),
            template_search_paths=_string_list(config, "template_search_paths", config_path),
        )

    def _ensure_present(self, fsys: FileSystem, base_path: str) -> None:
        target = _join(base_path, self.path)
        if fsys.exists(target):
            return
        if not self.git.url:
            raise RepoError(
                f"repo at {target} not found - clone manually or see docs for how "
                "to add git clone instructions"
            )
        branch = self.git.branch or "main"
        command = ["git", "clone", "--single-branch", "--branch", branch, self.git.url, target]
        try:
            subprocess.run(command, check=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise RepoError(f"failed to clone repo to {target}: {exc}") from exc