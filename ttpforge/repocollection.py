"""A set of named repositories used to resolve and list TTP references."""

from __future__ import annotations

import os
from collections.abc import Iterable

from .fsys import FileSystem, OsFileSystem
from .repo import REPO_CONFIG_FILE_NAME, REPO_PREFIX_SEP, Repo, RepoError, RepoSpec


def _last_sep_index(path: str) -> int:
    seps = {os.sep, "/"}
    return max(path.rfind(sep) for sep in seps)


class RepoCollection:
    """Loaded repositories, addressable by name and searchable for TTPs."""

    def __init__(
        self, fsys: FileSystem, specs: Iterable[RepoSpec] | None = None, base_path: str = ""
    ) -> None:
        self.fsys = fsys
        self.repos: list[Repo] = []
        self._by_name: dict[str, Repo] = {}
        for spec in specs or ():
            repo = spec.load(fsys, base_path)
            if repo.name in self._by_name:
                raise RepoError(f"duplicate repo name: {repo.name}")
            self._by_name[repo.name] = repo
            self.repos.append(repo)

    def get_repo(self, repo_name: str) -> Repo:
        """Return the repository called ``repo_name``."""
        try:
            return self._by_name[repo_name]
        except KeyError:
            raise RepoError(f"repository not found: {repo_name}") from None

    def resolve_ttp_ref(self, ttp_ref: str) -> tuple[Repo, str]:
        """Turn ``repo//path/to/ttp`` or a plain file path into a repo and a TTP path."""
        tokens = ttp_ref.split(REPO_PREFIX_SEP)
        sep_count = len(tokens) - 1
        if sep_count > 1:
            raise RepoError(f"too many occurrences of '{REPO_PREFIX_SEP}'")
        if sep_count == 0:
            abs_path = self._resolve_abs_path(ttp_ref)
            # The TTP must still belong to a repo so that sub-TTPs resolve.
            return self._find_parent_repo(abs_path), abs_path

        repo_name, scoped_ref = tokens
        if repo_name not in self._by_name:
            raise RepoError(
                f"repository '{repo_name}' not found - add it with 'ttpforge install'?"
            )
        repo = self._by_name[repo_name]
        return repo, repo.find_ttp(scoped_ref)

    def list_ttps(self) -> list[str]:
        """Return references to every TTP in every repository, in repo order."""
        return [ref for repo in self.repos for ref in repo.list_ttps()]

    def _find_parent_repo(self, abs_path: str) -> Repo:
        remaining = abs_path
        last_sep = _last_sep_index(remaining)
        while last_sep > 0:
            candidate = remaining[:last_sep]
            if self.fsys.exists(os.path.join(candidate, REPO_CONFIG_FILE_NAME)):
                name = os.path.basename(candidate.replace("/", os.sep))
                return RepoSpec(name=name, path=candidate).load(self.fsys, "")
            remaining = candidate
            last_sep = _last_sep_index(remaining)
        raise RepoError(
            f"no parent repository found for path {abs_path} - you must create a "
            f"{REPO_CONFIG_FILE_NAME} file in the repo root"
        )

    def _resolve_abs_path(self, path: str) -> str:
        if not self.fsys.exists(path):
            raise RepoError(f"path '{path}' does not exist")
        # In-memory file systems have no working directory to resolve against.
        if isinstance(self.fsys, OsFileSystem):
            return os.path.abspath(path)
        return path