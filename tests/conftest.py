"""
conftest.py — Fixtures compartidas.

FakeVCS es un VersionControl en memoria: branches como dict de
nombre → SHA, un "remoto" como dict de ref → SHA, y un registro de
cada llamada para verificar el orden de los pasos.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from jshblog.publishing.vcs import BranchNotFoundError, VCSError, VersionControl


class FakeVCS(VersionControl):

    def __init__(self, working_dir: Path, current: str = "dev"):
        self._working_dir = Path(working_dir)
        self.current = current
        self.branches: dict[str, str] = {current: "a" * 40}
        self.remotes: dict[str, dict[str, str]] = {"origin": {}}
        self.staged: list[str] = []
        self.calls: list[tuple] = []
        self.failures: dict[str, VCSError] = {}
        self._counter = 0

    def fail_on(self, operation: str, error: VCSError) -> None:
        self.failures[operation] = error

    def _record(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        if operation in self.failures:
            raise self.failures[operation]

    def _new_sha(self) -> str:
        self._counter += 1
        return hashlib.sha1(str(self._counter).encode()).hexdigest()

    @property
    def working_dir(self) -> Path:
        return self._working_dir

    def current_branch(self) -> str | None:
        return self.current

    def head_commit(self) -> str:
        return self.branches[self.current]

    def branch_exists(self, name: str) -> bool:
        return name in self.branches

    def delete_branch(self, name: str) -> None:
        self._record("delete_branch", name)
        if name not in self.branches:
            raise BranchNotFoundError(f"branch '{name}' not found")
        if name == self.current:
            raise VCSError(
                f"Cannot delete branch '{name}' checked out",
                command=f"git branch -D {name}", status=1,
                stderr=f"error: Cannot delete branch '{name}' checked out",
            )
        del self.branches[name]

    def create_branch(self, name: str) -> None:
        self._record("create_branch", name)
        if name in self.branches:
            raise VCSError(
                f"a branch named '{name}' already exists", status=128,
            )
        self.branches[name] = self.branches[self.current]
        self.current = name

    def add(self, path: str, force: bool = False) -> None:
        self._record("add", path, force)
        self.staged.append(path)

    def commit(self, message: str, all_tracked: bool = False) -> str:
        self._record("commit", message, all_tracked)
        if not self.staged and not all_tracked:
            raise VCSError("nothing to commit", status=1)
        sha = self._new_sha()
        self.branches[self.current] = sha
        self.staged = []
        return sha

    def subtree_split(self, prefix: str, branch: str) -> str:
        self._record("subtree_split", prefix, branch)
        if branch in self.branches:
            raise VCSError(f"Branch '{branch}' already exists.", status=1)
        sha = self._new_sha()
        self.branches[branch] = sha
        return sha

    def push(self, remote: str, refspec: str, force: bool = False) -> None:
        self._record("push", remote, refspec, force)
        source, destination = refspec.split(":")
        if remote not in self.remotes:
            raise VCSError(
                f"'{remote}' does not appear to be a git repository", status=128,
            )
        self.remotes[remote][destination] = self.branches[source]

    def checkout(self, name: str) -> None:
        self._record("checkout", name)
        if name not in self.branches:
            raise VCSError(
                f"pathspec '{name}' did not match any file(s) known to git",
                status=1,
            )
        self.current = name

    def point_head(self, name: str) -> None:
        self._record("point_head", name)
        if name not in self.branches:
            raise VCSError(f"branch '{name}' not found", status=1)
        self.current = name

    def reset_index(self) -> None:
        self._record("reset_index")
        self.staged = []

    def has_remote(self, name: str) -> bool:
        return name in self.remotes


@pytest.fixture
def build_dir(tmp_path):
    """Un public/ con el sitio construido."""
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<h1>jsh</h1>", encoding="utf-8")
    (public / "style.css").write_text("body { font-family: serif; }", encoding="utf-8")
    return public


@pytest.fixture
def fake_vcs(tmp_path, build_dir):
    """FakeVCS parado en dev, con public/ ya construido."""
    return FakeVCS(tmp_path)
