"""Git repository context for reqtraq.

Provides the repository name and repository-relative paths that the
LyX linkifier embeds in generated document URLs.
"""

from __future__ import annotations

import os
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from reqtraq.errors import PathResolutionError


def _clean_git_env() -> dict[str, str]:
    """Return environment with GIT_DIR/GIT_WORK_TREE removed.

    Use when running git commands with explicit cwd to prevent
    inherited git context from overriding the provided path.
    """
    env = os.environ.copy()
    env.pop("GIT_DIR", None)
    env.pop("GIT_WORK_TREE", None)
    return env


@contextmanager
def temporary_worktree(repo_root: Path, ref: str = "HEAD") -> Iterator[Path]:
    """Check out ref in a temporary detached worktree.

    The worktree is removed on exit.

    Usage:
        with temporary_worktree(repo.root, "main") as tree:
            old_graph, _ = build_graph([tree / "certdocs"])

    Raises:
        subprocess.CalledProcessError: If git cannot create the worktree.
    """
    with tempfile.TemporaryDirectory() as tmp:
        worktree_path = Path(tmp) / "worktree"

        subprocess.run(
            ["git", "worktree", "add", "--detach", str(worktree_path), ref],
            cwd=repo_root,
            env=_clean_git_env(),
            capture_output=True,
            check=True,
        )

        try:
            yield worktree_path
        finally:
            subprocess.run(
                ["git", "worktree", "remove", "--force", str(worktree_path)],
                cwd=repo_root,
                env=_clean_git_env(),
                capture_output=True,
            )


def get_repo_root(start_path: Path | None = None) -> Path | None:
    """Find the git repository root.

    Args:
        start_path: Path to start searching from (default: current directory)

    Returns:
        Path to repository root, or None if not in a git repository
    """
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=start_path or Path.cwd(),
            env=_clean_git_env() if start_path else None,
            capture_output=True,
            text=True,
            check=True,
        )
        return Path(result.stdout.strip())
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


def get_remote_url(repo_root: Path, remote: str = "origin") -> str | None:
    """Get the URL of a remote, or None if it is not configured."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", remote],
            cwd=repo_root,
            env=_clean_git_env(),
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip() or None
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


def repo_name(repo_root: Path) -> str:
    """Short name of a repository.

    The last path component of the origin URL without ".git", e.g.
    "reqtraq" for git@github.com:daedaleanai/reqtraq.git. Falls back to
    the name of the repository directory.
    """
    url = get_remote_url(repo_root)
    if url:
        name = url.rstrip("/").replace(":", "/").rsplit("/", 1)[-1]
        if name.endswith(".git"):
            name = name[: -len(".git")]
        if name:
            return name
    return repo_root.name


@dataclass
class RepoContext:
    """A repository that certdocs are parsed from.

    Attributes:
        root: Absolute path of the working tree root.
        name: Short repository name used in document URLs.
    """

    root: Path
    name: str

    @classmethod
    def discover(cls, start_path: Path | None = None) -> RepoContext:
        """Build the context of the repository containing start_path.

        Raises:
            PathResolutionError: If start_path is not inside a git repository.
        """
        start = Path(start_path) if start_path else Path.cwd()
        if start.is_file():
            start = start.parent
        root = get_repo_root(start)
        if root is None:
            raise PathResolutionError(f"{start} is not inside a git repository")
        return cls(root=root, name=repo_name(root))

    def path_in_repo(self, path: Path | str) -> str:
        """Path of a file relative to the repository root, with "/" separators.

        Raises:
            PathResolutionError: If the file is not under the repository root.
        """
        try:
            return Path(path).resolve().relative_to(self.root.resolve()).as_posix()
        except ValueError:
            raise PathResolutionError(f"File {path} not found in repo {self.root}") from None

    def dir_in_repo(self, path: Path | str) -> str:
        """Directory of a file relative to the repository root ("." at the root)."""
        return Path(self.path_in_repo(path)).parent.as_posix()
