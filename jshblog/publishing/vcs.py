"""
vcs.py — El cliente de control de versiones que usa el deploy.

Define una interfaz (VersionControl) con solo las operaciones que el
deploy necesita: borrar branch, crear branch, add forzado, commit,
subtree split, push forzado, checkout y mover HEAD. El sequencer recibe una
instancia y nunca toca git directamente.

Dos razones para la interfaz:
    - El repo se pasa explícito, no depende del cwd del proceso
    - Los tests usan un cliente falso en memoria, sin repo en disco

GitClient es la implementación real sobre GitPython. Los
GitCommandError se traducen a VCSError con el comando, el status y
el stderr, para que el CLI pueda devolver el mismo exit code que git.

Uso:
    from jshblog.publishing.vcs import GitClient
    vcs = GitClient.open("/home/jsh/blog")
    vcs.create_branch("draft")
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

import git as gitpython

from jshblog.utils.logger import get_logger

logger = get_logger("jshblog.vcs")


class VCSError(Exception):
    """
    Un comando de git falló.

    Campos:
        command: Comando ejecutado (ej: "git push --force origin master:master")
        status: Exit status de git, si lo hubo
        stderr: Lo que git imprimió en stderr
    """

    def __init__(
        self,
        message: str,
        command: str = "",
        status: int | None = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = command
        self.status = status
        self.stderr = stderr


class BranchNotFoundError(VCSError):
    """La branch que se quiso borrar no existe."""


class VersionControl(ABC):
    """
    Interfaz de las operaciones git del deploy.

    Todas las operaciones que fallan lanzan VCSError. Solo
    delete_branch distingue "no existe" con BranchNotFoundError.
    """

    @property
    @abstractmethod
    def working_dir(self) -> Path:
        """Raíz del working tree."""
        ...

    @abstractmethod
    def current_branch(self) -> str | None:
        """Branch en HEAD, o None si HEAD está detached."""
        ...

    @abstractmethod
    def head_commit(self) -> str:
        """SHA del commit en HEAD."""
        ...

    @abstractmethod
    def branch_exists(self, name: str) -> bool:
        ...

    @abstractmethod
    def delete_branch(self, name: str) -> None:
        """Borra una branch local sin importar si está mergeada (-D)."""
        ...

    @abstractmethod
    def create_branch(self, name: str) -> None:
        """Crea la branch desde HEAD y hace checkout (checkout -b)."""
        ...

    @abstractmethod
    def add(self, path: str, force: bool = False) -> None:
        """Agrega un path al index; force ignora .gitignore."""
        ...

    @abstractmethod
    def commit(self, message: str, all_tracked: bool = False) -> str:
        """Crea un commit y devuelve su SHA. all_tracked equivale a -a."""
        ...

    @abstractmethod
    def subtree_split(self, prefix: str, branch: str) -> str:
        """Extrae la historia de prefix a una branch nueva; devuelve su SHA."""
        ...

    @abstractmethod
    def push(self, remote: str, refspec: str, force: bool = False) -> None:
        ...

    @abstractmethod
    def checkout(self, name: str) -> None:
        ...

    @abstractmethod
    def point_head(self, name: str) -> None:
        """Apunta HEAD a la branch sin tocar index ni working tree."""
        ...

    @abstractmethod
    def reset_index(self) -> None:
        """Resetea el index a HEAD, dejando el working tree intacto (reset --mixed)."""
        ...

    @abstractmethod
    def has_remote(self, name: str) -> bool:
        ...


def _status_code(status: object) -> int | None:
    """GitPython a veces guarda el status como str o como excepción."""
    if isinstance(status, int):
        return status
    if isinstance(status, str) and status.strip().lstrip("-").isdigit():
        return int(status)
    return None


def _clean_stream(stream: object) -> str:
    """Quita el envoltorio "  stderr: '...'" que agrega GitPython."""
    if isinstance(stream, bytes):
        stream = stream.decode("utf-8", errors="replace")
    text = str(stream or "").strip()
    for prefix in ("stderr:", "stdout:"):
        if text.startswith(prefix):
            text = text[len(prefix):].strip()
    if len(text) >= 2 and text[0] == text[-1] == "'":
        text = text[1:-1]
    return text.strip()


def _to_vcs_error(e: gitpython.GitCommandError) -> VCSError:
    command = e.command
    if isinstance(command, (list, tuple)):
        command = " ".join(str(part) for part in command)
    stderr = _clean_stream(e.stderr)
    return VCSError(
        f"{command} falló: {stderr or e}",
        command=str(command),
        status=_status_code(e.status),
        stderr=stderr,
    )


class GitClient(VersionControl):
    """
    VersionControl sobre un git.Repo de GitPython.

    Las operaciones que GitPython no modela (subtree, push con
    refspec) van por repo.git, igual que si se escribieran en shell.

    Args:
        repo: Repositorio ya abierto.
    """

    def __init__(self, repo: gitpython.Repo):
        self._repo = repo

    @classmethod
    def open(cls, repo_path: str | Path) -> GitClient:
        """
        Abre el repositorio del blog.

        Raises:
            FileNotFoundError: Si la ruta no existe.
            VCSError: Si la ruta no es un repo git.
        """
        path = Path(repo_path)
        if not path.exists():
            raise FileNotFoundError(
                f"No se encontró el repositorio en: {path}\n"
                "Verifica deploy.repo_path en config.yaml."
            )
        try:
            return cls(gitpython.Repo(path))
        except gitpython.InvalidGitRepositoryError as e:
            raise VCSError(f"No es un repositorio git: {path}") from e

    @property
    def working_dir(self) -> Path:
        return Path(self._repo.working_tree_dir)

    def _run(self, *args: str) -> str:
        try:
            output = self._repo.git.execute(["git", *args])
        except gitpython.GitCommandError as e:
            raise _to_vcs_error(e) from e
        logger.git(output)
        return output

    def current_branch(self) -> str | None:
        if self._repo.head.is_detached:
            return None
        return self._repo.active_branch.name

    def head_commit(self) -> str:
        return self._repo.head.commit.hexsha

    def branch_exists(self, name: str) -> bool:
        return any(head.name == name for head in self._repo.heads)

    def delete_branch(self, name: str) -> None:
        if not self.branch_exists(name):
            raise BranchNotFoundError(
                f"branch '{name}' not found", command=f"git branch -D {name}"
            )
        try:
            self._run("branch", "-D", name)
        except VCSError as e:
            if "not found" in e.stderr:
                raise BranchNotFoundError(
                    str(e), command=e.command, status=e.status, stderr=e.stderr
                ) from e
            raise

    def create_branch(self, name: str) -> None:
        self._run("checkout", "-b", name)

    def add(self, path: str, force: bool = False) -> None:
        args = ["add"]
        if force:
            args.append("-f")
        self._run(*args, "--", path)

    def commit(self, message: str, all_tracked: bool = False) -> str:
        args = ["commit"]
        if all_tracked:
            args.append("-a")
        self._run(*args, "-m", message)
        return self.head_commit()

    def subtree_split(self, prefix: str, branch: str) -> str:
        output = self._run("subtree", "split", f"--prefix={prefix}", "-b", branch)
        # subtree imprime el SHA del último commit generado
        lines = [line for line in output.splitlines() if line.strip()]
        if lines:
            return lines[-1].strip()
        return self._repo.heads[branch].commit.hexsha

    def push(self, remote: str, refspec: str, force: bool = False) -> None:
        args = ["push"]
        if force:
            args.append("--force")
        self._run(*args, remote, refspec)

    def checkout(self, name: str) -> None:
        self._run("checkout", name)

    def point_head(self, name: str) -> None:
        if not self.branch_exists(name):
            raise VCSError(
                f"branch '{name}' not found",
                command=f"git symbolic-ref HEAD refs/heads/{name}",
            )
        self._run("symbolic-ref", "HEAD", f"refs/heads/{name}")

    def reset_index(self) -> None:
        self._run("reset", "--mixed", "-q")

    def has_remote(self, name: str) -> bool:
        return any(remote.name == name for remote in self._repo.remotes)
