"""
sequencer.py — Publica el sitio ya construido en la branch de hosting.

El blog se desarrolla en `dev`. El build del generador deja el sitio
en `public/` (ignorado por git). El hosting sirve la branch `master`,
que debe contener SOLO el contenido de `public/` en su raíz.

Flujo (fail-fast, sin rollback, sin reintentos):
    1. Borrar las branches locales draft y master si existen
    2. git checkout -b draft
    3. git add -f public && git commit -am "Publish to master"
    4. git subtree split --prefix public -b master
    5. git push --force origin master:master
    6. git checkout dev

Si un paso falla, los siguientes no se ejecutan y se lanza
PublishError con el exit code de git. Se puede quedar en `draft`
o con un `master` local que nunca llegó al remoto; volver a correr
el deploy es seguro porque el paso 1 limpia ese estado.

Uso:
    from jshblog.publishing.sequencer import PublishSequencer, PublishRequest
    sequencer = PublishSequencer(GitClient.open("."))
    result = sequencer.publish(PublishRequest.from_config(config.deploy))
"""

from __future__ import annotations

from dataclasses import dataclass, field

from jshblog.config import DeployConfig
from jshblog.publishing.vcs import BranchNotFoundError, VCSError, VersionControl
from jshblog.utils.logger import get_logger

logger = get_logger("jshblog.sequencer")

TOTAL_STEPS = 6


class PublishError(Exception):
    """
    Un paso del deploy falló y los siguientes no se ejecutaron.

    Campos:
        step: Número de paso (1-6) donde se detuvo
        exit_code: Código con el que debe terminar el proceso
    """

    def __init__(self, step: int, message: str, exit_code: int = 1):
        super().__init__(message)
        self.step = step
        self.exit_code = exit_code or 1


class BuildOutputError(PublishError):
    """El directorio del build no existe o está vacío."""


@dataclass
class PublishRequest:
    """Qué publicar y a dónde."""
    build_output: str = "public"
    draft_branch: str = "draft"
    publish_branch: str = "master"
    working_branch: str = "dev"
    remote: str = "origin"
    remote_ref: str = "master"
    commit_message: str = "Publish to master"

    @classmethod
    def from_config(cls, deploy: DeployConfig) -> PublishRequest:
        return cls(
            build_output=deploy.build_output,
            draft_branch=deploy.draft_branch,
            publish_branch=deploy.publish_branch,
            working_branch=deploy.working_branch,
            remote=deploy.remote,
            remote_ref=deploy.remote_ref,
            commit_message=deploy.commit_message,
        )

    @property
    def refspec(self) -> str:
        return f"{self.publish_branch}:{self.remote_ref}"


@dataclass
class PublishResult:
    """Resultado de un deploy exitoso."""
    draft_commit: str
    publish_commit: str
    remote: str
    remote_ref: str
    deleted_branches: list[str] = field(default_factory=list)


def guarded_delete(vcs: VersionControl, branch: str) -> bool:
    """
    Borra una branch local tolerando que no exista.

    Returns:
        True si se borró, False si no existía.

    Raises:
        VCSError: Cualquier otro fallo de git.
    """
    try:
        vcs.delete_branch(branch)
    except BranchNotFoundError:
        logger.info(f"Branch '{branch}' no existe, nada que borrar")
        return False
    logger.info(f"Branch '{branch}' borrada")
    return True


class PublishSequencer:
    """
    Ejecuta los seis pasos del deploy sobre un VersionControl.

    El sequencer es el único que muta el repo durante la corrida;
    no hay locking contra dos deploys simultáneos.

    Args:
        vcs: Cliente de git ya abierto sobre el repo del blog.
    """

    def __init__(self, vcs: VersionControl):
        self._vcs = vcs

    def publish(self, request: PublishRequest | None = None) -> PublishResult:
        """
        Publica el build output en la branch remota.

        Args:
            request: Parámetros del deploy. None usa los del blog.

        Returns:
            PublishResult con los SHAs del draft y del split.

        Raises:
            PublishError: Si cualquier paso falla.
        """
        request = request or PublishRequest()

        deleted = self._run_step(1, "Limpiando branches viejas", self._clean, request)
        self._run_step(
            2, f"Creando branch '{request.draft_branch}'",
            self._vcs.create_branch, request.draft_branch,
        )
        draft_commit = self._run_step(3, f"Commit de '{request.build_output}'", self._snapshot, request)
        publish_commit = self._run_step(
            4, f"Subtree split de '{request.build_output}' en '{request.publish_branch}'",
            self._vcs.subtree_split, request.build_output, request.publish_branch,
        )
        self._run_step(
            5, f"Push forzado a {request.remote} {request.refspec}",
            self._vcs.push, request.remote, request.refspec, True,
        )
        self._run_step(
            6, f"Volviendo a '{request.working_branch}'",
            self._vcs.checkout, request.working_branch,
        )

        logger.success(
            f"Publicado {publish_commit[:7]} en {request.remote}/{request.remote_ref}"
        )
        return PublishResult(
            draft_commit=draft_commit,
            publish_commit=publish_commit,
            remote=request.remote,
            remote_ref=request.remote_ref,
            deleted_branches=deleted,
        )

    def _run_step(self, number: int, message: str, action, *args):
        """Ejecuta un paso; cualquier VCSError corta el deploy."""
        logger.step(number, TOTAL_STEPS, message)
        try:
            return action(*args)
        except PublishError as e:
            logger.error(str(e))
            raise
        except VCSError as e:
            logger.error(e.stderr or str(e))
            raise PublishError(number, str(e), exit_code=e.status or 1) from e

    def _clean(self, request: PublishRequest) -> list[str]:
        """Paso 1: deja el repo sin draft ni publish branch locales."""
        stale = (request.draft_branch, request.publish_branch)

        # Un deploy que murió a medias puede haber dejado HEAD en draft;
        # git no borra la branch en la que estás parado. No se usa checkout:
        # draft trackea public/ y dev lo ignora, así que checkout lo borraría
        if self._vcs.current_branch() in stale:
            logger.warning(
                f"HEAD está en '{self._vcs.current_branch()}', "
                f"moviéndolo a '{request.working_branch}' sin tocar archivos"
            )
            self._vcs.point_head(request.working_branch)
            self._vcs.reset_index()

        return [branch for branch in stale if guarded_delete(self._vcs, branch)]

    def _snapshot(self, request: PublishRequest) -> str:
        """Paso 3: add forzado del build y commit."""
        build_dir = self._vcs.working_dir / request.build_output
        if not build_dir.is_dir():
            raise BuildOutputError(
                3, f"No existe el build output: {build_dir}. ¿Corriste el build?"
            )
        if not any(p.is_file() for p in build_dir.rglob("*")):
            raise BuildOutputError(3, f"El build output está vacío: {build_dir}")

        self._vcs.add(request.build_output, force=True)
        return self._vcs.commit(request.commit_message, all_tracked=True)
