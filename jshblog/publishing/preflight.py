"""
preflight.py — Verificaciones antes de publicar.

No modifica nada: solo revisa que el deploy tenga con qué correr.
Lo usa el comando `health` del CLI.

Checks:
    - git está en PATH y trae `git subtree`
    - deploy.repo_path es un repo git
    - existe la working branch
    - el remoto está configurado
    - el build output existe y no está vacío

Uso:
    from jshblog.publishing.preflight import run_preflight
    for check in run_preflight(config.deploy):
        print(check.name, check.ok, check.detail)
"""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from jshblog.config import DeployConfig
from jshblog.publishing.vcs import GitClient, VCSError, VersionControl


@dataclass
class CheckResult:
    """
    Resultado de una verificación.

    required=False marca checks que solo advierten.
    """
    name: str
    ok: bool
    detail: str
    required: bool = True


def check_git_subtree() -> CheckResult:
    """git subtree vive en contrib/ y algunas distros no lo instalan."""
    if shutil.which("git") is None:
        return CheckResult("git", False, "git no encontrado en PATH")
    try:
        result = subprocess.run(
            ["git", "subtree", "-h"],
            capture_output=True,
            text=True,
            timeout=30,
        )
    except subprocess.TimeoutExpired:
        return CheckResult("git subtree", False, "git timeout (30s)")

    output = result.stdout + result.stderr
    if "git subtree" in output and "not a git command" not in output:
        return CheckResult("git subtree", True, "disponible")
    return CheckResult("git subtree", False, "no instalado (git-subtree)")


def check_build_output(working_dir: Path, build_output: str) -> CheckResult:
    build_dir = working_dir / build_output
    if not build_dir.is_dir():
        return CheckResult("build output", False, f"no existe: {build_dir}")
    files = [p for p in build_dir.rglob("*") if p.is_file()]
    if not files:
        return CheckResult("build output", False, f"vacío: {build_dir}")
    return CheckResult("build output", True, f"{len(files)} archivos en {build_dir}")


def check_repository(vcs: VersionControl, deploy: DeployConfig) -> list[CheckResult]:
    """Checks sobre un repo ya abierto."""
    checks = []

    branch = vcs.current_branch()
    checks.append(CheckResult(
        "HEAD", True, branch or "(detached)", required=False,
    ))

    if vcs.branch_exists(deploy.working_branch):
        checks.append(CheckResult("working branch", True, deploy.working_branch))
    else:
        checks.append(CheckResult(
            "working branch", False, f"no existe: {deploy.working_branch}",
        ))

    if vcs.has_remote(deploy.remote):
        checks.append(CheckResult("remote", True, deploy.remote))
    else:
        checks.append(CheckResult(
            "remote", False, f"no configurado: {deploy.remote}",
        ))

    for stale in (deploy.draft_branch, deploy.publish_branch):
        if vcs.branch_exists(stale):
            checks.append(CheckResult(
                f"branch {stale}", True,
                "existe localmente, el deploy la va a borrar",
                required=False,
            ))

    checks.append(check_build_output(vcs.working_dir, deploy.build_output))
    return checks


def run_preflight(deploy: DeployConfig) -> list[CheckResult]:
    """Corre todos los checks contra deploy.repo_path."""
    checks = [check_git_subtree()]
    try:
        vcs = GitClient.open(deploy.repo_path)
    except (FileNotFoundError, VCSError) as e:
        checks.append(CheckResult("repositorio", False, str(e)))
        return checks

    checks.append(CheckResult("repositorio", True, str(vcs.working_dir)))
    checks.extend(check_repository(vcs, deploy))
    return checks
