"""
cli.py — Punto de entrada del tooling del blog.

Comandos:
    python -m jshblog deploy            → Publica public/ en origin/master
    python -m jshblog config --show     → Muestra configuración
    python -m jshblog config --validate → Valida configuración
    python -m jshblog health            → Verifica que el deploy pueda correr

`deploy` también se instala solo como `jsh-deploy`, sin flags ni
argumentos. El build del sitio tiene que haber corrido antes.

Uso desde código (testing):
    from click.testing import CliRunner
    from jshblog.cli import main
    CliRunner().invoke(main, ["deploy"])
"""

from __future__ import annotations

import sys

import click
from rich.panel import Panel
from rich.table import Table

from jshblog import __version__
from jshblog.config import load_config
from jshblog.publishing.preflight import run_preflight
from jshblog.publishing.sequencer import PublishError, PublishRequest, PublishSequencer
from jshblog.publishing.vcs import GitClient, VCSError
from jshblog.utils.logger import get_logger, console as rich_console

logger = get_logger("jshblog.cli")


@click.group()
@click.version_option(version=__version__, prog_name="jshblog")
def main():
    """jsh — tooling del blog."""
    pass


@main.command()
def deploy():
    """Publica el build en la branch de hosting."""
    cfg = load_config()
    request = PublishRequest.from_config(cfg.deploy)

    try:
        vcs = GitClient.open(cfg.deploy.repo_path)
        result = PublishSequencer(vcs).publish(request)
    except PublishError as e:
        logger.error(f"Deploy detenido en el paso {e.step}")
        sys.exit(e.exit_code)
    except (FileNotFoundError, VCSError) as e:
        logger.error(str(e))
        sys.exit(1)

    rich_console.print(Panel(
        f"[bold]Remoto:[/bold] {result.remote}/{result.remote_ref}\n"
        f"[bold]Draft:[/bold] {result.draft_commit[:7]}\n"
        f"[bold]Publicado:[/bold] {result.publish_commit[:7]}\n"
        f"[bold]Sitio:[/bold] {cfg.site.site_url}",
        title=f"{cfg.site.title} publicado",
        border_style="green",
    ))


@main.command()
@click.option("--show", is_flag=True, help="Muestra la configuración actual")
@click.option("--validate", is_flag=True, help="Valida la configuración")
def config(show: bool, validate: bool):
    """Gestiona la configuración del blog."""
    cfg = load_config()

    if show:
        tabla = Table(title="Configuración")
        tabla.add_column("Parámetro", style="cyan")
        tabla.add_column("Valor", style="green")

        tabla.add_row("Título", cfg.site.title)
        tabla.add_row("Autor", cfg.site.author)
        tabla.add_row("URL", cfg.site.site_url)
        tabla.add_row("Twitter", cfg.site.social.twitter or "(ninguno)")
        tabla.add_row("Repo", cfg.deploy.repo_path)
        tabla.add_row("Build output", cfg.deploy.build_output)
        tabla.add_row("Working branch", cfg.deploy.working_branch)
        tabla.add_row("Draft branch", cfg.deploy.draft_branch)
        tabla.add_row("Publish branch", cfg.deploy.publish_branch)
        tabla.add_row(
            "Push", f"{cfg.deploy.remote} {cfg.deploy.publish_branch}:{cfg.deploy.remote_ref}"
        )

        rich_console.print(tabla)

    if validate and not _validate_config(cfg):
        sys.exit(1)


@main.command()
def health():
    """Verifica que el deploy pueda correr."""
    cfg = load_config()
    checks = run_preflight(cfg.deploy)

    errores = []
    for check in checks:
        if check.ok:
            logger.success(f"{check.name}: {check.detail}")
        elif check.required:
            errores.append(f"{check.name}: {check.detail}")
            logger.error(f"{check.name}: {check.detail}")
        else:
            logger.warning(f"{check.name}: {check.detail}")

    if errores:
        rich_console.print(Panel(
            "\n".join(f"❌ {e}" for e in errores),
            title="Problemas encontrados",
            border_style="red",
        ))
        sys.exit(1)

    rich_console.print(Panel(
        "✅ Listo para publicar",
        title="Estado",
        border_style="green",
    ))


# ============================================================
# Funciones auxiliares (privadas)
# ============================================================

def _validate_config(cfg) -> bool:
    """Valida la configuración y muestra resultado."""
    problemas = []
    deploy_cfg = cfg.deploy

    if not deploy_cfg.build_output or deploy_cfg.build_output.strip("/.") == "":
        problemas.append("deploy.build_output no puede ser la raíz del repo")
    if deploy_cfg.working_branch in (deploy_cfg.draft_branch, deploy_cfg.publish_branch):
        problemas.append(
            f"deploy.working_branch '{deploy_cfg.working_branch}' se borraría en cada deploy"
        )
    if deploy_cfg.draft_branch == deploy_cfg.publish_branch:
        problemas.append("deploy.draft_branch y deploy.publish_branch deben ser distintas")
    if "${" in deploy_cfg.repo_path:
        problemas.append(f"Variable sin resolver en deploy.repo_path: {deploy_cfg.repo_path}")

    if problemas:
        for p in problemas:
            logger.error(p)
        return False

    logger.success("Configuración válida")
    return True


if __name__ == "__main__":
    main()
