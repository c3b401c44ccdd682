"""
config.py — Carga y gestiona la configuración del blog.

Se encarga de:
1. Cargar config.yaml (metadata del sitio + parámetros del deploy)
2. Cargar .env (valores locales, ej: la ruta del repo en otra máquina)
3. Resolver variables de entorno ${VAR} en los valores de config

Los valores por defecto reproducen el deploy original del blog:
se publica `public/` en `master` de `origin`, y se vuelve a `dev`.

Uso:
    from jshblog.config import load_config
    config = load_config()
    print(config.deploy.publish_branch)  # "master"
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv


# ============================================================
# Dataclasses de configuración
# ============================================================

@dataclass
class SocialConfig:
    """Cuentas sociales que muestra el bio del blog."""
    twitter: str = "js_herbert"


@dataclass
class SiteConfig:
    """Metadata del sitio (lo que el generador expone como siteMetadata)."""
    title: str = "jsh"
    author: str = "Jonathon Herbert"
    description: str = ""
    site_url: str = "https://gatsby-starter-blog-demo.netlify.com/"
    social: SocialConfig = field(default_factory=SocialConfig)


@dataclass
class DeployConfig:
    """
    Parámetros del deploy.

    build_output es relativo a la raíz del repo y es también el
    prefijo del subtree split.
    """
    repo_path: str = "."
    build_output: str = "public"
    draft_branch: str = "draft"
    publish_branch: str = "master"
    working_branch: str = "dev"
    remote: str = "origin"
    remote_ref: str = "master"
    commit_message: str = "Publish to master"


@dataclass
class AppConfig:
    """Configuración completa de la app."""
    site: SiteConfig = field(default_factory=SiteConfig)
    deploy: DeployConfig = field(default_factory=DeployConfig)


# ============================================================
# Funciones de carga
# ============================================================

def _resolve_env_vars(value: str) -> str:
    """
    Resuelve variables de entorno en un string.

    Ejemplo:
        "${BLOG_REPO_PATH}" → "/home/jsh/blog"

    Si la variable no existe se deja el placeholder intacto.
    """
    patron = re.compile(r"\$\{(\w+)\}")

    def reemplazar(match: re.Match) -> str:
        return os.environ.get(match.group(1), match.group(0))

    return patron.sub(reemplazar, value)


def _resolve_env_recursive(data: Any) -> Any:
    """Resuelve ${VAR} recursivamente en dicts y listas del YAML."""
    if isinstance(data, str):
        return _resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_recursive(item) for item in data]
    return data


def _dict_to_dataclass(data: dict, cls: type) -> Any:
    """
    Convierte un diccionario a una dataclass, ignorando keys desconocidas.

    Un YAML con keys extra (o viejas) no debe romper el deploy.
    """
    campos_validos = {f.name for f in cls.__dataclass_fields__.values()}
    datos_filtrados = {k: v for k, v in data.items() if k in campos_validos}
    return cls(**datos_filtrados)


def _load_site(data: dict) -> SiteConfig:
    """SiteConfig con la sección social anidada."""
    social = _dict_to_dataclass(data.get("social") or {}, SocialConfig)
    site = _dict_to_dataclass(
        {k: v for k, v in data.items() if k != "social"}, SiteConfig
    )
    site.social = social
    return site


def _find_config_dir() -> Path:
    """
    Encuentra el directorio raíz del proyecto (donde está config.yaml).

    Busca hacia arriba desde el directorio actual, así el deploy
    funciona desde cualquier subdirectorio del blog.
    """
    current = Path.cwd()
    for parent in [current] + list(current.parents):
        if (parent / "config.yaml").exists():
            return parent
    return current


def load_config(config_path: Path | None = None) -> AppConfig:
    """
    Carga la configuración completa.

    Pasos:
    1. Carga .env para tener las variables de entorno disponibles
    2. Lee config.yaml
    3. Resuelve ${VARIABLES} en los valores del YAML
    4. Convierte cada sección a su dataclass

    Un repo_path relativo se resuelve contra el directorio donde
    vive config.yaml, no contra el cwd.

    Args:
        config_path: Ruta al config.yaml. Si es None, busca automáticamente.

    Returns:
        AppConfig lista para usar.
    """
    proyecto_dir = _find_config_dir()
    env_path = proyecto_dir / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    if config_path is None:
        config_path = proyecto_dir / "config.yaml"

    if not config_path.exists():
        return AppConfig()

    with open(config_path, "r", encoding="utf-8") as f:
        raw_config = yaml.safe_load(f) or {}

    config_resuelto = _resolve_env_recursive(raw_config)

    app_config = AppConfig(
        site=_load_site(config_resuelto.get("site") or {}),
        deploy=_dict_to_dataclass(
            config_resuelto.get("deploy") or {}, DeployConfig
        ),
    )

    repo_path = Path(app_config.deploy.repo_path)
    if not repo_path.is_absolute():
        app_config.deploy.repo_path = str(config_path.parent / repo_path)

    return app_config
