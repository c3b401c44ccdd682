"""
logger.py — Logging para jshblog usando Rich + archivo.

Dual output:
- Rich console: colores para uso interactivo (deploy desde la terminal)
- Archivo rotativo: logs/jshblog.log para revisar deploys fallidos después

Uso:
    from jshblog.utils.logger import get_logger, console
    logger = get_logger("jshblog.publishing")
    logger.step(1, 6, "Limpiando branches")
    logger.success("Publicado en origin/master")
    logger.error("git push rechazado")
"""

from __future__ import annotations

import io
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

# Windows usa cp1252 por defecto; no envolver stdout dentro de pytest
# (choca con el sistema de captura)
_in_pytest = "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ
if sys.platform == "win32" and not _in_pytest:
    if hasattr(sys.stdout, "buffer"):
        sys.stdout = io.TextIOWrapper(
            sys.stdout.buffer, encoding="utf-8", errors="replace"
        )
    if hasattr(sys.stderr, "buffer"):
        sys.stderr = io.TextIOWrapper(
            sys.stderr.buffer, encoding="utf-8", errors="replace"
        )

# Tema de la consola, mismos tonos que el blog (papel y tinta)
jsh_theme = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "step": "bold rgb(102,51,153)",  # #663399, theme_color del manifest
    "git": "dim",
})

console = Console(theme=jsh_theme)

# ================================================================
# File logging setup
# ================================================================

_file_logger: logging.Logger | None = None


def _setup_file_logger() -> logging.Logger:
    """Configura el logger de archivo con rotación."""
    global _file_logger
    if _file_logger is not None:
        return _file_logger

    # No crear logs en pytest
    if _in_pytest:
        _file_logger = logging.getLogger("jshblog.null")
        _file_logger.addHandler(logging.NullHandler())
        return _file_logger

    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)

    _file_logger = logging.getLogger("jshblog.file")
    _file_logger.setLevel(logging.DEBUG)

    if not _file_logger.handlers:
        handler = RotatingFileHandler(
            log_dir / "jshblog.log",
            maxBytes=2 * 1024 * 1024,  # 2 MB
            backupCount=3,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        _file_logger.addHandler(handler)

    return _file_logger


class JshLogger:
    """
    Logger que escribe en la consola Rich y en el archivo de log.

    Cada módulo crea el suyo con un nombre para saber de dónde
    viene cada mensaje.

    Args:
        name: Nombre del módulo (ej: "jshblog.sequencer")
    """

    def __init__(self, name: str):
        self._name = name
        self._file = _setup_file_logger()

    def info(self, message: str) -> None:
        """Mensaje informativo (cyan)."""
        console.print(f"[info]i  {escape(message)}[/info]", highlight=False)
        self._file.info(f"[{self._name}] {message}")

    def success(self, message: str) -> None:
        """Mensaje de éxito (verde)."""
        console.print(f"[success][OK] {escape(message)}[/success]", highlight=False)
        self._file.info(f"[{self._name}] OK: {message}")

    def warning(self, message: str) -> None:
        """Mensaje de advertencia (amarillo)."""
        console.print(f"[warning][!] {escape(message)}[/warning]", highlight=False)
        self._file.warning(f"[{self._name}] {message}")

    def error(self, message: str) -> None:
        """Mensaje de error (rojo)."""
        console.print(f"[error][X] {escape(message)}[/error]", highlight=False)
        self._file.error(f"[{self._name}] {message}")

    def git(self, output: str) -> None:
        """Output crudo de git, tal cual lo imprimió el comando."""
        if not output:
            return
        console.print(f"[git]{escape(output)}[/git]", highlight=False)
        self._file.debug(f"[{self._name}] git: {output}")

    def step(self, number: int, total: int, message: str) -> None:
        """Mensaje de paso en un proceso."""
        console.print(f"[step]  \\[{number}/{total}] {escape(message)}[/step]", highlight=False)
        self._file.info(f"[{self._name}] [{number}/{total}] {message}")


def get_logger(name: str = "jshblog") -> JshLogger:
    """
    Obtiene un logger para el módulo especificado.

    Ejemplo:
        logger = get_logger("jshblog.cli")
        logger.info("Publicando...")
    """
    return JshLogger(name)
