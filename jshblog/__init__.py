"""
jshblog — Tooling del blog jsh.

El sitio lo genera un framework estático externo; este paquete solo
se encarga de lo que pasa alrededor del build:
- config.py    → Metadata del sitio y parámetros del deploy
- publishing/  → Publicar public/ en la branch de hosting
- utils/       → Logging

Uso:
    jsh-deploy
    python -m jshblog health
"""

__version__ = "1.0.0"
__author__ = "Jonathon Herbert"
