"""
__main__.py — Permite ejecutar jshblog como módulo.

    python -m jshblog deploy
"""

from jshblog.cli import main

if __name__ == "__main__":
    main()
