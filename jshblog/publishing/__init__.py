"""
publishing/ — Todo lo relacionado con publicar el sitio.

Módulos:
- vcs.py        → Interfaz de git y su implementación con GitPython
- sequencer.py  → Los seis pasos del deploy a la branch de hosting
- preflight.py  → Checks de solo lectura antes de publicar
"""
