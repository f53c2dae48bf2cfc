"""
Rendering backends: turn the type model into source code.
"""

from __future__ import annotations

from .base import AstBackend
from .java_backend import JavaAstBackend
from .python_backend import PythonAstBackend

# Language name -> backend class
BACKENDS: dict[str, type[AstBackend]] = {
    "python": PythonAstBackend,
    "java": JavaAstBackend,
}

__all__ = [
    "AstBackend",
    "BACKENDS",
    "JavaAstBackend",
    "PythonAstBackend",
]
