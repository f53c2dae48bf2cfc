"""
Writer module: puts generated sources on disk.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter, output_paths, write_generated_files

__all__ = [
    "AtomicWriter",
    "output_paths",
    "write_generated_files",
]
