"""
Atomic file writer for generated sources.

Ensures that file writes are atomic to prevent half-written output
from interrupted operations.
"""

from __future__ import annotations

import ast
import logging
import tempfile
from pathlib import Path

from ..config import OutputConfig, OutputMode
from ..errors import EmitterError, OutputError

logger = logging.getLogger(__name__)


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file
    """

    def write(self, path: Path, content: str, language: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            language: Language for validation ("python" or "java")
            validate: Whether to validate before finalizing

        Raises:
            EmitterError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self.validate(content, language)

            temp_path.replace(path)
            logger.debug("Wrote %s", path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

    def validate(self, content: str, language: str) -> None:
        """Check generated content before it replaces the target.

        Raises:
            EmitterError: If validation fails
        """
        if language == "python":
            try:
                ast.parse(content)
            except SyntaxError as e:
                raise EmitterError(f"Generated Python code is not valid: {e}") from e
        elif language == "java":
            # Basic structural checks, no Java parser available
            if "class " not in content:
                raise EmitterError("Generated Java code has no type definitions")
            open_braces = content.count("{")
            close_braces = content.count("}")
            if open_braces != close_braces:
                raise EmitterError(f"Generated Java code has unbalanced braces: {open_braces} open, {close_braces} close")


def output_paths(output: Path, files: dict[str, str], language: str) -> dict[Path, str]:
    """
    Map generated files onto target paths.

    Python output is a single module written to ``output``; Java output is a
    source tree written below the ``output`` directory.
    """
    if language == "python":
        if len(files) != 1:
            raise OutputError(f"Expected one Python module, got {len(files)}")
        return {output: next(iter(files.values()))}
    return {output / relative: content for relative, content in files.items()}


def write_generated_files(
    output: Path,
    files: dict[str, str],
    language: str,
    config: OutputConfig | None = None,
    writer: AtomicWriter | None = None,
) -> list[Path]:
    """
    Write all generated files, or nothing if any target is in the way.

    Returns:
        The written paths

    Raises:
        OutputError: If a target exists and the mode does not allow overwriting
    """
    config = config or OutputConfig()
    writer = writer or AtomicWriter()
    targets = output_paths(output, files, language)

    if config.mode is OutputMode.ERROR_IF_EXISTS:
        existing = [str(path) for path in targets if path.exists()]
        if existing:
            raise OutputError(f"Output file already exists: {', '.join(existing)}. Use force mode to overwrite.")

    for path, content in targets.items():
        writer.write(path, content, language, validate=config.validate_before_write)
    return list(targets)
