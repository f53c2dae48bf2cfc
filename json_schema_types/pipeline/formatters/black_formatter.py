"""
Black formatter for generated Python modules.
"""

from __future__ import annotations

import logging

from ..config import FormatterConfig

logger = logging.getLogger(__name__)


class BlackFormatter:
    """Formatter using black for Python code."""

    def __init__(self):
        self._black = None
        self._available = None

    def is_available(self) -> bool:
        """Check if black is installed."""
        if self._available is None:
            try:
                import black

                self._black = black
                self._available = True
            except ImportError:
                self._available = False
        return self._available

    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format Python code using black.

        Args:
            code: Python source code to format
            config: Formatter configuration

        Returns:
            Formatted code, or the code unchanged when black is not installed
        """
        if not self.is_available():
            logger.warning("Formatting requested but black is not installed; output left unformatted")
            return code

        black = self._black

        target_versions = set()
        target = getattr(black.TargetVersion, config.target_version.upper(), None)
        if target is not None:
            target_versions.add(target)

        mode = black.Mode(
            target_versions=target_versions,
            line_length=config.line_length,
            string_normalization=config.string_normalization,
            magic_trailing_comma=config.magic_trailing_comma,
        )

        try:
            return black.format_str(code, mode=mode)
        except black.InvalidInput as e:
            logger.warning("black could not format the generated module: %s", e)
            return code
