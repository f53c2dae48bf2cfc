"""
Base class for rendering backends.

A backend turns the type model of one pass into source files. Each
backend also tells the generator which type and member names it cannot
accept, so the builders can vary them away before declaring.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import jinja2

from ..analyzer.ir_nodes import DefinedType, Expression, Literal, TypeModel, TypeRef
from ..analyzer.raw_types import RawType
from ..config import CodeGeneratorConfig

TEMPLATES_DIR = Path(__file__).parent.parent.parent.resolve() / "templates"


class AstBackend(ABC):
    """Abstract base class for rendering backends."""

    # Raw value type -> language type
    TYPE_MAP: dict[RawType, str] = {}

    # File extension
    FILE_EXTENSION: str = ""

    # Names a generated type must not take
    RESERVED_TYPE_NAMES: frozenset[str] = frozenset()

    # Names a generated method must not take
    RESERVED_MEMBER_NAMES: frozenset[str] = frozenset()

    INDENT = "    "  # 4 spaces

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(TEMPLATES_DIR),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
            undefined=jinja2.StrictUndefined,
        )

    def create_type_model(self) -> TypeModel:
        """A fresh type model honoring this backend's reserved names."""
        return TypeModel(
            reserved_type_names=self.RESERVED_TYPE_NAMES,
            reserved_member_names=self.RESERVED_MEMBER_NAMES,
        )

    @abstractmethod
    def generate(self, model: TypeModel, generation_comment: str = "") -> dict[str, str]:
        """
        Render the model.

        Args:
            model: Declarations of one generation pass
            generation_comment: Comment line to put at the top of every file

        Returns:
            Mapping of relative file path -> source code
        """

    def type_name(self, defined_type: DefinedType) -> str:
        """How generated code refers to a generated type."""
        return defined_type.qualified_name

    def translate_type(self, type_ref: TypeRef) -> str:
        """Language type for a generated type or raw value type."""
        if type_ref.defined_type is not None:
            return self.type_name(type_ref.defined_type)
        return self.TYPE_MAP[type_ref.raw_type]

    @abstractmethod
    def format_default_value(self, literal: Literal) -> str:
        """Literal default value in the target language."""

    @abstractmethod
    def render_expression(self, expression: Expression) -> str:
        """Source text of a method body expression."""

    def _render_template(self, template_name: str, **context: Any) -> str:
        return self.jinja_env.get_template(template_name).render(**context)

    def _indent_lines(self, lines: list[str], level: int = 1) -> list[str]:
        """Add indentation to a list of lines, leaving blank lines empty."""
        prefix = self.INDENT * level
        return [prefix + line if line.strip() else "" for line in lines]
