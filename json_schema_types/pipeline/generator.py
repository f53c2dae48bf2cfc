"""
Pipeline generator: schema document in, accessor source files out.

1. Load the schema document into schema nodes (SchemaStore)
2. Build the wrapper types for the root node and everything reachable from it (Orchestrator)
3. Render the type model (AST backend)
4. Optionally format the result (black, Python only)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .. import __version__
from ..cli_utils import reconstruct_command_line
from ..utils import uri_leaf
from .analyzer import Orchestrator
from .ast_backends import BACKENDS
from .config import CodeGeneratorConfig
from .errors import GeneratorError
from .formatters import BlackFormatter
from .schema_model import Schema, SchemaStore
from .schema_model.store import DEFAULT_DOCUMENT_URI

logger = logging.getLogger(__name__)


class PipelineGenerator:
    """Generates accessor wrapper types for one schema document."""

    def __init__(
        self,
        name: str,
        schema: dict[str, Any] | Schema,
        config: CodeGeneratorConfig | None = None,
        language: str | None = None,
        schema_uri: str = DEFAULT_DOCUMENT_URI,
        store: SchemaStore | None = None,
    ):
        """
        Initialize the generator.

        Args:
            name: Output name (the Python module name)
            schema: Decoded schema document, or an already loaded root node
            config: Code generation configuration
            language: Target language, overriding ``config.language``
            schema_uri: URI identifying ``schema`` when it is a decoded document
            store: Schema store to load into (a fresh one by default)
        """
        self.name = name
        self.config = config or CodeGeneratorConfig()
        self.language = language or self.config.language
        if self.language not in BACKENDS:
            raise GeneratorError(f"Language not supported: {self.language}")

        self.store = store or SchemaStore()
        self.root = schema if isinstance(schema, Schema) else self.store.load(schema, schema_uri)
        self.backend = BACKENDS[self.language](self.config)
        self.orchestrator: Orchestrator | None = None

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        config: CodeGeneratorConfig | None = None,
        language: str | None = None,
        name: str | None = None,
    ) -> PipelineGenerator:
        """Create a generator for the schema document stored at ``path``."""
        store = SchemaStore()
        root = store.load_file(path)
        if name is None:
            name = uri_leaf(root.uri) or "generated"
        return cls(name, root, config, language, store=store)

    def build(self) -> Orchestrator:
        """Run the accessor generator over the whole document. A fresh pass every call."""
        namespace_name = self.config.java_package if self.language == "java" else self.name
        orchestrator = Orchestrator(self.backend.create_type_model(), namespace_name, self.config)
        orchestrator.get_builder(self.root)
        orchestrator.finish()
        logger.debug("Generated %d types from %s", len(orchestrator.type_model.all_types()), self.root.uri)
        self.orchestrator = orchestrator
        return orchestrator

    def generate_files(self) -> dict[str, str]:
        """Generate source files: relative path -> source code."""
        orchestrator = self.build()
        files = self.backend.generate(orchestrator.type_model, self._generate_command_comment())

        if self.language == "python" and self.config.formatter.enabled:
            formatter = BlackFormatter()
            files = {path: formatter.format(source, self.config.formatter) for path, source in files.items()}
        return files

    def generate(self) -> str:
        """Generate all sources as one string (the module, for Python output)."""
        files = self.generate_files()
        return "\n".join(files[path] for path in sorted(files))

    def _generate_command_comment(self) -> str:
        """Generate a command line comment for the top of generated files"""
        if not self.config.add_generation_comment:
            return ""

        comment_prefix = "#" if self.language == "python" else "//"

        try:
            from ..json_schema_types import json_schema_types as click_command  # noqa

            command_line = reconstruct_command_line(click_command)
        except (ImportError, AttributeError):
            command_line = "json_schema_types"

        return f"{comment_prefix} Generated by json_schema_types v{__version__} : {command_line}"
