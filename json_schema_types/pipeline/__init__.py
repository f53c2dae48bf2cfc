"""
Pipeline - JSON Schema to typed accessor wrappers.

1. Schema model: load the document into URI-addressable schema nodes
2. Analyzer: Orchestrator and Builders record wrapper types in a type model
3. AST backend: render the type model as Python or Java source
4. Formatter: optional post-processing (black, Python only)
5. Writer: atomic writes of the generated files
"""

from __future__ import annotations

from .config import CodeGeneratorConfig, FormatterConfig, OutputConfig, OutputMode
from .errors import (
    EmitterError,
    GeneratorError,
    JsonSchemaTypesError,
    MemberAlreadyExistsError,
    OutputError,
    SchemaError,
    TypeAlreadyExistsError,
)
from .generator import PipelineGenerator
from .writer import AtomicWriter, write_generated_files

__all__ = [
    "AtomicWriter",
    "CodeGeneratorConfig",
    "EmitterError",
    "FormatterConfig",
    "GeneratorError",
    "JsonSchemaTypesError",
    "MemberAlreadyExistsError",
    "OutputConfig",
    "OutputError",
    "OutputMode",
    "PipelineGenerator",
    "SchemaError",
    "TypeAlreadyExistsError",
    "write_generated_files",
]
