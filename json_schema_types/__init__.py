"""JSON Schema Types

Generates statically-typed accessor wrappers from JSON Schema definitions.
Each object (with properties), array or untyped schema node becomes a
type wrapping the decoded JSON value, with schema-aware getters.
Supports Python and Java output.
"""

__version__ = "1.0.0"

from .pipeline import (
    AtomicWriter,
    CodeGeneratorConfig,
    FormatterConfig,
    JsonSchemaTypesError,
    OutputConfig,
    OutputMode,
    PipelineGenerator,
)

__all__ = [
    "PipelineGenerator",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "OutputConfig",
    "OutputMode",
    "JsonSchemaTypesError",
    "AtomicWriter",
]
