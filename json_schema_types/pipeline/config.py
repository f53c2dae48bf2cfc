"""
Configuration for the accessor generator pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Languages with a rendering backend
SUPPORTED_LANGUAGES = ("python", "java")


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to validate code before writing
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True


@dataclass
class FormatterConfig:
    """Configuration for the optional post-processing formatter (Python output only)."""

    # Whether formatting is enabled
    enabled: bool = False

    # Line length for the formatter
    line_length: int = 100

    # Python version target (e.g., "py312", "py313")
    target_version: str = "py312"

    # Whether to use string normalization (convert single quotes to double)
    string_normalization: bool = True

    magic_trailing_comma: bool = True


@dataclass
class CodeGeneratorConfig:
    """Configuration options for code generation."""

    # Target language ("python" or "java")
    language: str = "python"

    # Package for Java output (the top-level namespace of the generated types)
    java_package: str = ""

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Embed the pretty-printed schema JSON in each generated type's documentation
    include_schema_json_in_docs: bool = True

    # Fail instead of skipping property/item entries that are not object schemas
    strict_schema_shapes: bool = False

    # Upper bound on name variations tried before giving up on a type or member name
    max_name_attempts: int = 1000

    # Formatter configuration
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    # Output configuration
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary. Unknown keys are ignored."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    validate_before_write=v.get("validate_before_write", True),
                )
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "language": self.language,
            "java_package": self.java_package,
            "add_generation_comment": self.add_generation_comment,
            "include_schema_json_in_docs": self.include_schema_json_in_docs,
            "strict_schema_shapes": self.strict_schema_shapes,
            "max_name_attempts": self.max_name_attempts,
            "formatter": {
                "enabled": self.formatter.enabled,
                "line_length": self.formatter.line_length,
                "target_version": self.formatter.target_version,
                "string_normalization": self.formatter.string_normalization,
                "magic_trailing_comma": self.formatter.magic_trailing_comma,
            },
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
            },
        }
