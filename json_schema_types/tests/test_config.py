import pytest

from json_schema_types import CodeGeneratorConfig, OutputMode, PipelineGenerator
from json_schema_types.pipeline.errors import GeneratorError


class TestCodeGeneratorConfig:
    def test_defaults(self):
        config = CodeGeneratorConfig()
        assert config.language == "python"
        assert config.add_generation_comment
        assert not config.strict_schema_shapes
        assert config.max_name_attempts == 1000
        assert not config.formatter.enabled
        assert config.output.mode is OutputMode.ERROR_IF_EXISTS

    def test_from_dict(self):
        config = CodeGeneratorConfig.from_dict(
            {
                "language": "java",
                "java_package": "com.example",
                "formatter": {"enabled": True, "line_length": 88},
                "output": {"mode": "force", "validate_before_write": False},
                "unknown_option": 1,
            }
        )
        assert config.language == "java"
        assert config.java_package == "com.example"
        assert config.formatter.enabled
        assert config.formatter.line_length == 88
        assert config.formatter.target_version == "py312"
        assert config.output.mode is OutputMode.FORCE
        assert not config.output.validate_before_write
        assert not hasattr(config, "unknown_option")

    def test_round_trip(self):
        config = CodeGeneratorConfig.from_dict({"include_schema_json_in_docs": False, "max_name_attempts": 50})
        assert CodeGeneratorConfig.from_dict(config.to_dict()) == config
        assert config.to_dict()["output"]["mode"] == "error"

    def test_invalid_output_mode(self):
        with pytest.raises(ValueError):
            CodeGeneratorConfig.from_dict({"output": {"mode": "sometimes"}})


class TestLanguageSelection:
    def test_language_argument_overrides_config(self):
        schema = {"type": "object", "properties": {"a": {"type": "string"}}}
        generator = PipelineGenerator("schema", schema, CodeGeneratorConfig(language="java"), "python")
        assert generator.language == "python"

    def test_unsupported_language(self):
        with pytest.raises(GeneratorError):
            PipelineGenerator("schema", {"type": "string"}, language="cobol")


if __name__ == "__main__":
    pytest.main([__file__])
