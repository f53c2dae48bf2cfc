import json
from pathlib import Path

import pytest

from json_schema_types import CodeGeneratorConfig, PipelineGenerator


def load_test_data():
    """Load test cases from JSON file"""
    test_data_path = Path(__file__).parent / "test_data" / "accessor_rules_tests.json"
    with open(test_data_path) as f:
        return json.load(f)


def ids(test_cases):
    return [test_case["name"] for test_case in test_cases]


@pytest.mark.parametrize("test_case", load_test_data(), ids=ids(load_test_data()))
def test_accessor_rules_python(test_case):
    """Test getter generation for Python"""
    generator = PipelineGenerator("test_schema", test_case["schema"], CodeGeneratorConfig(), "python")
    output = generator.generate()

    for expected in test_case["expected_python"]:
        assert expected in output, f"Expected '{expected}' not found in output:\n{output}"
    for unexpected in test_case["not_expected_python"]:
        assert unexpected not in output, f"Unexpected '{unexpected}' found in output:\n{output}"


@pytest.mark.parametrize("test_case", load_test_data(), ids=ids(load_test_data()))
def test_accessor_rules_java(test_case):
    """Test getter generation for Java"""
    generator = PipelineGenerator("test_schema", test_case["schema"], CodeGeneratorConfig(), "java")
    output = generator.generate()

    for expected in test_case["expected_java"]:
        assert expected in output, f"Expected '{expected}' not found in output:\n{output}"
    for unexpected in test_case["not_expected_java"]:
        assert unexpected not in output, f"Unexpected '{unexpected}' found in output:\n{output}"


if __name__ == "__main__":
    pytest.main([__file__])
