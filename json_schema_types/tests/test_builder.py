import logging

import pytest

from json_schema_types import CodeGeneratorConfig, PipelineGenerator
from json_schema_types.pipeline.analyzer import (
    ItemLookup,
    KeyPresence,
    NewInstance,
    Orchestrator,
    PropertyLookup,
    RawType,
    TypeModel,
    resolve_raw_type,
)
from json_schema_types.pipeline.errors import GeneratorError
from json_schema_types.pipeline.schema_model import SchemaStore


def build(schema, **config):
    generator = PipelineGenerator("test_schema", schema, CodeGeneratorConfig.from_dict(config))
    return generator, generator.build()


OTHER_DOCUMENT = {"type": "object", "properties": {"name": {"type": "string"}}}


def build_two_documents(property_order, language="python", **config):
    """Root document with an inline "other" object and "ext" referencing a second document, other.json"""
    documents = {"http://example.com/other.json": OTHER_DOCUMENT}
    properties = {
        "other": {"type": "object", "properties": {"id": {"type": "integer"}}},
        "ext": {"$ref": "other.json"},
    }
    schema = {"type": "object", "properties": {name: properties[name] for name in property_order}}
    generator = PipelineGenerator(
        "test_schema",
        schema,
        CodeGeneratorConfig.from_dict(config),
        language,
        schema_uri="http://example.com/schema.json",
        store=SchemaStore(loader=documents.__getitem__),
    )
    return generator, generator.build()


def find_type(orchestrator, qualified_name):
    for defined_type in orchestrator.type_model.all_types():
        if defined_type.qualified_name == qualified_name:
            return defined_type
    raise AssertionError(f"No type {qualified_name}, got {type_names(orchestrator)}")


def type_names(orchestrator):
    return sorted(t.qualified_name for t in orchestrator.type_model.all_types())


def method_names(defined_type):
    return [method.name for method in defined_type.methods]


class TestRawTypes:
    def test_single_type_names(self):
        assert resolve_raw_type({"array"}) is RawType.JSON_ARRAY
        assert resolve_raw_type({"boolean"}) is RawType.BOOLEAN
        assert resolve_raw_type({"integer"}) is RawType.INTEGER
        assert resolve_raw_type({"null"}) is RawType.NULL
        assert resolve_raw_type({"number"}) is RawType.NUMBER
        assert resolve_raw_type({"object"}) is RawType.JSON_OBJECT
        assert resolve_raw_type({"string"}) is RawType.STRING

    def test_zero_or_many_types_are_any(self):
        assert resolve_raw_type(set()) is RawType.ANY
        assert resolve_raw_type({"string", "null"}) is RawType.ANY

    def test_unknown_type_is_an_error(self):
        with pytest.raises(GeneratorError):
            resolve_raw_type({"date"})

    def test_type_names(self):
        assert RawType.JSON_OBJECT.type_name == "JsonObject"
        assert RawType.JSON_ARRAY.type_name == "JsonArray"
        assert RawType.ANY.type_name == "Object"


class TestSynthesis:
    def test_leaf_types_are_not_synthesized(self):
        for type_name in ("boolean", "integer", "null", "number", "string"):
            _, orchestrator = build({"type": type_name})
            assert type_names(orchestrator) == []

    def test_object_without_properties_is_not_synthesized(self):
        _, orchestrator = build({"type": "object"})
        assert type_names(orchestrator) == []

    def test_object_with_properties(self):
        _, orchestrator = build({"type": "object", "properties": {"a": {"type": "string"}}})
        assert type_names(orchestrator) == ["Schema"]

    def test_array_and_untyped_nodes(self):
        _, orchestrator = build({"type": "array"})
        assert type_names(orchestrator) == ["Schema"]
        _, orchestrator = build({})
        assert type_names(orchestrator) == ["Schema"]

    def test_scaffold_members(self):
        _, orchestrator = build({"type": "object", "properties": {"a": {"type": "string"}}})
        schema_type = find_type(orchestrator, "Schema")
        assert [f.name for f in schema_type.fields] == ["jsonObject"]
        assert len(schema_type.constructors) == 1
        assert method_names(schema_type)[0] == "getJsonObject"

    def test_size_only_for_arrays(self):
        _, orchestrator = build({"type": ["array", "null"]})
        schema_type = find_type(orchestrator, "Schema")
        assert method_names(schema_type) == ["getObject", "size"]

        _, orchestrator = build({})
        assert "size" not in method_names(find_type(orchestrator, "Schema"))


class TestNaming:
    def test_name_from_id(self):
        schema = {
            "$id": "#/definitions/widget",
            "type": "object",
            "properties": {"count": {"type": "integer"}},
            "required": ["count"],
        }
        _, orchestrator = build(schema)
        widget = find_type(orchestrator, "Widget")
        assert method_names(widget) == ["getJsonObject", "getCount"]

    def test_sibling_collision(self):
        schema = {
            "type": "object",
            "properties": {
                "item": {"type": "object", "properties": {"a": {"type": "string"}}},
                "other": {"$ref": "#/definitions/item"},
            },
            "definitions": {"item": {"type": "object", "properties": {"b": {"type": "integer"}}}},
        }
        _, orchestrator = build(schema)
        assert type_names(orchestrator) == ["Schema", "Schema.Item", "Schema.Item2"]
        root = find_type(orchestrator, "Schema")
        assert root.find_method("getOther").return_type.defined_type is find_type(orchestrator, "Schema.Item2")

    def test_enclosing_names_are_avoided(self):
        schema = {
            "type": "object",
            "properties": {
                "schema": {
                    "type": "object",
                    "properties": {
                        "schema": {"type": "object", "properties": {"x": {"type": "string"}}},
                    },
                }
            },
        }
        _, orchestrator = build(schema)
        # "Schema2" would shadow its parent, so the scan restarts and lands on "Schema3"
        assert type_names(orchestrator) == ["Schema", "Schema.Schema2", "Schema.Schema2.Schema3"]

    def test_reserved_type_names_are_varied(self):
        schema = {"type": "object", "properties": {"none": {"type": "object", "properties": {"a": {"type": "string"}}}}}
        _, orchestrator = build(schema)
        assert type_names(orchestrator) == ["Schema", "Schema.None2"]

    def test_member_name_collision(self):
        schema = {
            "type": "object",
            "properties": {"first_name": {"type": "string"}, "firstName": {"type": "string"}},
        }
        _, orchestrator = build(schema)
        assert method_names(find_type(orchestrator, "Schema")) == [
            "getJsonObject",
            "getFirstName",
            "hasFirstName",
            "getFirstName2",
            "hasFirstName2",
        ]

    def test_item_getter_avoids_property_getter(self):
        schema = {"properties": {"items": {"type": "string"}}, "items": {"type": "integer"}}
        _, orchestrator = build(schema)
        assert method_names(find_type(orchestrator, "Schema")) == ["getObject", "getItems", "hasItems", "getItems2"]

    def test_nested_type_avoids_later_top_level_name(self):
        _, orchestrator = build_two_documents(["other", "ext"])
        assert type_names(orchestrator) == ["Other2", "Schema", "Schema.Other"]
        ext = find_type(orchestrator, "Schema").find_method("getExt")
        assert ext.return_type.defined_type is find_type(orchestrator, "Other2")

    def test_nested_type_avoids_earlier_top_level_name(self):
        _, orchestrator = build_two_documents(["ext", "other"])
        assert type_names(orchestrator) == ["Other", "Schema", "Schema.Other2"]
        root = find_type(orchestrator, "Schema")
        assert root.find_method("getExt").return_type.defined_type is find_type(orchestrator, "Other")
        assert root.find_method("getOther").return_type.defined_type is find_type(orchestrator, "Schema.Other2")

    def test_documentation(self):
        _, orchestrator = build({"properties": {"a": {"type": "string"}}})
        doc = find_type(orchestrator, "Schema").doc.splitlines()
        assert doc[:3] == ["Created from schema.json", "Explicit types []", "Inferred types ['object']"]

    def test_name_attempts_are_bounded(self):
        schema = {
            "type": "object",
            "properties": {
                "item": {"type": "object", "properties": {"a": {"type": "string"}}},
                "item_": {"type": "object", "properties": {"a": {"type": "string"}}},
            },
        }
        with pytest.raises(GeneratorError):
            build(schema, max_name_attempts=1)


class TestGetters:
    def test_required_default_and_presence(self):
        schema = {
            "type": "object",
            "properties": {
                "count": {"type": "integer"},
                "label": {"type": "string", "default": "x"},
                "note": {"type": "string"},
                "meta": {"type": "object", "default": {}},
            },
            "required": ["count"],
        }
        _, orchestrator = build(schema)
        root = find_type(orchestrator, "Schema")
        assert method_names(root) == ["getJsonObject", "getCount", "getLabel", "getNote", "hasNote", "getMeta", "hasMeta"]

        get_count = root.find_method("getCount").body
        assert isinstance(get_count, PropertyLookup)
        assert get_count.key == "count" and get_count.default is None

        get_label = root.find_method("getLabel").body
        assert get_label.default.value == "x"

        # Object defaults cannot be written as a literal
        assert root.find_method("getMeta").body.default is None

        has_note = root.find_method("hasNote").body
        assert isinstance(has_note, KeyPresence) and has_note.key == "note"

    def test_boolean_property_uses_is_prefix(self):
        _, orchestrator = build({"type": "object", "properties": {"enabled": {"type": "boolean"}}})
        assert method_names(find_type(orchestrator, "Schema")) == ["getJsonObject", "isEnabled", "hasEnabled"]

    def test_synthesized_property_is_wrapped(self):
        schema = {"type": "object", "properties": {"point": {"type": "object", "properties": {"x": {"type": "number"}}}}}
        _, orchestrator = build(schema)
        body = find_type(orchestrator, "Schema").find_method("getPoint").body
        assert isinstance(body, NewInstance)
        assert body.defined_type is find_type(orchestrator, "Schema.Point")
        assert isinstance(body.argument, PropertyLookup)

    def test_tuple_items(self):
        schema = {"type": "array", "items": [{"type": "string"}, {"type": "integer", "default": 7}]}
        _, orchestrator = build(schema)
        root = find_type(orchestrator, "Schema")
        assert method_names(root) == ["getJsonArray", "getItem0", "getItem1", "size"]

        get_item0 = root.find_method("getItem0")
        assert get_item0.return_type.raw_type is RawType.STRING
        assert [p.name for p in get_item0.parameters] == ["index"]

        get_item1 = root.find_method("getItem1")
        assert get_item1.return_type.raw_type is RawType.INTEGER
        assert isinstance(get_item1.body, ItemLookup)
        assert get_item1.body.default.value == 7

    def test_uniform_items_named_after_child_type(self):
        schema = {
            "type": "array",
            "items": {"$ref": "#/definitions/point"},
            "definitions": {"point": {"type": "object", "properties": {"x": {"type": "number"}}}},
        }
        _, orchestrator = build(schema)
        root = find_type(orchestrator, "Schema")
        assert method_names(root) == ["getJsonArray", "getPoint", "size"]
        assert root.find_method("getPoint").return_type.defined_type is find_type(orchestrator, "Schema.Point")


class TestRegistry:
    def test_shared_definition_builds_one_type(self):
        schema = {
            "type": "object",
            "properties": {"a": {"$ref": "#/definitions/point"}, "b": {"$ref": "#/definitions/point"}},
            "definitions": {"point": {"type": "object", "properties": {"x": {"type": "number"}}}},
        }
        _, orchestrator = build(schema)
        assert type_names(orchestrator) == ["Schema", "Schema.Point"]
        point = find_type(orchestrator, "Schema.Point")
        assert method_names(point) == ["getJsonObject", "getX", "hasX"]

    def test_get_builder_is_idempotent(self):
        store = SchemaStore()
        root = store.load({"type": "object", "properties": {"a": {"type": "string"}}})
        orchestrator = Orchestrator(TypeModel())
        first = orchestrator.get_builder(root)
        second = orchestrator.get_builder(root)
        assert first is second
        assert orchestrator.lookup(root.uri) is first
        assert orchestrator.lookup("schema.json#/properties/missing") is None
        assert len(first.defined_type.methods) == 3

    def test_register_twice_is_an_error(self):
        store = SchemaStore()
        root = store.load({"type": "object", "properties": {"a": {"type": "string"}}})
        orchestrator = Orchestrator(TypeModel())
        builder = orchestrator.get_builder(root)
        with pytest.raises(GeneratorError):
            orchestrator.register(root.uri, builder)

    def test_self_reference_terminates(self):
        schema = {"type": "object", "properties": {"name": {"type": "string"}, "child": {"$ref": "#"}}}
        _, orchestrator = build(schema)
        root = find_type(orchestrator, "Schema")
        assert type_names(orchestrator) == ["Schema"]
        assert root.find_method("getChild").return_type.defined_type is root
        assert "hasChild" in method_names(root)

    def test_mutual_reference_terminates(self):
        schema = {
            "type": "object",
            "properties": {"a": {"$ref": "#/definitions/a"}},
            "definitions": {
                "a": {"type": "object", "properties": {"b": {"$ref": "#/definitions/b"}}},
                "b": {"type": "object", "properties": {"a": {"$ref": "#/definitions/a"}}},
            },
        }
        _, orchestrator = build(schema)
        assert type_names(orchestrator) == ["Schema", "Schema.A", "Schema.B"]
        a_type = find_type(orchestrator, "Schema.A")
        b_type = find_type(orchestrator, "Schema.B")
        assert a_type.find_method("getB").return_type.defined_type is b_type
        assert b_type.find_method("getA").return_type.defined_type is a_type

    def test_container_only_parent_is_populated(self):
        schema = {
            "type": "object",
            "properties": {"x": {"$ref": "#/definitions/outer/properties/inner"}},
            "definitions": {
                "outer": {
                    "type": "object",
                    "properties": {"inner": {"type": "object", "properties": {"v": {"type": "integer"}}}},
                }
            },
        }
        _, orchestrator = build(schema)
        assert type_names(orchestrator) == ["Schema", "Schema.Outer", "Schema.Outer.Inner"]
        outer = find_type(orchestrator, "Schema.Outer")
        assert method_names(outer) == ["getJsonObject", "getInner", "hasInner"]
        assert all(b.population_started for b in orchestrator.builders.values())

    def test_each_build_is_a_fresh_pass(self):
        generator, first = build({"type": "object", "properties": {"a": {"type": "string"}}})
        second = generator.build()
        assert first is not second
        assert type_names(second) == ["Schema"]


class TestMalformedEntries:
    def test_boolean_property_schema_is_skipped(self, caplog):
        schema = {"type": "object", "properties": {"anything": True, "name": {"type": "string"}}}
        with caplog.at_level(logging.WARNING):
            _, orchestrator = build(schema)
        assert method_names(find_type(orchestrator, "Schema")) == ["getJsonObject", "getName", "hasName"]
        assert "anything" in caplog.text

    def test_boolean_item_schema_is_skipped(self, caplog):
        with caplog.at_level(logging.WARNING):
            _, orchestrator = build({"type": "array", "items": False})
        assert method_names(find_type(orchestrator, "Schema")) == ["getJsonArray", "size"]
        assert "item 0" in caplog.text

    def test_strict_shapes_raise(self):
        schema = {"type": "object", "properties": {"anything": True}}
        with pytest.raises(GeneratorError):
            build(schema, strict_schema_shapes=True)


if __name__ == "__main__":
    pytest.main([__file__])
