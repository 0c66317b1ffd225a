import re
import unittest

from jsoncheck import Schema, PropertySchema, Type, mixin, Predicate
from jsoncheck.exceptions import SchemaError


class TestPropertySchema(unittest.TestCase):
    def test_type_is_coerced(self):
        self.assertIs(Type.STRING, PropertySchema(type="string").type)
        self.assertIs(Type.ARRAY, PropertySchema(type=Type.ARRAY).type)
        self.assertIsNone(PropertySchema().type)

    def test_unknown_type(self):
        with self.assertRaises(SchemaError) as c:
            PropertySchema(type="str")

        self.assertEqual("Unknown type 'str'.", str(c.exception))
        self.assertIn("string", c.exception.extras["allowed"])

    def test_pattern_is_compiled(self):
        prop = PropertySchema(pattern=r"^[a-z]+$")
        self.assertEqual(re.compile(r"^[a-z]+$"), prop.pattern)

        compiled = re.compile("x")
        self.assertIs(compiled, PropertySchema(pattern=compiled).pattern)

    def test_invalid_pattern(self):
        with self.assertRaises(SchemaError):
            PropertySchema(pattern="[a-z")

    def test_divisible_by_zero(self):
        with self.assertRaises(SchemaError) as c:
            PropertySchema(divisible_by=0)

        self.assertEqual("divisibleBy cannot be zero.", str(c.exception))

    def test_bad_bounds(self):
        with self.assertRaises(SchemaError):
            PropertySchema(minimum="1")
        with self.assertRaises(SchemaError):
            PropertySchema(max_length=-1)
        with self.assertRaises(SchemaError):
            PropertySchema(min_items=True)

    def test_bad_enum(self):
        with self.assertRaises(SchemaError):
            PropertySchema(enum="abc")
        with self.assertRaises(SchemaError):
            PropertySchema(enum=42)
        self.assertEqual((1, 2), PropertySchema(enum=[1, 2]).enum)

    def test_conditions(self):
        prop = PropertySchema(conditions={"optional": lambda obj: True})
        self.assertIsInstance(prop.optional_condition, Predicate)
        self.assertIsNone(PropertySchema().optional_condition)

        with self.assertRaises(SchemaError):
            PropertySchema(conditions={"required": lambda obj: True})
        with self.assertRaises(SchemaError):
            PropertySchema(conditions={"optional": True})

    def test_default(self):
        self.assertFalse(PropertySchema().has_default)
        self.assertTrue(PropertySchema(default=None).has_default)
        self.assertEqual(5, PropertySchema(default=5).default)

    def test_immutable(self):
        prop = PropertySchema(type="string")

        with self.assertRaises(SchemaError):
            prop.type = Type.NUMBER
        with self.assertRaises(SchemaError):
            del prop.type
        with self.assertRaises(TypeError):
            prop.conditions["optional"] = None

    def test_nested_mappings_are_read_only(self):
        prop = PropertySchema(properties={"a": {}})
        with self.assertRaises(TypeError):
            prop.properties["b"] = PropertySchema()

    def test_from_dict_aliases(self):
        prop = PropertySchema.from_dict({
            "minLength": 1, "maxLength": 4, "divisibleBy": 2,
            "minItems": 1, "maxItems": 3, "uniqueItems": True
        })

        self.assertEqual(1, prop.min_length)
        self.assertEqual(4, prop.max_length)
        self.assertEqual(2, prop.divisible_by)
        self.assertEqual(1, prop.min_items)
        self.assertEqual(3, prop.max_items)
        self.assertTrue(prop.unique_items)

    def test_from_dict_unknown_keys(self):
        with self.assertRaises(SchemaError) as c:
            PropertySchema.from_dict({"type": "string", "maxLenght": 4})

        self.assertEqual(["maxLenght"], c.exception.extras["keys"])

    def test_nested_dicts_are_compiled(self):
        prop = PropertySchema.from_dict({
            "type": "array",
            "items": {"type": "object", "properties": {
                "name": {"type": "string"}
            }}
        })

        self.assertIsInstance(prop.items, PropertySchema)
        self.assertIs(Type.STRING, prop.items.properties["name"].type)

    def test_bad_nested_schema(self):
        with self.assertRaises(SchemaError):
            PropertySchema(items="string")
        with self.assertRaises(SchemaError):
            PropertySchema(properties=["name"])


class TestSchema(unittest.TestCase):
    def test_create(self):
        schema = Schema.create("Article", {
            "title": PropertySchema(type="string"),
            "body": {"type": "string"}
        })

        self.assertEqual("Article", schema.name)
        self.assertEqual(["title", "body"], list(schema.properties))
        self.assertIsInstance(schema.properties["body"], PropertySchema)

    def test_from_dict_keeps_order(self):
        d = {"name": "Resource", "properties": {
            "z": {}, "a": {}, "m": {}
        }}
        schema = Schema.from_dict(d)

        self.assertEqual(["z", "a", "m"], list(schema.properties))
        # the source dict is untouched
        self.assertEqual({}, d["properties"]["z"])

    def test_from_dict_passes_schema_through(self):
        schema = Schema({})
        self.assertIs(schema, Schema.from_dict(schema))

    def test_from_dict_rejects_unknown_keys(self):
        with self.assertRaises(SchemaError):
            Schema.from_dict({"properties": {}, "additionalProperties": False})

    def test_from_dict_rejects_non_dicts(self):
        with self.assertRaises(SchemaError):
            Schema.from_dict(["properties"])

    def test_immutable(self):
        schema = Schema({"a": {}})
        with self.assertRaises(SchemaError):
            schema.name = "Renamed"


class TestMixin(unittest.TestCase):
    def test_mixin_copies_keys(self):
        target = {"type": "string", "maxLength": 10}
        result = mixin(target, {"maxLength": 4, "pattern": "^a"})

        self.assertIs(target, result)
        self.assertEqual({"type": "string", "maxLength": 4, "pattern": "^a"},
                         target)

    def test_mixin_is_shallow(self):
        items = {"type": "string"}
        target = mixin({}, {"items": items})
        self.assertIs(items, target["items"])

    def test_cannot_mixin_into_schema(self):
        with self.assertRaises(SchemaError):
            mixin(PropertySchema(), {"type": "string"})
