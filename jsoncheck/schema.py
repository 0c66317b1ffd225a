"""
Schemas
-------

A :class:`Schema` is an ordered collection of named :class:`PropertySchema`
instances. Both are immutable once built and may be shared freely between
validation calls (and threads). Here is a schema for a blog article::

    >>> from jsoncheck import Schema, PropertySchema, Not, FieldEquals

    >>> ArticleSchema = Schema.create("Article", {
    ...     "title": PropertySchema(
    ...         type="string", max_length=140,
    ...         conditions={"optional": Not(FieldEquals("published", True))}
    ...     ),
    ...     "tags": PropertySchema(
    ...         type="array", items=PropertySchema(type="string")
    ...     ),
    ...     "author": PropertySchema(type="string", pattern=r"^[\\w ]+$"),
    ...     "published": PropertySchema(type="boolean", default=False),
    ... })

Schemas can also be written as plain dicts, using the familiar camelCase
constraint names, and compiled with :meth:`Schema.from_dict` ::

    >>> Schema.from_dict({
    ...     "name": "Resource",
    ...     "properties": {
    ...         "town": {"optional": True, "requires": "country"},
    ...         "country": {"type": "string", "maxLength": 56}
    ...     }
    ... })

Any malformed schema raises :class:`~jsoncheck.exceptions.SchemaError` at
construction time.

.. warning::

    Cyclic schemas (a property schema that contains itself through
    ``items`` or ``properties``) are not supported. Validating against one
    recurses without bound.

"""
import re
from enum import Enum
from types import MappingProxyType
from collections.abc import Mapping, MutableMapping

from jsoncheck import encode
from jsoncheck.conditions import to_condition
from jsoncheck.exceptions import SchemaError

_missing = object()

# camelCase dict keys and the PropertySchema keyword they map to.
_ALIASES = {
    "minLength": "min_length",
    "maxLength": "max_length",
    "divisibleBy": "divisible_by",
    "minItems": "min_items",
    "maxItems": "max_items",
    "uniqueItems": "unique_items",
}

_CONDITION_KEYS = ("optional", )


class Type(Enum):
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    ARRAY = "array"
    OBJECT = "object"
    BOOLEAN = "boolean"
    NULL = "null"
    ANY = "any"

    @classmethod
    def coerce(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            raise SchemaError("Unknown type {0!r}.".format(value),
                              allowed=[t.value for t in cls])


class _Frozen:
    _frozen = False

    def __setattr__(self, key, value):
        if self._frozen:
            raise SchemaError("{0} is immutable.".format(
                self.__class__.__name__))
        object.__setattr__(self, key, value)

    def __delattr__(self, key):
        raise SchemaError("{0} is immutable.".format(self.__class__.__name__))


@encode.to_object()
class PropertySchema(_Frozen):
    """
    The constraints attached to one named field. Every argument is optional;
    a bare ``PropertySchema()`` accepts any present value.
    """
    def __init__(self, type=None, pattern=None, min_length=None,
                 max_length=None, minimum=None, maximum=None,
                 divisible_by=None, enum=None, format=None, min_items=None,
                 max_items=None, unique_items=False, optional=False,
                 requires=None, default=_missing, conditions=None,
                 items=None, properties=None):
        """
        :param type: A :class:`Type` or its string value.
        :param pattern: Regex string (or compiled regex) a string must match.
        :param min_length: Inclusive minimum string length.
        :param max_length: Inclusive maximum string length.
        :param minimum: Inclusive numeric lower bound.
        :param maximum: Inclusive numeric upper bound.
        :param divisible_by: Non zero number a numeric value must divide by.
        :param enum: Iterable of allowed values.
        :param format: Name of a registered string format, e.g. ``"date"``.
        :param min_items: Inclusive minimum array length.
        :param max_items: Inclusive maximum array length.
        :param unique_items: Array elements must be distinct.
        :param optional: May the field be absent?
        :param requires: Name of a sibling field that must be present
                         whenever this one is validated.
        :param default: Value injected into the subject when absent.
        :param conditions: dict of condition name to :class:`Condition` or
                           callable. Only ``"optional"`` is understood.
        :param items: Schema (or dict) each array element must satisfy.
        :param properties: dict of name to schema for a nested object.
        """
        self.type = None if type is None else Type.coerce(type)
        self.pattern = _compile(pattern)
        self.min_length = _non_negative_int("minLength", min_length)
        self.max_length = _non_negative_int("maxLength", max_length)
        self.minimum = _number("minimum", minimum)
        self.maximum = _number("maximum", maximum)
        self.divisible_by = _number("divisibleBy", divisible_by)
        if self.divisible_by == 0:
            raise SchemaError("divisibleBy cannot be zero.")
        self.enum = _enum(enum)
        self.format = format
        self.min_items = _non_negative_int("minItems", min_items)
        self.max_items = _non_negative_int("maxItems", max_items)
        self.unique_items = bool(unique_items)
        self.optional = bool(optional)
        self.requires = requires
        self.default = default
        self.conditions = _conditions(conditions)
        self.items = None if items is None else to_property_schema(items)
        self.properties = _properties(properties)
        self._frozen = True

    @classmethod
    def from_dict(cls, d):
        if isinstance(d, PropertySchema):
            return d
        if not isinstance(d, Mapping):
            raise SchemaError("Expected dict got {0} instead.".format(
                d.__class__.__name__))
        kw = {}
        for key, value in d.items():
            kw[_ALIASES.get(key, key)] = value
        unknown = sorted(set(kw) - _PROPERTY_KEYS)
        if unknown:
            raise SchemaError("Unknown schema keys {0}.".format(unknown),
                              keys=unknown)
        return cls(**kw)

    @property
    def has_default(self):
        return self.default is not _missing

    @property
    def optional_condition(self):
        return self.conditions.get("optional")

    @encode.handler
    def to_json(self):
        obj = {}
        for key in _JSON_KEYS:
            value = getattr(self, key)
            if value is None or value is False:
                continue
            obj[_CAMEL.get(key, key)] = value
        if self.has_default:
            obj["default"] = self.default
        if self.conditions:
            obj["conditions"] = dict(self.conditions)
        if self.properties is not None:
            obj["properties"] = dict(self.properties)
        return obj

    def __repr__(self):
        return "<PropertySchema {0!r}>".format(self.to_json())


@encode.to_object()
class Schema(_Frozen):
    """
    An ordered mapping of property name to :class:`PropertySchema`, plus an
    optional ``name`` label.
    """
    def __init__(self, properties, name=None):
        self.name = name
        self.properties = _properties({} if properties is None else properties)
        self._frozen = True

    @staticmethod
    def create(name, properties):
        """
        Build a :class:`Schema` labelled ``name``.

        :param name: A label for the schema, e.g. ``"Article"``
        :param properties: dict of name to :class:`PropertySchema` (or dict)
        """
        return Schema(properties, name=name)

    @staticmethod
    def from_dict(d):
        """
        Compile a ``{"name": ..., "properties": {...}}`` dict. ``d`` is
        never modified.
        """
        if isinstance(d, Schema):
            return d
        if not isinstance(d, Mapping):
            raise SchemaError("Expected dict got {0} instead.".format(
                d.__class__.__name__))
        unknown = sorted(set(d) - set(("name", "properties")))
        if unknown:
            raise SchemaError("Unknown schema keys {0}.".format(unknown),
                              keys=unknown)
        return Schema(d.get("properties", {}), name=d.get("name"))

    @encode.handler
    def to_json(self):
        obj = {"properties": dict(self.properties)}
        if self.name is not None:
            obj["name"] = self.name
        return obj

    def __repr__(self):
        return "<Schema {0!r} ({1})>".format(
            self.name, ", ".join(self.properties))


def to_property_schema(obj):
    if isinstance(obj, PropertySchema):
        return obj
    if isinstance(obj, Mapping):
        return PropertySchema.from_dict(obj)
    raise SchemaError("Expected PropertySchema or dict got {0} instead.".format(
        obj.__class__.__name__))


def mixin(target, source):
    """
    Shallow copy every key of ``source`` onto the dict ``target`` and return
    ``target``. Handy for assembling dict schemas ad hoc ::

        >>> field = mixin({"type": "string"}, {"maxLength": 4})
        >>> Schema.from_dict({"properties": {"field": field}})

    :class:`Schema` and :class:`PropertySchema` are immutable and cannot be
    mixed into.
    """
    if not isinstance(target, MutableMapping):
        raise SchemaError("Cannot mixin into {0}.".format(
            target.__class__.__name__))
    for key, value in source.items():
        target[key] = value
    return target


def _compile(pattern):
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except (re.error, TypeError) as e:
        raise SchemaError("Invalid pattern {0!r}: {1}".format(pattern, e))


def _number(name, value):
    if value is None:
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaError("{0} must be a number got {1} instead.".format(
            name, value.__class__.__name__))
    return value


def _non_negative_int(name, value):
    if value is None:
        return value
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise SchemaError("{0} must be a non negative int got {1!r} "
                          "instead.".format(name, value))
    return value


def _enum(values):
    if values is None:
        return values
    if isinstance(values, (str, bytes, Mapping)):
        raise SchemaError("enum must be a list of allowed values.")
    try:
        return tuple(values)
    except TypeError:
        raise SchemaError("enum must be a list of allowed values.")


def _conditions(conditions):
    if not conditions:
        return MappingProxyType({})
    if not isinstance(conditions, Mapping):
        raise SchemaError("conditions must be a dict got {0} instead.".format(
            conditions.__class__.__name__))
    unknown = sorted(set(conditions) - set(_CONDITION_KEYS))
    if unknown:
        raise SchemaError("Unknown conditions {0}.".format(unknown),
                          keys=unknown)
    return MappingProxyType(
        dict((k, to_condition(v)) for k, v in conditions.items())
    )


def _properties(properties):
    if properties is None:
        return None
    if not isinstance(properties, Mapping):
        raise SchemaError("properties must be a dict got {0} instead.".format(
            properties.__class__.__name__))
    return MappingProxyType(
        dict((k, to_property_schema(v)) for k, v in properties.items())
    )


_PROPERTY_KEYS = frozenset(
    PropertySchema.__init__.__code__.co_varnames[
        1:PropertySchema.__init__.__code__.co_argcount]
)

_CAMEL = dict((v, k) for k, v in _ALIASES.items())

_JSON_KEYS = ("type", "pattern", "min_length", "max_length", "minimum",
              "maximum", "divisible_by", "enum", "format", "min_items",
              "max_items", "unique_items", "optional", "requires", "items")
