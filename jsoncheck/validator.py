"""
The validation engine. :func:`validate` walks a :class:`~jsoncheck.schema
.Schema` in declaration order and reports *every* violation it finds rather
than stopping at the first one ::

    >>> from jsoncheck import validate
    >>> result = validate({"town": "luna"}, {"properties": {
    ...     "town": {"optional": True, "requires": "country"},
    ...     "country": {"optional": True}
    ... }})
    >>> result.valid
    False
    >>> result.errors
    [<ErrorRecord requires town>]

Invalid data never raises. Callers branch on ``result.valid`` or, if an
exception suits them better, call :meth:`ValidationResult.raise_if_invalid`.

.. note::

    Validation has one side effect: a missing property whose schema declares
    a ``default`` gets a copy of that default assigned into the value being
    validated. Schemas themselves are never modified.

"""
import copy
import logging
from collections.abc import MutableMapping

from jsoncheck import conditions, encode, validators
from jsoncheck.exceptions import JsonCheckError
from jsoncheck.schema import Schema, Type
from jsoncheck.validators import check_type, is_array, is_object

logger = logging.getLogger(__name__)


@encode.to_object(suppress=["__type__"])
class ErrorRecord:
    """
    One constraint violation.

    :param attribute: Name of the failed constraint, e.g. ``"maxLength"``.
    :param property: Path to the offending field (``"tags[1]"``,
                     ``"author.name"``) or ``None`` for schema level errors.
    :param expected: The constraint's argument.
    :param actual: The value that was checked.
    :param message: A human readable explanation.
    """
    def __init__(self, attribute, property=None, expected=None, actual=None,
                 message=None):
        self.attribute = attribute
        self.property = property
        self.expected = expected
        self.actual = actual
        self.message = message

    def _key(self):
        return self.attribute, self.property, self.expected, self.actual

    def __eq__(self, other):
        if not isinstance(other, ErrorRecord):
            return NotImplemented
        return self._key() == other._key()

    def __repr__(self):
        return "<ErrorRecord {0} {1}>".format(self.attribute, self.property)


@encode.to_object()
class ValidationError(JsonCheckError):
    """
    Raised from :meth:`ValidationResult.raise_if_invalid`.
    """
    def __init__(self, reason, reason_code=None, errors=None, **extras):
        """
        :param reason: A nice message describing what was not valid
        :param reason_code: programmatic friendly reason code
        :param errors: A ``list`` of :class:`ErrorRecord`
        :param extras: Any extra info about the error you want to convey
        """
        JsonCheckError.__init__(self, reason, **extras)
        self.errors = errors
        self.reason_code = reason_code

    @encode.handler
    def to_json(self):
        obj = {"reason": str(self)}
        obj.update(self.extras)

        if self.errors:
            obj["errors"] = self.errors
        if self.reason_code:
            obj["reason_code"] = self.reason_code

        return obj


@encode.to_object()
class ValidationResult:
    def __init__(self, errors=None):
        self.errors = list(errors or [])

    @property
    def valid(self):
        return not self.errors

    def raise_if_invalid(self, reason="Error validating object.", **extras):
        if self.errors:
            raise ValidationError(reason, reason_code="invalid_object",
                                  errors=self.errors, **extras)

    @encode.handler
    def to_json(self):
        return {"valid": self.valid, "errors": self.errors}

    def __eq__(self, other):
        if not isinstance(other, ValidationResult):
            return NotImplemented
        return self.errors == other.errors

    def __repr__(self):
        return "<ValidationResult valid={0} errors={1}>".format(
            self.valid, len(self.errors))


class _Errors:
    def __init__(self):
        self.errors = []

    def add_error(self, attribute, path, expected=None, actual=None,
                  message=None):
        self.errors.append(
            ErrorRecord(attribute, path, expected, actual, message)
        )

    def result(self):
        return ValidationResult(self.errors)


class Validator:
    """
    Validates values against schemas. A :class:`Validator` holds no state
    between calls and may be shared.

    :param validate_formats: Check ``format`` constraints? (Default: True)
    :param formats: dict of extra (or overriding) named formats. Values may
                    be compiled regexes, pattern strings or predicates.
    """
    def __init__(self, validate_formats=True, formats=None):
        self.validate_formats = validate_formats
        self.constraints = validators.constraints(formats, validate_formats)

    def validate(self, value, schema):
        """
        Validate ``value`` against ``schema`` (a :class:`Schema` or a dict
        accepted by :meth:`Schema.from_dict`).

        :return: A :class:`ValidationResult`
        """
        schema = Schema.from_dict(schema)
        errors = _Errors()

        if not is_object(value):
            errors.add_error("type", None, Type.OBJECT.value, value,
                             _type_message(Type.OBJECT, value))
        else:
            self._validate_object(value, schema.properties, "", errors)

        result = errors.result()
        logger.debug("Validated against schema %r: %d error(s)",
                     schema.name, len(result.errors))
        return result

    def _validate_object(self, obj, properties, prefix, errors):
        for name, prop in properties.items():
            path = "{0}{1}".format(prefix, name)

            if name in obj:
                current = obj[name]
            elif prop.has_default:
                current = copy.deepcopy(prop.default)
                if isinstance(obj, MutableMapping):
                    obj[name] = current
                    logger.debug("Injected default for %r", path)
            else:
                if not self._is_optional(obj, path, prop):
                    errors.add_error("optional", path, None, None,
                                     "Missing required parameter.")
                continue

            self._validate_property(obj, current, prop, path, errors)

    def _is_optional(self, obj, path, prop):
        condition = prop.optional_condition
        if condition is None:
            return prop.optional
        return conditions.evaluate(condition, obj, path)

    def _validate_property(self, obj, current, prop, path, errors):
        if obj is not None and prop.requires is not None \
                and prop.requires not in obj:
            errors.add_error("requires", path, prop.requires, None,
                             "Requires property '{0}'.".format(prop.requires))

        if prop.type is not None and not check_type(prop.type, current):
            errors.add_error("type", path, prop.type.value, current,
                             _type_message(prop.type, current))

        for constraint in self.constraints:
            argument = constraint.argument(prop)
            if argument is None or not constraint.applies(current):
                continue
            if not constraint.check(current, argument):
                errors.add_error(constraint.name, path,
                                 constraint.expected(argument), current,
                                 constraint.message(argument, current))

        if prop.type is Type.OBJECT and prop.properties is not None \
                and is_object(current):
            self._validate_object(current, prop.properties, path + ".",
                                  errors)

        if prop.type is Type.ARRAY and prop.items is not None \
                and is_array(current):
            # Array elements are always present and have no siblings, so
            # only type, constraint and nested checks apply to them.
            for i, item in enumerate(current):
                self._validate_property(None, item, prop.items,
                                        "{0}[{1}]".format(path, i), errors)


def _type_message(type_, value):
    return "Expected {0} got {1} instead.".format(
        type_.value, value.__class__.__name__)


_default_validator = Validator()


def validate(value, schema, **options):
    """
    Validate ``value`` against ``schema``. ``options`` are passed to
    :class:`Validator`; without them a shared default validator is used.

    :return: A :class:`ValidationResult`
    """
    validator = Validator(**options) if options else _default_validator
    return validator.validate(value, schema)
