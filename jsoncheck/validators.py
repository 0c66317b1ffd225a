"""
Type dispatch and the constraint checkers run by
:class:`~jsoncheck.validator.Validator`.

Every checker is a small class exposing :meth:`Constraint.check`, a total
predicate over ``(value, argument)``. A checker only looks at values of the
kind it understands (:attr:`Constraint.kind`); anything else passes ::

    >>> MaxLength().check("kaboom", 4)
    False
    >>> MaxLength().check(42, 4)
    True

"""
import datetime
import ipaddress
import re
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation, localcontext
from email.utils import parsedate_to_datetime
from urllib.parse import urlparse

from jsoncheck.exceptions import SchemaError
from jsoncheck.schema import Type


def is_string(value):
    return isinstance(value, str)


def is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value):
    return is_number(value) and (isinstance(value, int) or value.is_integer())


def is_array(value):
    return isinstance(value, (list, tuple))


def is_object(value):
    return isinstance(value, Mapping)


_TYPE_CHECKS = {
    Type.STRING: is_string,
    Type.NUMBER: is_number,
    Type.INTEGER: is_integer,
    Type.ARRAY: is_array,
    Type.OBJECT: is_object,
    Type.BOOLEAN: lambda value: isinstance(value, bool),
    Type.NULL: lambda value: value is None,
    Type.ANY: lambda value: True,
}


def check_type(type_, value):
    """ Does ``value`` satisfy the declared :class:`Type` ``type_``? """
    return _TYPE_CHECKS[type_](value)


def same(a, b):
    """ Equality that does not treat ``True`` as ``1`` """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a is b
    return a == b


class Constraint:
    """
    Base class of all constraint checkers.

    :attr name: Attribute reported in an :class:`ErrorRecord`.
    :attr key: The :class:`PropertySchema` attribute holding the argument.
    :attr kind: Predicate selecting the values this checker applies to.
    :attr reason: Message template, formatted with the argument and value.
    """
    name = None
    key = None
    kind = None
    reason = None

    def argument(self, prop):
        return getattr(prop, self.key)

    def expected(self, argument):
        return argument

    def applies(self, value):
        return self.kind is None or self.kind(value)

    def check(self, value, argument):
        raise NotImplementedError

    def message(self, argument, value):
        return self.reason.format(argument, value)


class Regex(Constraint):
    name, key, kind = "pattern", "pattern", staticmethod(is_string)
    reason = "String does not match pattern '{0.pattern}'."

    def expected(self, argument):
        return argument.pattern

    def check(self, value, argument):
        return argument.search(value) is not None


class MinLength(Constraint):
    name, key, kind = "minLength", "min_length", staticmethod(is_string)
    reason = "String must be at least length {0}."

    def check(self, value, argument):
        return len(value) >= argument


class MaxLength(Constraint):
    name, key, kind = "maxLength", "max_length", staticmethod(is_string)
    reason = "String exceeds max length of {0}."

    def check(self, value, argument):
        return len(value) <= argument


class Minimum(Constraint):
    name, key, kind = "minimum", "minimum", staticmethod(is_number)
    reason = "Must be greater than or equal to {0}."

    def check(self, value, argument):
        return value >= argument


class Maximum(Constraint):
    name, key, kind = "maximum", "maximum", staticmethod(is_number)
    reason = "Must be less than or equal to {0}."

    def check(self, value, argument):
        return value <= argument


class DivisibleBy(Constraint):
    """
    Divisibility is computed on decimals so ``0.3`` is divisible by ``0.1``.
    """
    name, key, kind = "divisibleBy", "divisible_by", staticmethod(is_number)
    reason = "Must be divisible by {0}."

    def check(self, value, argument):
        if argument == 0:
            raise SchemaError("divisibleBy cannot be zero.")
        if isinstance(value, int) and isinstance(argument, int):
            return value % argument == 0
        dividend, divisor = Decimal(str(value)), Decimal(str(argument))
        if not dividend.is_finite():
            return False
        with localcontext() as ctx:
            # The integer quotient must fit in the working precision.
            ctx.prec = max(ctx.prec, dividend.adjusted() - divisor.adjusted()
                           + len(dividend.as_tuple().digits)
                           + len(divisor.as_tuple().digits))
            try:
                return dividend % divisor == 0
            except InvalidOperation:
                return False


class OneOf(Constraint):
    name, key = "enum", "enum"
    reason = "Expected one of {0} but got {1!r} instead."

    def check(self, value, argument):
        return any(same(value, allowed) for allowed in argument)


class MinItems(Constraint):
    name, key, kind = "minItems", "min_items", staticmethod(is_array)
    reason = "List must contain at least {0} items."

    def check(self, value, argument):
        return len(value) >= argument


class MaxItems(Constraint):
    name, key, kind = "maxItems", "max_items", staticmethod(is_array)
    reason = "List exceeds max length of {0} items."

    def check(self, value, argument):
        return len(value) <= argument


class UniqueItems(Constraint):
    name, key, kind = "uniqueItems", "unique_items", staticmethod(is_array)
    reason = "List items must be unique."

    def argument(self, prop):
        # ``False`` means "not constrained", same as an absent argument.
        return prop.unique_items or None

    def check(self, value, argument):
        seen = []
        for item in value:
            if any(same(item, s) for s in seen):
                return False
            seen.append(item)
        return True


class Format(Constraint):
    """
    Checks a string against a named format. ``formats`` maps a format name
    to a compiled regex, a pattern string or a predicate callable.
    """
    name, key, kind = "format", "format", staticmethod(is_string)
    reason = "String is not a valid {0}."

    def __init__(self, formats=None):
        self.formats = dict(
            (name, to_format_check(f)) for name, f in (formats or {}).items()
        )

    def check(self, value, argument):
        try:
            checker = self.formats[argument]
        except KeyError:
            raise SchemaError("Unknown format {0!r}.".format(argument),
                              formats=sorted(self.formats))
        return bool(checker(value))


def to_format_check(obj):
    if isinstance(obj, str):
        obj = re.compile(obj)
    if isinstance(obj, re.Pattern):
        return lambda value: obj.search(value) is not None
    if callable(obj):
        return obj
    raise SchemaError("Format must be a pattern or callable got {0} "
                      "instead.".format(obj.__class__.__name__))


def strptime_check(fmt):
    def check(value):
        try:
            datetime.datetime.strptime(value, fmt)
        except ValueError:
            return False
        return True
    return check


def _date_time(value):
    match = _DATETIME_REGEX.match(value)
    return match is not None and strptime_check("%Y-%m-%dT%H:%M:%S")(
        match.group(1))


def _date(value):
    """
    ISO 8601 (``2012-01-31``) or RFC 1123
    (``Tue, 31 Jan 2012 00:00:00 GMT``, the HTTP date format).
    """
    if strptime_check("%Y-%m-%d")(value):
        return True
    try:
        parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return False
    return True


def _ip(cls):
    def check(value):
        try:
            cls(value)
        except ValueError:
            return False
        return True
    return check


def _uri(value):
    parsed = urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc or parsed.path)


_DATETIME_REGEX = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.\d+)?(?:Z|[+\-]\d{2}:\d{2})?$"
)

FORMATS = {
    "date-time": _date_time,
    "date": _date,
    "time": strptime_check("%H:%M:%S"),
    "utc-millisec": re.compile(r"^\d+(\.\d+)?$"),
    "email": re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$"),
    "host-name": re.compile(
        r"^(?=.{1,253}$)[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
        r"(\.[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
    ),
    "ip-address": _ip(ipaddress.IPv4Address),
    "ipv6": _ip(ipaddress.IPv6Address),
    "uri": _uri,
    "color": re.compile(
        r"^(#([0-9a-fA-F]{3}){1,2}|aqua|black|blue|fuchsia|gray|green|lime|"
        r"maroon|navy|olive|orange|purple|red|silver|teal|white|yellow|"
        r"rgb\(\s*\d{1,3}\s*,\s*\d{1,3}\s*,\s*\d{1,3}\s*\))$"
    ),
}


def constraints(formats=None, validate_formats=True):
    """
    Build the ordered list of checkers a :class:`Validator` runs for every
    property. The order is the order errors are reported in.
    """
    registry = dict(FORMATS)
    registry.update(formats or {})
    checkers = [Regex(), MinLength(), MaxLength(), Minimum(), Maximum(),
                DivisibleBy(), OneOf()]
    if validate_formats:
        checkers.append(Format(registry))
    checkers.extend([MinItems(), MaxItems(), UniqueItems()])
    return checkers
