"""
Conditions decide, at validation time, whether a property is currently
optional. A condition is evaluated against the object that encloses the
property, so it may inspect sibling fields ::

    >>> from jsoncheck.conditions import Not, FieldEquals
    >>> unpublished = Not(FieldEquals("published", True))
    >>> unpublished.evaluate({"published": False})
    True

Plain callables are accepted anywhere a condition is expected and are wrapped
in a :class:`Predicate`.
"""
import logging

from jsoncheck import encode
from jsoncheck.exceptions import SchemaError

logger = logging.getLogger(__name__)

@encode.to_object()
class Condition:
    """
    Abstract base for all conditions. Subclasses override :meth:`evaluate`.
    """
    def evaluate(self, obj):
        raise NotImplementedError

    @encode.handler
    def to_json(self):
        return {"condition": self.__class__.__name__}


class Predicate(Condition):
    """
    Wraps a callable accepting the enclosing object ::

        >>> Predicate(lambda article: not article.get("published"))
    """
    def __init__(self, func):
        if not callable(func):
            raise SchemaError("Predicate expects a callable got {0}.".format(
                type(func).__name__))
        self.func = func

    def evaluate(self, obj):
        return bool(self.func(obj))

    def __repr__(self):
        return "Predicate({0!r})".format(self.func)


class FieldEquals(Condition):
    """ True when ``obj[field] == value``. ``True`` is not equal to ``1``. """
    def __init__(self, field, value):
        self.field = field
        self.value = value

    def evaluate(self, obj):
        # validators imports schema, which imports this module.
        from jsoncheck.validators import same
        if self.field not in obj:
            return False
        return same(obj[self.field], self.value)

    def to_json(self):
        return {"condition": "FieldEquals", "field": self.field,
                "value": self.value}

    def __repr__(self):
        return "FieldEquals({0!r}, {1!r})".format(self.field, self.value)


class FieldPresent(Condition):
    """ True when ``field`` is a key of the enclosing object """
    def __init__(self, field):
        self.field = field

    def evaluate(self, obj):
        return self.field in obj

    def to_json(self):
        return {"condition": "FieldPresent", "field": self.field}

    def __repr__(self):
        return "FieldPresent({0!r})".format(self.field)


class Not(Condition):
    def __init__(self, condition):
        self.condition = to_condition(condition)

    def evaluate(self, obj):
        return not self.condition.evaluate(obj)

    def to_json(self):
        return {"condition": "Not", "of": self.condition}

    def __repr__(self):
        return "Not({0!r})".format(self.condition)


def to_condition(obj):
    if isinstance(obj, Condition):
        return obj
    if callable(obj):
        return Predicate(obj)
    raise SchemaError("Expected a Condition or callable got {0} instead.".format(
        type(obj).__name__))


def evaluate(condition, obj, name):
    result = condition.evaluate(obj)
    logger.debug("Condition %r on %r evaluated to %s", condition, name, result)
    return result
