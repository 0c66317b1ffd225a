"""
Validation results usually end up in an HTTP response or a log line. This
module turns :class:`~jsoncheck.validator.ValidationResult`,
:class:`~jsoncheck.validator.ErrorRecord` and schema objects into JSON::

    >>> from jsoncheck import validate, dumper
    >>> result = validate({"field": 42}, {"properties": {
    ...     "field": {"type": "string"}}})
    >>> dumper(result)
    '{"valid": false, "errors": [{"attribute": "type", "property": "field",
      "expected": "string", "actual": 42, "message": "..."}]}'

Any class decorated with :func:`to_object` is encodable. Mark one of its
methods with :func:`handler` to control the JSON object it produces.
"""

import json
import re
import types
from enum import Enum


class EncodeArgs:
    __type__ = None
    handler = None
    suppress = None


def handler(func):
    """
    Use this decorator to mark a method on a class as being its encode
    handler. It will be called any time your class is serialized to a JSON
    string. ::

        >>> @encode.to_object()
        ... class Rule:
        ...     def __init__(self, name):
        ...         self.name = name
        ...     @encode.handler
        ...     def to_json(self):
        ...         return {"rule": self.name}

    """
    func._jsoncheck_encode_handler = True
    return func


def __inspect_for_handler(cls):
    cls._encode.handler_is_instance_method = False
    if cls._encode.handler:
        return cls
    for attr in dir(cls):
        if attr.startswith("_"):
            continue
        obj = getattr(cls, attr)
        if hasattr(obj, "_jsoncheck_encode_handler"):
            cls._encode.handler_is_instance_method = True
            # Stored by name so the bound method of the instance being
            # encoded (and any subclass override) is the one called.
            cls._encode.handler = attr
            break
    return cls


def to_object(cls_type=None, suppress=None, handler=None, exclude_nulls=False):
    """
    Make instances of the decorated class JSON encodable. Without a handler
    every public, non method attribute is encoded along with a ``__type__``
    key holding ``cls_type`` (default: the class name).

    :param cls_type: Value of the ``__type__`` key.
    :param suppress: List of attribute names to leave out. Include
                     ``"__type__"`` to drop the type key.
    :param handler: Callable accepting the instance and returning a dict.
    :param exclude_nulls: Leave out attributes whose value is ``None``.
    """
    def wrapper(cls):
        cls._encode = EncodeArgs()
        cls._encode.handler = handler
        cls._encode.suppress = suppress or []
        cls._encode.exclude_nulls = exclude_nulls
        cls._encode.__type__ = cls_type or cls.__name__
        return __inspect_for_handler(cls)
    return wrapper


class JsonCheckEncoder(json.JSONEncoder):
    """
    :class:`json.JSONEncoder` subclass that knows how to encode classes
    decorated with :func:`to_object` as well as the values that commonly
    appear inside schemas and errors: compiled patterns, :class:`Type`
    members, sets and tuples.

        json.dumps(result, cls=JsonCheckEncoder)

    """

    def __init__(self, **kw):
        self.__hard_suppress = kw.pop("suppress", [])
        self.__exclude_nulls = kw.pop("exclude_nulls", None)
        if not isinstance(self.__hard_suppress, list):
            self.__hard_suppress = [self.__hard_suppress]
        json.JSONEncoder.__init__(self, **kw)

    def default(self, o):
        e_args = getattr(o, "_encode", None)
        if isinstance(e_args, EncodeArgs):
            if e_args.handler:
                if e_args.handler_is_instance_method:
                    return getattr(o, e_args.handler)()
                return e_args.handler(o)
            return self.object_handler(o)

        if isinstance(o, re.Pattern):
            return o.pattern
        if isinstance(o, Enum):
            return o.value
        if isinstance(o, (set, frozenset)):
            return sorted(o, key=repr)
        if isinstance(o, types.MappingProxyType):
            return dict(o)
        return json.JSONEncoder.default(self, o)

    def object_handler(self, obj):
        """
        Encodes instances of classes decorated by :func:`to_object` that have
        no handler. Returns a dict of every attribute that does not start
        with an underscore and was not suppressed.
        """
        suppress = obj._encode.suppress
        if self.__exclude_nulls is not None:
            exclude_nulls = self.__exclude_nulls
        else:
            exclude_nulls = obj._encode.exclude_nulls
        json_obj = {}

        def suppressed(key):
            return key in suppress or key in self.__hard_suppress

        for attr in dir(obj):
            if not attr.startswith("_") and not suppressed(attr):
                value = getattr(obj, attr)
                if value is None and exclude_nulls:
                    continue
                if not isinstance(value, types.MethodType):
                    json_obj[attr] = value
        if not suppressed("__type__"):
            json_obj["__type__"] = obj._encode.__type__
        return json_obj


def dumper(obj, **kw):
    """
    JSON encode ``obj`` as you would with :func:`json.dumps`. ``kw`` args are
    passed through to :func:`json.dumps`.

    :param cls: Override the encoder. Should subclass
                :class:`JsonCheckEncoder`.
    :param suppress: A list of extra attribute names to leave out.
    :param exclude_nulls: Set True to leave out ``None`` values.
    """
    return json.dumps(obj, cls=kw.pop("cls", JsonCheckEncoder), **kw)
