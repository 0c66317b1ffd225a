from jsoncheck.encode import to_object, dumper
from jsoncheck.exceptions import JsonCheckError, SchemaError
from jsoncheck.conditions import Condition, Predicate, FieldEquals, \
    FieldPresent, Not
from jsoncheck.schema import Schema, PropertySchema, Type, mixin
from jsoncheck.validator import Validator, ValidationResult, ErrorRecord, \
    ValidationError, validate
