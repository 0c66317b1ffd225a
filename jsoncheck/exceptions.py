class JsonCheckError(Exception):
    def __init__(self, message, **extras):
        Exception.__init__(self, message)
        self.extras = extras


class SchemaError(JsonCheckError):
    """
    Raised when a schema is malformed. Invalid *data* never raises; only
    mistakes in schema authorship do.
    """
