"""
Error types.

Every rejected input surfaces as InvalidArgument. It subclasses ValueError so
callers that already guard domain constructors with ``except ValueError`` keep
working.
"""


class InvalidArgument(ValueError):
    """A required input is absent, has the wrong type, or is out of range."""
