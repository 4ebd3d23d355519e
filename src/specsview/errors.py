"""Exceptions raised by specsview."""


class SpecsViewError(Exception):
    """Base class for specsview errors."""


class QueryError(SpecsViewError):
    """A hardware/OS query failed."""


class RenderError(SpecsViewError):
    """Collected facts could not be shaped into display rows."""
