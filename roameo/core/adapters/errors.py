"""Errors raised by external service adapters."""


class AdapterError(Exception):
    """Base class for adapter failures."""

    pass


class GeocodeError(AdapterError):
    """A place name could not be resolved to coordinates."""

    pass


class RouteNotFoundError(AdapterError):
    """The routing service returned no usable route."""

    pass
