"""Exceptions raised by the order webhook pipeline."""

import requests


class OrderEventsError(Exception):
    """Base class for all pipeline errors."""


class OrderParseError(OrderEventsError):
    """The verified body is not a usable order payload."""


class TrackingError(OrderEventsError):
    """The marketing event could not be recorded."""


class AnnotationError(OrderEventsError):
    """The order note could not be written."""


def describe_http_error(exc: Exception) -> str:
    """Return the upstream response body if there is one, else the error message."""
    if isinstance(exc, requests.RequestException) and exc.response is not None:
        return exc.response.text or str(exc)
    return str(exc)


# Anything a single lookup can raise, from transport failures to a 200
# response whose body does not have the expected shape.
LOOKUP_ERRORS = (requests.RequestException, ValueError, AttributeError, TypeError, KeyError)
