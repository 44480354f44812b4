"""actiongate: request-dispatch core of an HTTP API front controller."""

__version__ = "0.1.0"
