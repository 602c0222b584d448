"""Generate Dart publisher/subscriber sources for scopes of frugal schemas."""

__version__ = "1.0.0"
