"""readygo -- scaffold production-ready Go services from a declarative config."""

__version__ = "1.1.0"
