"""Visual regression testing helpers: image comparison, configuration and validation."""

__version__ = "0.0.1"