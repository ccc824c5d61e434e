"""Linear workflow state resource provider."""

__version__ = "0.1.0"
