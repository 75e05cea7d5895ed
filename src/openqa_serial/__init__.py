"""Make openQA serial terminal logs readable again."""

__version__ = "0.3.0"
