"""BeautiBook salon booking backend: slot availability and booking holds."""

__version__ = "1.0.0"
