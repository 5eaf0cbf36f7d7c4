"""Bank statement import, classification and learning."""

__version__ = "0.1.0"
