"""Version information for journal2gelf."""

__version__ = "0.3.0"
