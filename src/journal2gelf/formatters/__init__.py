"""Log formatters for journal2gelf's own diagnostics."""
