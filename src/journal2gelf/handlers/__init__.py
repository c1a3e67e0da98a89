"""Log handlers for journal2gelf's own diagnostics."""
