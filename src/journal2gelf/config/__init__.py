"""Configuration schema, loading and hot reload."""
