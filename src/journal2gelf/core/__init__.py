"""Core processing pipeline."""
