"""Packaged data files (JSON schema, output templates)."""
