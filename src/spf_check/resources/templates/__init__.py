"""Packaged Jinja2 output templates."""
