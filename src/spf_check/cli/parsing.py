"""Parsing helpers for CLI inputs."""

from __future__ import annotations

import argparse


def _parse_positive_float(value: str, *, label: str) -> float:
    """Parse a positive float value from CLI input.

    Args:
        value (str): String value to parse.
        label (str): Human-friendly label for error messages.

    Returns:
        float: Parsed positive float.

    Raises:
        argparse.ArgumentTypeError: If the value is invalid or not positive.
    """
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{label} must be a number") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"{label} must be greater than zero")
    return parsed


def _parse_depth(value: str) -> int:
    """Parse a maximum include depth from CLI input.

    Args:
        value (str): String value to parse.

    Returns:
        int: Parsed non-negative depth.

    Raises:
        argparse.ArgumentTypeError: If the value is not a non-negative integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("Maximum depth must be an integer") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("Maximum depth must not be negative")
    return parsed
