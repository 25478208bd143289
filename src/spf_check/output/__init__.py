"""Output helpers for presenting SPF evaluation results."""

from __future__ import annotations

import json
import os
from typing import Callable, Mapping, Optional, TextIO

from ..policy import PolicyNode
from ..status import Verdict, coerce_verdict
from .serialize import _serialize_entry, _serialize_node, _tree_rows
from .templates import _render_template

# SGR foreground codes per verdict.
_VERDICT_COLORS = {
    Verdict.PASS.value: "32",
    Verdict.SOFTFAIL.value: "33",
    Verdict.FAIL.value: "31",
    Verdict.NEUTRAL.value: "34",
}
_FALSEY_ENV_VALUES = {"0", "false", "no", "off"}
_FORCE_COLOR_VARS = ("CLICOLOR_FORCE", "FORCE_COLOR")


def _ansi_verdict(text: str) -> str:
    """Wrap a verdict in its ANSI color; other text is returned unchanged."""
    code = _VERDICT_COLORS.get(text)
    return f"\x1b[{code}m{text}\x1b[0m" if code else text


def make_verdict_colorizer(enabled: bool) -> Callable[[str], str]:
    """Return the verdict colorizer for human output.

    Args:
        enabled (bool): Whether ANSI colors should be applied.

    Returns:
        Callable[[str], str]: Colorizer, or an identity function when disabled.
    """
    return _ansi_verdict if enabled else str


def _env_flag(env: Mapping[str, str], name: str) -> Optional[bool]:
    """Read a boolean color flag; an empty value counts as set.

    Args:
        env (Mapping[str, str]): Environment mapping.
        name (str): Variable name.

    Returns:
        Optional[bool]: Flag value, or None when the variable is absent.
    """
    if name not in env:
        return None
    return env[name].strip().lower() not in _FALSEY_ENV_VALUES


def resolve_color_enabled(
    mode: str,
    stream: TextIO,
    env: Optional[Mapping[str, str]] = None,
) -> bool:
    """Decide whether the verdict should be colored.

    ``NO_COLOR`` always wins, then the ``--color`` mode. In ``auto`` mode a
    force variable decides if set, otherwise ``CLICOLOR=0``, a non-terminal
    stream or ``TERM=dumb`` turn colors off.

    Args:
        mode (str): Color mode (auto, always, never).
        stream (TextIO): Output stream for TTY detection.
        env (Optional[Mapping[str, str]]): Environment mapping override.

    Returns:
        bool: True if colors should be emitted.
    """
    env = os.environ if env is None else env
    if "NO_COLOR" in env or mode == "never":
        return False
    if mode == "always":
        return True
    for name in _FORCE_COLOR_VARS:
        forced = _env_flag(env, name)
        if forced is not None:
            return forced
    if env.get("CLICOLOR") == "0":
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty()) and env.get("TERM", "").lower() != "dumb"


def to_text(node: PolicyNode, ip: str, verdict: Verdict | str, matched: bool) -> str:
    """Render the one-line verdict message.

    Args:
        node (PolicyNode): Evaluated root policy.
        ip (str): Candidate sender address.
        verdict (Verdict | str): Evaluation verdict.
        matched (bool): Whether an allowlist entry matched.

    Returns:
        str: ``<verdict>: <ip> is [not ]a permitted sender for <domain>``.
    """
    negation = "" if matched else "not "
    verdict_text = coerce_verdict(verdict).value
    return f"{verdict_text}: {ip} is {negation}a permitted sender for {node.domain}"


def build_json_payload(
    node: PolicyNode,
    ip: str,
    verdict: Verdict | str,
    matched: bool,
    report_time: str,
) -> dict:
    """Build a JSON-serializable payload for an evaluation.

    Args:
        node (PolicyNode): Evaluated root policy.
        ip (str): Candidate sender address.
        verdict (Verdict | str): Evaluation verdict.
        matched (bool): Whether an allowlist entry matched.
        report_time (str): UTC report timestamp string.

    Returns:
        dict: JSON-serializable payload.
    """
    return {
        "domain": node.domain,
        "ip": ip,
        "verdict": coerce_verdict(verdict).value,
        "matched": matched,
        "report_time_utc": report_time,
        "allowlist": [_serialize_entry(entry) for entry in node.allowlist],
        "policy": _serialize_node(node),
    }


def to_json(
    node: PolicyNode,
    ip: str,
    verdict: Verdict | str,
    matched: bool,
    report_time: str,
) -> str:
    """Render an evaluation as JSON.

    Args:
        node (PolicyNode): Evaluated root policy.
        ip (str): Candidate sender address.
        verdict (Verdict | str): Evaluation verdict.
        matched (bool): Whether an allowlist entry matched.
        report_time (str): UTC report timestamp string.

    Returns:
        str: Indented JSON document.
    """
    return json.dumps(build_json_payload(node, ip, verdict, matched, report_time), indent=2)


def to_human(
    node: PolicyNode,
    ip: str,
    verdict: Verdict | str,
    matched: bool,
    report_time: str,
    colorize_verdict: Optional[Callable[[str], str]] = None,
) -> str:
    """Render an evaluation as an indented policy tree report.

    Args:
        node (PolicyNode): Evaluated root policy.
        ip (str): Candidate sender address.
        verdict (Verdict | str): Evaluation verdict.
        matched (bool): Whether an allowlist entry matched.
        report_time (str): UTC report timestamp string.
        colorize_verdict (Optional[Callable[[str], str]]): Verdict colorizer callback.

    Returns:
        str: Rendered report.
    """
    if colorize_verdict is None:
        colorize_verdict = str
    context = {
        "domain": node.domain,
        "ip": ip,
        "verdict": coerce_verdict(verdict).value,
        "matched": matched,
        "report_time": report_time,
        "rows": _tree_rows(node),
        "allowlist_size": len(node.allowlist),
        "error_count": len(node.all_errors()),
        "colorize": colorize_verdict,
    }
    return _render_template("human.txt.j2", context)


__all__ = [
    "build_json_payload",
    "make_verdict_colorizer",
    "resolve_color_enabled",
    "to_human",
    "to_json",
    "to_text",
]
