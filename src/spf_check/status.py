"""SPF verdicts and CLI exit code mapping."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Verdict(Enum):
    """Known SPF evaluation results."""

    PASS = "pass"
    FAIL = "fail"
    SOFTFAIL = "softfail"
    NEUTRAL = "neutral"


# Terminal ``all`` directives that map to a verdict when nothing matched.
POLICY_VERDICTS = {
    "~all": Verdict.SOFTFAIL,
    "-all": Verdict.FAIL,
}


@dataclass(frozen=True)
class ExitCodes:
    """Exit codes used by the command-line interface.

    Attributes:
        OK (int): A verdict was produced.
        ERROR (int): Resolution or validation failed.
        USAGE (int): Invalid command-line usage.
    """

    OK: int = 0
    ERROR: int = 1
    USAGE: int = 2


def coerce_verdict(verdict: Union[Verdict, str, None]) -> Verdict:
    """Normalize a verdict string or enum into a Verdict value.

    Empty and unknown values collapse to ``Verdict.NEUTRAL``.

    Args:
        verdict (Verdict | str | None): Verdict enum or string value.

    Returns:
        Verdict: Normalized Verdict value.
    """
    if isinstance(verdict, Verdict):
        return verdict
    try:
        return Verdict(str(verdict or "").lower())
    except ValueError:
        return Verdict.NEUTRAL


def verdict_for_policy(policy: str) -> Verdict:
    """Map a terminal policy token to the verdict used when nothing matched.

    Args:
        policy (str): Terminal directive, e.g. ``~all``.

    Returns:
        Verdict: Mapped verdict, ``Verdict.NEUTRAL`` when the token is unmapped.
    """
    return POLICY_VERDICTS.get((policy or "").lower(), Verdict.NEUTRAL)


__all__ = ["ExitCodes", "POLICY_VERDICTS", "Verdict", "coerce_verdict", "verdict_for_policy"]
