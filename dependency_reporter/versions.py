"""
Naive dotted-integer version comparison.
"""

from __future__ import annotations

import re
from itertools import zip_longest
from typing import List


RANGE_OPERATORS = "^~>=<"

_NUMERIC_COMPONENT = re.compile(r"[0-9]+")


def clean_version(version: str) -> str:
    """Strip a single leading range operator such as ``^`` or ``~``."""
    if version and version[0] in RANGE_OPERATORS:
        version = version[1:]
    return version.strip()


def _numeric_parts(version: str) -> List[int]:
    parts = []
    for part in version.split("."):
        if not _NUMERIC_COMPONENT.fullmatch(part):
            raise ValueError(f"not a numeric version component: {part!r}")
        parts.append(int(part))
    return parts


def is_outdated(installed: str, latest: str) -> bool:
    """Return True if the installed version is older than the latest one.

    Components are compared left to right as integers, missing trailing
    components count as 0. Only plain ASCII digits are accepted: a
    pre-release tag, a second range operator (``=1.0.0`` left from
    ``>=1.0.0``), ``1_0``, ``+1`` or any other non-numeric component makes
    the comparison return False instead of being read as 0.
    """
    try:
        installed_parts = _numeric_parts(clean_version(installed))
        latest_parts = _numeric_parts(latest)
    except (ValueError, AttributeError, TypeError):
        return False

    for installed_part, latest_part in zip_longest(installed_parts, latest_parts, fillvalue=0):
        if installed_part < latest_part:
            return True
        if installed_part > latest_part:
            return False
    return False
