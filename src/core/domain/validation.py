"""Hostname validation for blocklist entries."""

from __future__ import annotations

import re

_LABEL = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9\-]*[a-zA-Z0-9])"
_HOSTNAME_RE = re.compile(rf"(?:{_LABEL}\.)*{_LABEL}")

_RESERVED = frozenset({"localhost"})


def is_valid_domain(candidate: str) -> bool:
    """Return True when `candidate` is a dot-joined sequence of hostname labels.

    Labels are alphanumerics and hyphens, never start or end with a hyphen and
    are never empty. `localhost` is rejected.
    """

    if not candidate or candidate in _RESERVED:
        return False
    return _HOSTNAME_RE.fullmatch(candidate) is not None
