"""Line-oriented blocklist parsing.

Files are streamed one line at a time. The extraction strategy is chosen once
per file from its `FormatKind`.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Iterator

from core.domain.models import FormatKind
from core.domain.validation import is_valid_domain
from core.errors import ParseError

Extractor = Callable[[list[str]], str]

_WHITESPACE_RE = re.compile(r"\s+")


def _two_column(tokens: list[str]) -> str:
    return tokens[1] if len(tokens) > 1 else ""


def _one_column(tokens: list[str]) -> str:
    return tokens[0]


def _dnsmasq(tokens: list[str]) -> str:
    # e.g. "/ads.example.com/" or "address=/ads.example.com/0.0.0.0"
    segments = tokens[0].split("/")
    return segments[1] if len(segments) > 1 else ""


_EXTRACTORS: dict[FormatKind, Extractor] = {
    FormatKind.TWO_COLUMN: _two_column,
    FormatKind.ONE_COLUMN: _one_column,
    FormatKind.DNSMASQ: _dnsmasq,
}


def get_extractor(fmt: FormatKind) -> Extractor:
    return _EXTRACTORS[FormatKind(fmt)]


def tokenize(line: str) -> list[str]:
    """Collapse whitespace runs and split on single spaces."""

    collapsed = _WHITESPACE_RE.sub(" ", line.strip())
    if not collapsed:
        return []
    return collapsed.split(" ")


def extract_candidate(line: str, extractor: Extractor) -> str | None:
    """Return the candidate of one line, or None when the line is skipped.

    An empty string means the line had no token at the required position.
    """

    tokens = tokenize(line)
    if not tokens or tokens[0].startswith("#"):
        return None
    return extractor(tokens).strip().lower()


def iter_candidates(path: Path, fmt: FormatKind) -> Iterator[str]:
    """Lazily yield the raw candidate of every non-comment line of `path`.

    Raises `ParseError` if the file cannot be opened or read to the end.
    """

    extractor = get_extractor(fmt)
    try:
        with path.open("r", encoding="utf-8", errors="replace") as fh:
            for line in fh:
                candidate = extract_candidate(line, extractor)
                if candidate is not None:
                    yield candidate
    except OSError as exc:
        raise ParseError(f"Cannot read {path}: {exc}") from exc


def iter_domains(path: Path, fmt: FormatKind) -> Iterator[str]:
    """Like `iter_candidates` but only yields valid domain names."""

    for candidate in iter_candidates(path, fmt):
        if is_valid_domain(candidate):
            yield candidate
