"""
Optional interpretation of the free-text memo.

Managers write things like ``*대관 15~17`` or ``파트: 오픈`` into the memo;
the dashboard shows them as separate "part" and "rental" columns. These
helpers pull those tokens out as ``MemoTag`` values and rewrite one tag
without touching the rest of the memo.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

TagKind = Literal["part", "rental"]

_VALUE = r"[^\s,/]+"

_PART_PREFIX_RE = re.compile(rf"(?:파트|\bpart\b)\s*[:：]?\s*({_VALUE})", re.IGNORECASE)
_PART_SUFFIX_RE = re.compile(rf"({_VALUE}?)\s*파트")
# Bare shift words match only as standalone tokens, never inside 오픈하우스.
_SHIFT_KEYWORDS = tuple(
    (label, re.compile(rf"(?<![^\s/,:])(?:{label}|{english})(?![^\s/,])", re.IGNORECASE))
    for label, english in (("오픈", "open"), ("마감", "closing"), ("미들", "middle"))
)
_RENTAL_RE = re.compile(
    rf"(?:대관|\brental\b)\s*[:：]?\s*({_VALUE}(?:\s*~\s*{_VALUE})?)",
    re.IGNORECASE,
)

_LABELS: dict[str, str] = {"part": "파트", "rental": "대관"}


@dataclass(frozen=True)
class MemoTag:
    kind: TagKind
    value: str


def extract_part(memo: str) -> str | None:
    if not memo:
        return None
    m = _PART_PREFIX_RE.search(memo)
    if m:
        return m.group(1)
    m = _PART_SUFFIX_RE.search(memo)
    if m and m.group(1):
        return m.group(1)
    for label, pattern in _SHIFT_KEYWORDS:
        if pattern.search(memo):
            return label
    return None


def extract_rental(memo: str) -> str | None:
    if not memo:
        return None
    m = _RENTAL_RE.search(memo)
    return m.group(1) if m else None


def extract_tags(memo: str) -> list[MemoTag]:
    tags: list[MemoTag] = []
    part = extract_part(memo)
    if part:
        tags.append(MemoTag("part", part))
    rental = extract_rental(memo)
    if rental:
        tags.append(MemoTag("rental", rental))
    return tags


def _tidy(memo: str) -> str:
    pieces = [p.strip() for p in memo.split("/")]
    return " / ".join(p for p in pieces if p)


def set_tag(memo: str, kind: TagKind, value: str) -> str:
    """Replace the ``kind`` tag in ``memo`` with ``value``; an empty value just removes it."""
    memo = memo or ""
    if kind == "part":
        memo = _PART_PREFIX_RE.sub("", memo, count=1)
        memo = _PART_SUFFIX_RE.sub("", memo, count=1)
        for _, pattern in _SHIFT_KEYWORDS:
            memo = pattern.sub("", memo)
    else:
        memo = _RENTAL_RE.sub("", memo, count=1)

    memo = _tidy(memo)
    if not value:
        return memo
    tag = f"{_LABELS[kind]}: {value}"
    return f"{memo} / {tag}" if memo else tag
