"""
Schedule-text parser.

Turns the shorthand schedule the managers paste from chat into shift records::

    홍대 10 진리 (14 다빈 인아)
    *대관 15시
    HQ 09 Alice

A shift line is ``<branch> <time> <name> <name> ...`` with optional
``(<time> <name> ...)`` groups that share the line's branch. A line starting
with ``*`` is a memo for every record produced by the previous shift line.

Parsing is a fold over the lines with an immutable ``ParseState``, so the
whole thing is a pure function of ``(text, date)``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import reduce
from typing import Iterable, NamedTuple

from layer_attendance.schemas.attendance import ShiftRecord

logger = logging.getLogger(__name__)

TIME_TOKEN_RE = re.compile(r"^(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?$")

_SKIP_LINE_RE = re.compile(
    r"^(스케줄 없음|근무\s*-|휴무\s*-|연차\s*-|no schedule|work\s*-|off\s*-|leave\s*-)",
    re.IGNORECASE,
)
_GROUP_RE = re.compile(r"\(([^)]+)\)")
_CODE_RE = re.compile(r"^[A-Z]+$")

ANNOTATION_MARKER = "*"
MEMO_SEPARATOR = " / "

# Shift and team labels that show up between names but are not people.
DEFAULT_IGNORE_KEYWORDS: tuple[str, ...] = (
    "마감", "ABD", "BGD", "1팀", "2팀", "3팀", "파트", "오픈", "미들",
    "closing", "open", "middle", "part", "team",
)


def is_time_token(token: str) -> bool:
    """``9``, ``09``, ``14:30`` — hour 0-23, minute 0-59."""
    m = TIME_TOKEN_RE.match(token)
    if not m:
        return False
    minute = m.group("minute")
    return int(m.group("hour")) <= 23 and (minute is None or int(minute) <= 59)


def is_valid_name(token: str, ignore_keywords: Iterable[str] = DEFAULT_IGNORE_KEYWORDS) -> bool:
    if is_time_token(token):
        return False
    if token[:1].isdigit():
        return False
    # ABD, BGD: upper-case codes, not people
    if _CODE_RE.match(token):
        return False
    # Closing / OPEN / part all mark shifts
    folded = token.casefold()
    return not any(k.casefold() in folded for k in ignore_keywords)


class ShiftGroup(NamedTuple):
    time: str
    names: list[str]


@dataclass(frozen=True)
class ParseState:
    records: tuple[ShiftRecord, ...] = ()
    batch_start: int = 0


def _scan_group(content: str, ignore_keywords: Iterable[str]) -> ShiftGroup | None:
    time = ""
    names: list[str] = []
    for token in content.split():
        if not time and is_time_token(token):
            time = token
        elif is_valid_name(token, ignore_keywords):
            names.append(token)
    if time and names:
        return ShiftGroup(time, names)
    return None


def parse_shift_line(
    line: str,
    date: str,
    ignore_keywords: Iterable[str] = DEFAULT_IGNORE_KEYWORDS,
) -> list[ShiftRecord]:
    """Records for a single shift line, main part first, then ``(...)`` groups."""
    ignore_keywords = tuple(ignore_keywords)
    groups = [
        g for g in (_scan_group(m.group(1), ignore_keywords) for m in _GROUP_RE.finditer(line)) if g
    ]

    tokens = _GROUP_RE.sub(" ", line).split()
    if not tokens:
        logger.debug("No branch token, skipping line %r", line)
        return []

    branch = tokens[0]
    if len(tokens) > 1 and is_time_token(tokens[1]):
        names = [t for t in tokens[2:] if is_valid_name(t, ignore_keywords)]
        if names:
            groups.insert(0, ShiftGroup(tokens[1], names))

    return [
        ShiftRecord(date=date, branch=branch, name=name, scheduled_in=group.time)
        for group in groups
        for name in group.names
    ]


def _annotate(state: ParseState, memo: str) -> ParseState:
    if not memo:
        return state
    head = state.records[: state.batch_start]
    batch = tuple(
        r.model_copy(update={"memo": f"{r.memo}{MEMO_SEPARATOR}{memo}" if r.memo else memo})
        for r in state.records[state.batch_start :]
    )
    return ParseState(records=head + batch, batch_start=state.batch_start)


def _step(state: ParseState, line: str, date: str, ignore_keywords: tuple[str, ...]) -> ParseState:
    if _SKIP_LINE_RE.match(line):
        return state
    if line.startswith(ANNOTATION_MARKER):
        return _annotate(state, line[len(ANNOTATION_MARKER) :].strip())

    produced = parse_shift_line(line, date, ignore_keywords)
    return ParseState(records=state.records + tuple(produced), batch_start=len(state.records))


def parse_schedule(
    text: str,
    date: str,
    *,
    ignore_keywords: Iterable[str] = DEFAULT_IGNORE_KEYWORDS,
) -> list[ShiftRecord]:
    """Parse a pasted schedule into unsaved shift records for ``date``.

    Never raises on odd input: lines that do not fit the grammar simply
    produce no records.
    """
    keywords = tuple(ignore_keywords)
    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    state = reduce(lambda acc, ln: _step(acc, ln, date, keywords), lines, ParseState())
    logger.debug("Parsed %d lines into %d records for %s", len(lines), len(state.records), date)
    return list(state.records)
