"""Recover JSON objects and arrays from free-form or truncated model output."""

from __future__ import annotations

import json
import re
from typing import Any, Iterator, List, Optional, Tuple


_FENCE = re.compile(r"```(?:json|JSON)?\s*([\s\S]*?)(?:```|$)")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_MISSING_COMMA = re.compile(r'([}\]"]|\d|true|false|null)(\s*\n\s*)(["{\[])')
_DOUBLE_COMMA = re.compile(r",\s*,")
_SMART_QUOTES = str.maketrans({"“": '"', "”": '"', "‘": "'", "’": "'"})

_PAIRS = {"{": "}", "[": "]"}

# unpaired UTF-16 halves left by truncated \uXXXX escapes
_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


def extract_json_object(text: str) -> Optional[dict]:
    """Return the first JSON object recoverable from text, or None."""
    value = _extract(text, "{")
    return value if isinstance(value, dict) else None


def extract_json_array(text: str) -> Optional[list]:
    """Return the first JSON array recoverable from text, or None."""
    value = _extract(text, "[")
    return value if isinstance(value, list) else None


def repair_json(text: str) -> str:
    """Fix trailing commas, missing commas between members and smart quotes."""
    fixed = str(text or "").translate(_SMART_QUOTES)
    fixed = _TRAILING_COMMA.sub(r"\1", fixed)
    fixed = _MISSING_COMMA.sub(r"\1,\2\3", fixed)
    fixed = _DOUBLE_COMMA.sub(",", fixed)
    return fixed


def _extract(text: str, opener: str) -> Any:
    raw = str(text or "").strip()
    if not raw:
        return None

    expected = dict if opener == "{" else list
    parsed = _loads(raw)
    if isinstance(parsed, expected):
        return parsed

    for block in _FENCE.findall(raw):
        value = _extract_unfenced(block.strip(), opener, expected)
        if value is not None:
            return value

    return _extract_unfenced(raw, opener, expected)


def _extract_unfenced(raw: str, opener: str, expected: type) -> Any:
    if not raw:
        return None
    parsed = _loads(raw)
    if isinstance(parsed, expected):
        return parsed

    for candidate, complete in _balanced_candidates(raw, opener):
        for attempt in (candidate, repair_json(candidate)):
            parsed = _loads(attempt)
            if isinstance(parsed, expected):
                return parsed
        if not complete:
            closed = _close_truncated(repair_json(candidate))
            if closed:
                parsed = _loads(repair_json(closed))
                if isinstance(parsed, expected):
                    return parsed
    return None


def strip_surrogates(value: Any) -> Any:
    """Drop lone surrogates from every string in a decoded JSON value."""
    if isinstance(value, str):
        return _LONE_SURROGATE.sub("", value)
    if isinstance(value, list):
        return [strip_surrogates(item) for item in value]
    if isinstance(value, dict):
        return {strip_surrogates(key): strip_surrogates(item) for key, item in value.items()}
    return value


def _loads(text: str) -> Any:
    try:
        return strip_surrogates(json.loads(text))
    except (TypeError, ValueError):
        return None


def _balanced_candidates(text: str, opener: str) -> Iterator[Tuple[str, bool]]:
    """Yield (candidate, complete) slices starting at each opener.

    Scanning is string-aware; an opener that never closes yields the rest of
    the text with complete=False so the caller can attempt truncation recovery.
    """
    starts = [idx for idx, ch in enumerate(text) if ch == opener]
    for start in starts:
        end = _matching_close(text, start)
        if end is None:
            yield text[start:], False
            return
        yield text[start : end + 1], True


def _matching_close(text: str, start: int) -> Optional[int]:
    stack: List[str] = []
    in_string = False
    escape = False
    for idx in range(start, len(text)):
        ch = text[idx]
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _PAIRS:
            stack.append(_PAIRS[ch])
        elif ch in "}]":
            if not stack or stack[-1] != ch:
                return None
            stack.pop()
            if not stack:
                return idx
    return None


def _close_truncated(fragment: str) -> Optional[str]:
    """Cut a truncated document after its last complete member and close open brackets."""
    stack: List[str] = []
    in_string = False
    escape = False
    last_cut: Optional[Tuple[int, List[str]]] = None
    for idx, ch in enumerate(fragment):
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _PAIRS:
            stack.append(_PAIRS[ch])
        elif ch in "}]":
            if not stack:
                return None
            stack.pop()
            if not stack:
                return fragment[: idx + 1]
            last_cut = (idx + 1, list(stack))
        elif ch == ",":
            last_cut = (idx, list(stack))
    if last_cut is None:
        return None
    cut, open_stack = last_cut
    return fragment[:cut].rstrip().rstrip(",") + "".join(reversed(open_stack))
