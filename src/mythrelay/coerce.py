"""Output coercion.

The upstream is asked for schema-constrained JSON, but the text that comes back
is not always clean: code fences, a top-level array, or prose around the object.

Policy:
- Strategies are pure functions text -> Optional[dict], tried in order.
- The first strategy that yields a dict wins.
- A top-level array counts when it holds at least one object (the first one is taken).
- None from every strategy means the caller synthesizes a fallback answer.

This file implements:
- coerce_json_object_text(text) -> (parsed_dict_or_none, error_or_none)
"""
from __future__ import annotations

import json
import re
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

Strategy = Callable[[str], Optional[Dict[str, Any]]]

_FENCE_RE = re.compile(r"^\s*```[A-Za-z0-9_-]*[ \t]*\n?(.*?)\n?[ \t]*```\s*$", re.DOTALL)
# a JSON object opens with a key or closes right away
_OBJECT_START = re.compile(r"\{\s*[\"}]")

def as_object(value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, dict):
        return value
    if isinstance(value, list):
        for item in value:
            if isinstance(item, dict):
                return item
    return None

def _loads(s: str) -> Optional[Dict[str, Any]]:
    try:
        return as_object(json.loads(s))
    except (ValueError, RecursionError):
        # too deeply nested counts as unparseable
        return None

def parse_strict(text: str) -> Optional[Dict[str, Any]]:
    return _loads(text.strip())

def strip_code_fence(text: str) -> Optional[str]:
    m = _FENCE_RE.match(text)
    if not m:
        return None
    return m.group(1).strip()

def parse_fenced(text: str) -> Optional[Dict[str, Any]]:
    inner = strip_code_fence(text)
    if inner is None:
        return None
    return _loads(inner)

def iter_balanced_spans(text: str) -> Iterator[str]:
    """Yield every balanced {...} span that can open a JSON object, in order of its opening brace.

    Braces inside double-quoted strings do not count, and a backslash inside a
    string escapes the next character. One pass with a stack of open braces:
    an opener that never closes is simply left on the stack, so nested openers
    after it still pair up.
    """
    first = text.find("{")
    if first == -1:
        return

    open_at: List[int] = []
    pairs: List[Tuple[int, int]] = []
    in_string = False
    escaped = False
    for i in range(first, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            open_at.append(i)
        elif ch == "}" and open_at:
            pairs.append((open_at.pop(), i))

    for start, end in sorted(pairs):
        if not _OBJECT_START.match(text, start):
            continue
        yield text[start : end + 1]

def parse_balanced(text: str) -> Optional[Dict[str, Any]]:
    for span in iter_balanced_spans(text):
        obj = _loads(span)
        if obj is not None:
            return obj
    return None

STRATEGIES: List[Strategy] = [parse_strict, parse_fenced, parse_balanced]

def coerce_json_object_text(
    text: Optional[str], strategies: Optional[List[Strategy]] = None
) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    if text is None:
        return None, "empty response"

    s = str(text).strip()
    if not s:
        return None, "empty response"

    for strategy in strategies or STRATEGIES:
        obj = strategy(s)
        if obj is not None:
            return obj, None

    return None, "no JSON object found in text"
