# -*- coding: utf-8 -*-
"""
Locates the JSON object a model embedded in its free-text reply.

The model is told to answer with JSON only, but replies often arrive wrapped
in prose or Markdown fences. Spans are found in a single depth-balanced pass that
skips braces inside JSON string literals, so trailing prose containing braces
is never swallowed into the candidate object.
"""

import json
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple


class MalformedModelOutput(Exception):
    """Model reply carried no usable JSON object."""


class JSONNotFoundError(MalformedModelOutput):
    pass


class JSONParseError(MalformedModelOutput):
    pass


_DECODER = json.JSONDecoder()


def _brace_spans(text: str) -> List[Tuple[int, int]]:
    """
    Returns (start, end) for every balanced {...} span, sorted by opening brace.

    One pass with a stack of open positions. Quotes only open a string literal
    inside a span; an opening brace that never closes is simply left behind.
    """
    spans = []
    stack = []
    in_string = False
    escape = False
    for i, ch in enumerate(text):
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == "{":
            stack.append(i)
        elif ch == "}":
            if stack:
                spans.append((stack.pop(), i + 1))
        elif ch == '"' and stack:
            in_string = True
    spans.sort()
    return spans


def iter_brace_spans(text: str) -> Iterator[str]:
    """Yields balanced {...} spans, in order of their opening brace."""
    for start, end in _brace_spans(text):
        yield text[start:end]


def extract_json_object(text: Optional[str]) -> Dict[str, Any]:
    """
    Returns the first balanced {...} span of `text` that parses as a JSON object.

    Raises JSONNotFoundError when there is no balanced span at all and
    JSONParseError when spans exist but none of them is valid JSON.
    """
    if not text:
        raise JSONNotFoundError("Empty model response")

    spans = _brace_spans(text)
    if not spans:
        raise JSONNotFoundError("No JSON object found in response")

    last_error = None
    for start, end in spans:
        try:
            parsed, parsed_end = _DECODER.raw_decode(text, start)
        except (ValueError, RecursionError) as e:
            # ValueError covers JSONDecodeError and the int digit limit.
            last_error = e
            continue
        if parsed_end == end and isinstance(parsed, dict):
            return parsed

    raise JSONParseError(f"Invalid JSON in response: {last_error}")


def try_extract_json(text: Optional[str], label: str = "model") -> Optional[Dict[str, Any]]:
    """Fail-closed wrapper: logs the problem and returns None instead of raising."""
    try:
        return extract_json_object(text)
    except MalformedModelOutput as e:
        logging.warning(f"{label} response unusable, falling back to defaults: {e}")
        return None
