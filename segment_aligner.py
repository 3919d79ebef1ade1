# -*- coding: utf-8 -*-
"""
Maps model-reported suspicious excerpts back onto the analysed text.

Only exact substrings survive. Accepted segments never overlap, and the
returned spans, concatenated in order, reproduce the original text.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional

NORMAL = "normal"
HIGHLIGHT = "highlight"


@dataclass(frozen=True)
class PositionedSegment:
    start: int
    end: int
    segment: str
    reason: str
    severity: str


@dataclass(frozen=True)
class Span:
    start: int
    end: int
    content: str
    type: str = NORMAL
    severity: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.type == NORMAL:
            del data["severity"], data["reason"]
        return data


def _fields(candidate: Any) -> Dict[str, Any]:
    if isinstance(candidate, dict):
        return candidate
    if hasattr(candidate, "model_dump"):
        return candidate.model_dump()
    return {"segment": getattr(candidate, "segment", None),
            "reason": getattr(candidate, "reason", None),
            "severity": getattr(candidate, "severity", None)}


def locate_segments(text: str, segments: Iterable[Any]) -> List[PositionedSegment]:
    """
    Finds each segment's first occurrence in `text` and keeps a non-overlapping,
    start-ordered subset. A segment starting before the previous accepted end is dropped.
    """
    located = []
    for order, candidate in enumerate(segments or []):
        fields = _fields(candidate)
        segment = fields.get("segment")
        if not isinstance(segment, str) or not segment:
            continue
        index = text.find(segment)
        if index == -1:
            continue
        located.append((index, order, PositionedSegment(
            start=index,
            end=index + len(segment),
            segment=segment,
            reason=str(fields.get("reason") or ""),
            severity=str(fields.get("severity") or "medium"),
        )))

    # Ties on start keep the model's original order.
    located.sort(key=lambda item: (item[0], item[1]))

    accepted = []
    max_end = -1
    for _, _, positioned in located:
        if positioned.start >= max_end:
            accepted.append(positioned)
            max_end = positioned.end
    return accepted


def build_spans(text: str, segments: Iterable[Any]) -> List[Span]:
    """Partitions `text` into normal and highlight spans covering it exactly."""
    text = text or ""
    accepted = locate_segments(text, segments)
    if not accepted:
        return [Span(start=0, end=len(text), content=text)]

    parts = []
    last_index = 0
    for seg in accepted:
        if seg.start > last_index:
            parts.append(Span(start=last_index, end=seg.start, content=text[last_index:seg.start]))
        parts.append(Span(
            start=seg.start, end=seg.end, content=seg.segment,
            type=HIGHLIGHT, severity=seg.severity, reason=seg.reason,
        ))
        last_index = seg.end

    if last_index < len(text):
        parts.append(Span(start=last_index, end=len(text), content=text[last_index:]))
    return parts
