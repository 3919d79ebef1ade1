# -*- coding: utf-8 -*-
"""
Result records and the rules that coerce loosely-typed model output into them.

Every record validates in a single pass: scores are clamped, enums fall back
to their default member, lists are truncated and text fields fall back to the
caller's source text (passed as validation context under "source_text").
Feeding a dumped record back through validation returns the same record.
"""

import logging
import math
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

SCORE_MIN, SCORE_MAX = 0, 100
DEFAULT_SCORE = 50

MAX_REASONING = 5
MAX_PATTERNS = 10
MAX_SEGMENTS = 10
MAX_SEGMENT_CHARS = 500
MAX_REASON_CHARS = 200
MAX_CORRECTIONS = 50
MAX_SOURCES = 10
MAX_FLAGGED_PHRASES = 20

DEFAULT_SEGMENT_REASON = "AI pattern detected"
UNCERTAIN_REASONING = "Analysis completed but results are uncertain. Please try again."


# ==============================================================================
# COERCION HELPERS
# ==============================================================================
def clamp_score(value: Any, default: int = DEFAULT_SCORE) -> int:
    """Coerces `value` to an int in [0, 100]; None, bools, NaN and junk give `default`."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        # Arbitrarily large ints would overflow float().
        return min(SCORE_MAX, max(SCORE_MIN, value))
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if math.isnan(number):
        return default
    return int(round(min(SCORE_MAX, max(SCORE_MIN, number))))


def as_list(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _string_list(value: Any, limit: int) -> List[str]:
    return [as_text(item) for item in as_list(value)[:limit] if item is not None]


def _source_text(info: ValidationInfo) -> str:
    return as_text((info.context or {}).get("source_text"))


class Verdict(str, Enum):
    HUMAN = "Human-Written"
    AI = "AI-Generated"
    UNCERTAIN = "Mixed/Uncertain"


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ConfidenceLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _enum_member(enum_cls, value: Any, default):
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        logging.debug(f"Unexpected {enum_cls.__name__} value {value!r}, using {default.value!r}")
        return default


class ResultModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True, use_enum_values=True, validate_default=True, extra="ignore"
    )

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


# ==============================================================================
# DETECTION
# ==============================================================================
class Metrics(ResultModel):
    perplexity_score: int = Field(DEFAULT_SCORE, alias="perplexityScore")
    burstiness_score: int = Field(DEFAULT_SCORE, alias="burstinessScore")
    readability_score: int = Field(DEFAULT_SCORE, alias="readabilityScore")
    repetitiveness_score: int = Field(DEFAULT_SCORE, alias="repetitivenessScore")

    @field_validator("*", mode="before")
    @classmethod
    def _clamp(cls, value):
        return clamp_score(value)


class SuspiciousSegment(ResultModel):
    segment: str
    reason: str = DEFAULT_SEGMENT_REASON
    severity: Severity = Severity.MEDIUM

    @field_validator("segment", mode="before")
    @classmethod
    def _truncate_segment(cls, value):
        return as_text(value)[:MAX_SEGMENT_CHARS]

    @field_validator("reason", mode="before")
    @classmethod
    def _truncate_reason(cls, value):
        return (as_text(value) or DEFAULT_SEGMENT_REASON)[:MAX_REASON_CHARS]

    @field_validator("severity", mode="before")
    @classmethod
    def _severity(cls, value):
        return _enum_member(Severity, value, Severity.MEDIUM)


def _segment_items(value: Any) -> List[Dict[str, Any]]:
    """Truncates to the segment maximum, then drops entries without a segment."""
    items = []
    for raw in as_list(value)[:MAX_SEGMENTS]:
        if isinstance(raw, BaseModel):
            raw = raw.model_dump(by_alias=True)
        if not isinstance(raw, dict):
            continue
        segment = as_text(raw.get("segment"))[:MAX_SEGMENT_CHARS]
        if not segment:
            continue
        items.append({"segment": segment, "reason": raw.get("reason"), "severity": raw.get("severity")})
    return items


class AnalysisResult(ResultModel):
    verdict: Verdict = Verdict.UNCERTAIN
    confidence_score: int = Field(DEFAULT_SCORE, alias="confidenceScore")
    reasoning: List[str] = Field(default_factory=list)
    metrics: Metrics = Field(default_factory=Metrics)
    detected_patterns: List[str] = Field(default_factory=list, alias="detectedPatterns")
    suspicious_segments: List[SuspiciousSegment] = Field(default_factory=list, alias="suspiciousSegments")

    @field_validator("verdict", mode="before")
    @classmethod
    def _verdict(cls, value):
        return _enum_member(Verdict, value, Verdict.UNCERTAIN)

    @field_validator("confidence_score", mode="before")
    @classmethod
    def _confidence(cls, value):
        return clamp_score(value)

    @field_validator("reasoning", mode="before")
    @classmethod
    def _reasoning(cls, value):
        return _string_list(value, MAX_REASONING)

    @field_validator("metrics", mode="before")
    @classmethod
    def _metrics(cls, value):
        if isinstance(value, BaseModel):
            return value
        return value if isinstance(value, dict) else {}

    @field_validator("detected_patterns", mode="before")
    @classmethod
    def _patterns(cls, value):
        return _string_list(value, MAX_PATTERNS)

    @field_validator("suspicious_segments", mode="before")
    @classmethod
    def _segments(cls, value):
        return _segment_items(value)

    @classmethod
    def uncertain(cls) -> "AnalysisResult":
        return cls(reasoning=[UNCERTAIN_REASONING])


# ==============================================================================
# PLAGIARISM
# ==============================================================================
class SourceMatch(ResultModel):
    url: str
    match: int = 0

    @field_validator("match", mode="before")
    @classmethod
    def _match(cls, value):
        return clamp_score(value, default=0)


def _source_items(value: Any) -> List[Dict[str, Any]]:
    items = []
    for raw in as_list(value)[:MAX_SOURCES]:
        if isinstance(raw, BaseModel):
            raw = raw.model_dump(by_alias=True)
        if isinstance(raw, dict):
            url = as_text(raw.get("url") or raw.get("source")).strip()
            match = raw.get("match", raw.get("matchPercent"))
        else:
            url, match = as_text(raw).strip(), None
        if url:
            items.append({"url": url, "match": match})
    return items


class PlagiarismResult(ResultModel):
    percentage: int = 0
    confidence: ConfidenceLevel = ConfidenceLevel.MEDIUM
    sources: List[SourceMatch] = Field(default_factory=list)
    flagged_phrases: List[str] = Field(default_factory=list)

    @field_validator("percentage", mode="before")
    @classmethod
    def _percentage(cls, value):
        return clamp_score(value, default=0)

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence(cls, value):
        return _enum_member(ConfidenceLevel, value, ConfidenceLevel.MEDIUM)

    @field_validator("sources", mode="before")
    @classmethod
    def _sources(cls, value):
        return _source_items(value)

    @field_validator("flagged_phrases", mode="before")
    @classmethod
    def _phrases(cls, value):
        return _string_list(value, MAX_FLAGGED_PHRASES)

    @classmethod
    def from_model_payload(cls, payload: Dict[str, Any]) -> "PlagiarismResult":
        """Maps the prompt's field names (plagiarism_percentage, potential_sources) onto the record."""
        return cls.model_validate({
            "percentage": payload.get("plagiarism_percentage", payload.get("percentage")),
            "confidence": payload.get("confidence"),
            "sources": payload.get("potential_sources", payload.get("sources")),
            "flagged_phrases": payload.get("flagged_phrases"),
        })

    @classmethod
    def unavailable(cls) -> "PlagiarismResult":
        return cls(confidence=ConfidenceLevel.LOW)


# ==============================================================================
# GRAMMAR
# ==============================================================================
class Correction(ResultModel):
    type: str = "grammar"
    original: str = ""
    corrected: str = ""
    explanation: str = ""

    @field_validator("original", "corrected", "explanation", mode="before")
    @classmethod
    def _text(cls, value):
        return as_text(value)

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, value):
        return as_text(value).strip().lower() or "grammar"


class GrammarResult(ResultModel):
    corrected_text: str = ""
    corrections: List[Correction] = Field(default_factory=list)
    score: Optional[int] = None

    @field_validator("corrected_text", mode="before")
    @classmethod
    def _corrected_text(cls, value, info: ValidationInfo):
        return as_text(value) or _source_text(info)

    @field_validator("corrections", mode="before")
    @classmethod
    def _corrections(cls, value):
        items = []
        for raw in as_list(value)[:MAX_CORRECTIONS]:
            if isinstance(raw, BaseModel):
                raw = raw.model_dump(by_alias=True)
            if isinstance(raw, dict):
                items.append(raw)
        return items

    @field_validator("score", mode="before")
    @classmethod
    def _score(cls, value):
        return None if value is None else clamp_score(value)

    def model_post_init(self, __context: Any) -> None:
        # Missing score: clean text unless corrections came back.
        if self.score is None:
            self.score = DEFAULT_SCORE if self.corrections else SCORE_MAX

    @classmethod
    def unchanged(cls, text: str) -> "GrammarResult":
        return cls(corrected_text=text, corrections=[], score=SCORE_MAX)


# ==============================================================================
# PLAIN-TEXT TASKS
# ==============================================================================
def normalize_text(raw: Optional[str], fallback: str = "") -> str:
    """Trims a plain-text model reply; an empty reply yields `fallback`."""
    text = as_text(raw).strip()
    return text or fallback


class HumanizeResult(ResultModel):
    humanized_text: str


class ParaphraseResult(ResultModel):
    paraphrased_text: str


class TranslationResult(ResultModel):
    translated_text: str
    detected_language: str


class SummaryResult(ResultModel):
    summary: str


class ChatResult(ResultModel):
    response: str


class CitationResult(ResultModel):
    citation: str
