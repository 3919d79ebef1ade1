# -*- coding: utf-8 -*-
"""
Task handlers for the writing tools.

Each handler validates its input, builds one prompt, makes exactly one model
call and returns a fully shaped result record:

    Received -> Prompted -> Invoked -> (Extracted -> Normalized) -> Returned

ClientInputError is raised before any model call. ProviderError from the
invoker propagates unchanged. Unusable model output never raises: it resolves
to the task's default record.
"""

import logging
from typing import Any, Dict, List, Optional

from model_invoker import EffortTier, ModelInvoker
from prompt_builder import AUTO_DETECT, DEFAULT_CITATION_STYLE, build_prompt
from response_extractor import try_extract_json
from result_normalizer import (
    AnalysisResult,
    ChatResult,
    CitationResult,
    GrammarResult,
    HumanizeResult,
    ParaphraseResult,
    PlagiarismResult,
    SummaryResult,
    TranslationResult,
    normalize_text,
)
from segment_aligner import Span, build_spans
from settings import CONFIG


class ClientInputError(ValueError):
    """Request failed a precondition; no model call was made."""


TASK_EFFORT = {
    "detect": EffortTier.DEEP,
    "plagiarism": EffortTier.DEEP,
    "humanize": EffortTier.DEEP,
    "paraphrase": EffortTier.DEEP,
    "grammar": EffortTier.DEEP,
    "summarize": EffortTier.DEEP,
    "translate": EffortTier.FAST,
    "chat": EffortTier.FAST,
    "citation": EffortTier.FAST,
}


def require_text(value: Any, min_length: int, message: str) -> str:
    """Returns `value` when it is a string of at least `min_length` non-blank characters."""
    if not isinstance(value, str) or len(value.strip()) < max(min_length, 1):
        raise ClientInputError(message)
    return value


class WritingTasks:
    def __init__(self, invoker: ModelInvoker, config: Dict[str, Any] = CONFIG):
        self.invoker = invoker
        self.config = config

    def _min_length(self, task: str) -> int:
        return self.config["min_text_length"][task]

    def _run(self, task: str, text: str, options: Optional[Dict[str, Any]] = None,
             max_output_tokens: Optional[int] = None) -> str:
        prompt = build_prompt(task, text, options)
        response_text = self.invoker.invoke(prompt, TASK_EFFORT[task], max_output_tokens)
        logging.info(f"Model {task} response:\n{response_text}")
        return response_text

    # --------------------------------------------------------------------------
    # Structured (JSON) tasks
    # --------------------------------------------------------------------------
    def detect(self, text: Any) -> AnalysisResult:
        text = require_text(
            text, self._min_length("detect"),
            f"Please enter at least {self._min_length('detect')} characters for accurate forensic analysis.",
        )
        response_text = self._run("detect", text, max_output_tokens=self.config["detection_max_output_tokens"])
        payload = try_extract_json(response_text, label="detect")
        if payload is None:
            return AnalysisResult.uncertain()
        return AnalysisResult.model_validate(payload)

    def highlight(self, text: str, result: AnalysisResult) -> List[Span]:
        """Aligns the result's suspicious segments onto `text` for display."""
        return build_spans(text, result.suspicious_segments)

    def plagiarism(self, text: Any) -> PlagiarismResult:
        text = require_text(
            text, self._min_length("plagiarism"),
            f"Text must be at least {self._min_length('plagiarism')} characters long",
        )
        payload = try_extract_json(self._run("plagiarism", text), label="plagiarism")
        if payload is None:
            return PlagiarismResult.unavailable()
        return PlagiarismResult.from_model_payload(payload)

    def grammar(self, text: Any) -> GrammarResult:
        text = require_text(
            text, self._min_length("grammar"),
            f"Text must be at least {self._min_length('grammar')} characters long",
        )
        payload = try_extract_json(self._run("grammar", text), label="grammar")
        if payload is None:
            return GrammarResult.unchanged(text)
        return GrammarResult.model_validate(payload, context={"source_text": text})

    # --------------------------------------------------------------------------
    # Plain-text tasks
    # --------------------------------------------------------------------------
    def humanize(self, text: Any, mode: str = "basic") -> HumanizeResult:
        text = require_text(
            text, self._min_length("humanize"),
            f"Text must be at least {self._min_length('humanize')} characters long",
        )
        response_text = self._run("humanize", text, {"mode": mode})
        return HumanizeResult(humanized_text=normalize_text(response_text, fallback=text))

    def paraphrase(self, text: Any, mode: str = "standard", synonym_level: Any = 50) -> ParaphraseResult:
        text = require_text(
            text, self._min_length("paraphrase"),
            f"Text must be at least {self._min_length('paraphrase')} characters long",
        )
        response_text = self._run("paraphrase", text, {"mode": mode, "synonymLevel": synonym_level})
        return ParaphraseResult(paraphrased_text=normalize_text(response_text, fallback=text))

    def translate(self, text: Any, target_lang: Any, source_lang: Any = AUTO_DETECT) -> TranslationResult:
        text = require_text(text, 1, "Text is required")
        if not isinstance(target_lang, str) or not target_lang.strip():
            raise ClientInputError("Target language is required")
        source_lang = source_lang if isinstance(source_lang, str) and source_lang.strip() else AUTO_DETECT

        response_text = self._run("translate", text, {"sourceLang": source_lang, "targetLang": target_lang})
        return TranslationResult(
            translated_text=normalize_text(response_text, fallback=text),
            detected_language="Detected" if source_lang == AUTO_DETECT else source_lang,
        )

    def summarize(self, text: Any, mode: str = "paragraph", length: str = "medium") -> SummaryResult:
        text = require_text(
            text, self._min_length("summarize"),
            f"Text must be at least {self._min_length('summarize')} characters long",
        )
        response_text = self._run("summarize", text, {"mode": mode, "length": length})
        return SummaryResult(summary=normalize_text(response_text, fallback=text))

    def chat(self, message: Any, history: Any = None) -> ChatResult:
        message = require_text(message, 1, "Message is required")
        response_text = self._run("chat", message, {"history": history or []})
        return ChatResult(response=normalize_text(response_text))

    def citation(self, source: Any, style: Any = DEFAULT_CITATION_STYLE) -> CitationResult:
        if not isinstance(source, dict) or not source.get("title"):
            raise ClientInputError("Source information is required")
        style = style if isinstance(style, str) and style.strip() else DEFAULT_CITATION_STYLE
        response_text = self._run("citation", "", {"source": source, "style": style})
        return CitationResult(citation=normalize_text(response_text))
