# -*- coding: utf-8 -*-
"""
Task prompts for the writing tools.

build_prompt() is pure: the same task, text and options always produce the
same instruction string. User text is embedded inside a triple-quoted block,
and unknown option values fall back to each table's default entry.
"""

from typing import Any, Callable, Dict, List, Optional

from result_normalizer import clamp_score

AUTO_DETECT = "Auto Detect"

HUMANIZE_MODES = {
    "basic": "Make simple, natural improvements. Replace formal words with casual alternatives.",
    "advanced": "Make sophisticated improvements while maintaining academic/professional tone.",
}
DEFAULT_HUMANIZE_MODE = "basic"

PARAPHRASE_MODES = {
    "standard": "Rewrite clearly while preserving meaning",
    "fluency": "Focus on smooth, natural flow",
    "formal": "Use professional, academic language",
    "simple": "Use simple, easy-to-understand words",
    "creative": "Be creative with word choices and structure",
    "shorten": "Make it more concise",
    "expand": "Add more detail and explanation",
}
DEFAULT_PARAPHRASE_MODE = "standard"
DEFAULT_SYNONYM_LEVEL = 50

SUMMARY_FORMATS = {
    "paragraph": "Write as a flowing paragraph",
    "bullets": "Write as bullet points",
    "keypoints": "Extract only the key points",
}
DEFAULT_SUMMARY_FORMAT = "paragraph"

SUMMARY_LENGTHS = {
    "short": "Very brief, 1-2 sentences",
    "medium": "Moderate length, covering main points",
    "long": "Detailed summary with key details",
}
DEFAULT_SUMMARY_LENGTH = "medium"

CITATION_STYLES = {
    "APA": "APA 7th edition: Author, A. A. (Year). Title. Publisher. URL",
    "MLA": "MLA 9th edition: Author. Title. Publisher, Year, URL.",
    "Chicago": "Chicago 17th edition (notes-bibliography), bibliography entry form",
    "Harvard": "Harvard author-date: Author (Year) Title. Publisher. Available at: URL",
    "IEEE": "IEEE: [1] A. Author, Title. Publisher, Year. [Online]. Available: URL",
}
DEFAULT_CITATION_STYLE = "APA"


def _quoted(text: str) -> str:
    return f'"""\n{text}\n"""'


def _pick(table: Dict[str, str], key: Any, default: str) -> str:
    return table.get(key, table[default]) if isinstance(key, str) else table[default]


# ==============================================================================
# JSON TASKS
# ==============================================================================
def detection_prompt(text: str, options: Dict[str, Any]) -> str:
    return f"""You are an expert AI content detection system. Your task is to determine if the following text was written by a human or generated by AI (ChatGPT, Claude, Gemini, Llama, etc.).

ANALYZE THIS TEXT CAREFULLY:
{_quoted(text)}

DETECTION CRITERIA - Check for these AI indicators:

1. LEXICAL PATTERNS (AI tends to):
   - Use formal, sophisticated vocabulary consistently
   - Avoid contractions ("do not" instead of "don't")
   - Use hedging phrases: "It is important to note", "It's worth mentioning", "One might argue"
   - Overuse transition words: "Furthermore", "Moreover", "Additionally", "In conclusion"
   - Use generic filler phrases: "In today's world", "Throughout history"

2. STRUCTURAL PATTERNS (AI tends to):
   - Write sentences of similar length (low variance)
   - Repeat parallel sentence structures
   - Create perfectly balanced paragraphs with a predictable intro-body-conclusion shape

3. SEMANTIC PATTERNS (AI tends to):
   - Lack personal anecdotes or specific experiences
   - Avoid strong opinions or emotional language
   - Keep an encyclopedic, neutral tone with generic examples

4. HUMAN INDICATORS (humans tend to):
   - Use contractions, colloquialisms and slang naturally
   - Vary sentence length widely
   - Include opinions, emotions, humor and minor imperfections
   - Mention specific personal experiences

SCORING METRICS (0-100):
- Perplexity: how predictable the text is (lower = more AI-like)
- Burstiness: variance in sentence complexity (lower = more AI-like)
- Repetitiveness: pattern repetition frequency (higher = more AI-like)
- Readability: Flesch-Kincaid style score

VERDICT GUIDELINES:
- "AI-Generated": 70%+ confidence with multiple strong AI indicators
- "Human-Written": 70%+ confidence with clear human characteristics
- "Mixed/Uncertain": evidence is mixed or inconclusive

You MUST respond with ONLY valid JSON in this exact format:
{{
  "verdict": "Human-Written" or "AI-Generated" or "Mixed/Uncertain",
  "confidenceScore": <number 0-100>,
  "reasoning": ["<specific observation about the text>", "<another observation>", "<third observation>"],
  "metrics": {{
    "perplexityScore": <number 0-100>,
    "burstinessScore": <number 0-100>,
    "readabilityScore": <number 0-100>,
    "repetitivenessScore": <number 0-100>
  }},
  "detectedPatterns": ["<pattern name>", "<pattern name>"],
  "suspiciousSegments": [
    {{
      "segment": "<EXACT quote from the input text>",
      "reason": "<why this text indicates AI>",
      "severity": "high" or "medium" or "low"
    }}
  ]
}}

VALIDATION RULES:
1. "segment" MUST be an exact substring copied from the input text, at most 500 characters
2. Do not flag human text as AI
3. Give at most 5 reasoning points and at most 10 suspicious segments
4. All scores are integers between 0 and 100"""


def plagiarism_prompt(text: str, options: Dict[str, Any]) -> str:
    return f"""You are an expert plagiarism detector. Analyze the following text for potential plagiarism indicators.

Text to analyze:
{_quoted(text)}

Respond ONLY with a valid JSON object:
{{"plagiarism_percentage": <number 0-100>, "confidence": "<low|medium|high>", "potential_sources": [{{"url": "<source url or title>", "match": <number 0-100>}}], "flagged_phrases": ["<exact phrase from the text>"]}}

VALIDATION RULES:
- "flagged_phrases" entries MUST be exact substrings of the text
- List at most 10 sources and 20 flagged phrases"""


def grammar_prompt(text: str, options: Dict[str, Any]) -> str:
    return f"""You are an expert grammar checker. Analyze the following text for grammar, spelling, and punctuation errors.

Text to analyze:
{_quoted(text)}

Respond ONLY with a valid JSON object:
{{"corrected_text": "<corrected version>", "corrections": [{{"type": "grammar|spelling|punctuation", "original": "<original>", "corrected": "<corrected>", "explanation": "<why>"}}], "score": <0-100>}}

VALIDATION RULES:
- "original" MUST be an exact substring of the text
- If the text has no errors, return it unchanged with an empty corrections list and a score of 100"""


# ==============================================================================
# PLAIN-TEXT TASKS
# ==============================================================================
def humanize_prompt(text: str, options: Dict[str, Any]) -> str:
    mode_instructions = _pick(HUMANIZE_MODES, options.get("mode"), DEFAULT_HUMANIZE_MODE)
    return f"""Rewrite the following text to make it sound more human-written and natural.

Instructions: {mode_instructions}
- Preserve the original meaning
- Add natural imperfections humans make
- Remove robotic patterns

Original text:
{_quoted(text)}

Respond ONLY with the humanized text, no explanations."""


def paraphrase_prompt(text: str, options: Dict[str, Any]) -> str:
    mode_description = _pick(PARAPHRASE_MODES, options.get("mode"), DEFAULT_PARAPHRASE_MODE)
    synonym_level = clamp_score(options.get("synonymLevel"), default=DEFAULT_SYNONYM_LEVEL)
    return f"""Paraphrase the following text.

Mode: {mode_description}
Synonym intensity: {synonym_level}% (higher = more word replacements)

Original text:
{_quoted(text)}

Respond ONLY with the paraphrased text, no explanations."""


def translation_prompt(text: str, options: Dict[str, Any]) -> str:
    source_lang = options.get("sourceLang") or AUTO_DETECT
    target_lang = options.get("targetLang")
    source_instruction = (
        "Detect the source language automatically"
        if source_lang == AUTO_DETECT
        else f"Source language: {source_lang}"
    )
    return f"""Translate the following text to {target_lang}.

{source_instruction}

Text to translate:
{_quoted(text)}

Respond ONLY with the translated text, no explanations or labels."""


def summary_prompt(text: str, options: Dict[str, Any]) -> str:
    summary_format = _pick(SUMMARY_FORMATS, options.get("mode"), DEFAULT_SUMMARY_FORMAT)
    summary_length = _pick(SUMMARY_LENGTHS, options.get("length"), DEFAULT_SUMMARY_LENGTH)
    return f"""Summarize the following text.

Format: {summary_format}
Length: {summary_length}

Text to summarize:
{_quoted(text)}

Respond ONLY with the summary, no explanations."""


def format_history(history: Any) -> List[str]:
    """Renders prior chat turns; anything that is not a {role, content} mapping is skipped."""
    lines = []
    if not isinstance(history, list):
        return lines
    for turn in history:
        if not isinstance(turn, dict) or not isinstance(turn.get("content"), str):
            continue
        speaker = "User" if turn.get("role") == "user" else "Assistant"
        lines.append(f"{speaker}: {turn['content']}")
    return lines


def chat_prompt(text: str, options: Dict[str, Any]) -> str:
    history_lines = format_history(options.get("history"))
    conversation_context = ""
    if history_lines:
        conversation_context = "Previous conversation:\n" + "\n".join(history_lines) + "\n\n"
    return f"""You are a helpful AI writing assistant. Be friendly, informative, and concise.

{conversation_context}User message:
{_quoted(text)}

Respond naturally and helpfully."""


def citation_prompt(text: str, options: Dict[str, Any]) -> str:
    source = options.get("source") or {}
    style = options.get("style") or DEFAULT_CITATION_STYLE
    style_guide = CITATION_STYLES.get(style, f"{style} style, following its official manual")
    source_lines = [
        f"Title: {source.get('title')}",
        f"Author(s): {source.get('authors') or 'Unknown'}",
        f"Year: {source.get('year') or 'n.d.'}",
        f"URL: {source.get('url') or ''}",
        f"Publisher: {source.get('publisher') or ''}",
        f"Type: {source.get('type') or 'website'}",
    ]
    source_block = "\n".join(source_lines)
    return f"""Generate a {style} format citation for the following source.

Style guide: {style_guide}

Source:
{_quoted(source_block)}

Respond ONLY with the formatted citation, no explanations."""


PROMPT_BUILDERS: Dict[str, Callable[[str, Dict[str, Any]], str]] = {
    "detect": detection_prompt,
    "plagiarism": plagiarism_prompt,
    "humanize": humanize_prompt,
    "paraphrase": paraphrase_prompt,
    "grammar": grammar_prompt,
    "translate": translation_prompt,
    "summarize": summary_prompt,
    "chat": chat_prompt,
    "citation": citation_prompt,
}


def build_prompt(task: str, text: str, options: Optional[Dict[str, Any]] = None) -> str:
    """Returns the instruction string for `task`. Missing options take their defaults."""
    return PROMPT_BUILDERS[task](text, options or {})
