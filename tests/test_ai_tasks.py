"""
Unit tests for the task handlers, driven by a scripted model invoker
"""

import json

import pytest

from ai_tasks import ClientInputError, WritingTasks
from model_invoker import EffortTier, ProviderError
from result_normalizer import UNCERTAIN_REASONING


class TestDetect:
    def test_clamps_out_of_range_confidence(self, fake_invoker, tasks, human_text, detection_reply):
        fake_invoker.replies.append("Analysis done:\n" + detection_reply(confidenceScore=150))

        result = tasks.detect(human_text)

        assert len(fake_invoker.calls) == 1
        assert fake_invoker.calls[0]["effort_tier"] == EffortTier.DEEP
        assert fake_invoker.calls[0]["max_output_tokens"] == 8192
        assert human_text in fake_invoker.calls[0]["prompt"]
        assert result.confidence_score == 100
        assert result.verdict == "Human-Written"
        for score in result.metrics.model_dump().values():
            assert 0 <= score <= 100

    def test_malformed_reply_gives_uncertain(self, fake_invoker, tasks, ai_text):
        fake_invoker.replies.append("I could not analyse this text.")
        result = tasks.detect(ai_text)
        assert result.verdict == "Mixed/Uncertain"
        assert result.confidence_score == 50
        assert result.reasoning == [UNCERTAIN_REASONING]
        assert result.suspicious_segments == []

    def test_short_text_rejected_without_model_call(self, fake_invoker, tasks):
        with pytest.raises(ClientInputError):
            tasks.detect("too short")
        with pytest.raises(ClientInputError):
            tasks.detect(" " * 80)
        with pytest.raises(ClientInputError):
            tasks.detect(None)
        assert fake_invoker.calls == []

    def test_highlight_drops_overlapping_segment(self, fake_invoker, tasks, detection_reply):
        text = "the cat sat on the mat while the dog slept beside the warm fire place."
        fake_invoker.replies.append(detection_reply(suspiciousSegments=[
            {"segment": "the cat sat", "reason": "a", "severity": "high"},
            {"segment": "cat sat on", "reason": "b", "severity": "low"},
        ]))
        result = tasks.detect(text)
        spans = tasks.highlight(text, result)
        highlights = [s for s in spans if s.type == "highlight"]
        assert [(s.start, s.content) for s in highlights] == [(0, "the cat sat")]
        assert "".join(s.content for s in spans) == text

    def test_huge_scores_are_clamped(self, fake_invoker, tasks, ai_text):
        huge = "1" + "0" * 400
        fake_invoker.replies.append(
            '{"verdict": "AI-Generated", "confidenceScore": ' + huge
            + ', "metrics": {"perplexityScore": -' + huge + '}}'
        )
        result = tasks.detect(ai_text)
        assert result.confidence_score == 100
        assert result.metrics.perplexity_score == 0

    def test_provider_error_propagates(self, failing_invoker, ai_text):
        with pytest.raises(ProviderError):
            WritingTasks(failing_invoker).detect(ai_text)


class TestGrammar:
    def test_malformed_reply_echoes_input(self, fake_invoker, tasks):
        text = "Their going to the store tomorow."
        fake_invoker.replies.append("Your text looks mostly fine, just a couple of small issues.")
        result = tasks.grammar(text)
        assert result.to_payload() == {"corrected_text": text, "corrections": [], "score": 100}
        assert fake_invoker.calls[0]["effort_tier"] == EffortTier.DEEP

    def test_parsed_reply(self, fake_invoker, tasks):
        fake_invoker.replies.append(json.dumps({
            "corrected_text": "They're going to the store tomorrow.",
            "corrections": [{"type": "spelling", "original": "tomorow", "corrected": "tomorrow", "explanation": "typo"}],
            "score": 80,
        }))
        result = tasks.grammar("Their going to the store tomorow.")
        assert result.corrected_text == "They're going to the store tomorrow."
        assert result.corrections[0].corrected == "tomorrow"
        assert result.score == 80

    def test_minimum_length(self, fake_invoker, tasks):
        with pytest.raises(ClientInputError):
            tasks.grammar("short")
        assert fake_invoker.calls == []


class TestPlagiarism:
    def test_parsed_reply(self, fake_invoker, tasks):
        fake_invoker.replies.append(
            '{"plagiarism_percentage": 35, "confidence": "high", '
            '"potential_sources": ["https://en.wikipedia.org/wiki/Cat"], "flagged_phrases": ["small domesticated"]}'
        )
        result = tasks.plagiarism("The cat is a small domesticated carnivorous mammal.")
        assert result.to_payload() == {
            "percentage": 35,
            "confidence": "high",
            "sources": [{"url": "https://en.wikipedia.org/wiki/Cat", "match": 0}],
            "flagged_phrases": ["small domesticated"],
        }

    def test_malformed_reply(self, fake_invoker, tasks):
        fake_invoker.replies.append("no idea")
        result = tasks.plagiarism("The cat is a small domesticated carnivorous mammal.")
        assert result.to_payload() == {"percentage": 0, "confidence": "low", "sources": [], "flagged_phrases": []}


class TestTextTasks:
    def test_translate_auto_detect(self, fake_invoker, tasks):
        fake_invoker.replies.append("  Hello \n")
        result = tasks.translate("Hola", target_lang="English", source_lang="Auto Detect")
        assert result.to_payload() == {"translated_text": "Hello", "detected_language": "Detected"}
        call = fake_invoker.calls[0]
        assert call["effort_tier"] == EffortTier.FAST
        assert "Detect the source language automatically" in call["prompt"]

    def test_translate_explicit_source(self, fake_invoker, tasks):
        fake_invoker.replies.append("Hello")
        result = tasks.translate("Hola", target_lang="English", source_lang="Spanish")
        assert result.detected_language == "Spanish"

    def test_translate_validation(self, fake_invoker, tasks):
        with pytest.raises(ClientInputError, match="Text is required"):
            tasks.translate("", target_lang="English")
        with pytest.raises(ClientInputError, match="Target language is required"):
            tasks.translate("Hola", target_lang="")
        assert fake_invoker.calls == []

    def test_translate_empty_reply_falls_back(self, fake_invoker, tasks):
        fake_invoker.replies.append("   ")
        assert tasks.translate("Hola", target_lang="English").translated_text == "Hola"

    def test_paraphrase(self, fake_invoker, tasks):
        fake_invoker.replies.append("A rewritten sentence.")
        result = tasks.paraphrase("An original sentence.", mode="formal", synonym_level=80)
        assert result.paraphrased_text == "A rewritten sentence."
        assert fake_invoker.calls[0]["effort_tier"] == EffortTier.DEEP
        assert "Synonym intensity: 80%" in fake_invoker.calls[0]["prompt"]

    def test_paraphrase_empty_reply_falls_back(self, fake_invoker, tasks):
        fake_invoker.replies.append("")
        assert tasks.paraphrase("An original sentence.").paraphrased_text == "An original sentence."

    def test_humanize(self, fake_invoker, tasks, ai_text):
        fake_invoker.replies.append("Tech has really changed things, hasn't it?")
        result = tasks.humanize(ai_text, mode="advanced")
        assert result.humanized_text == "Tech has really changed things, hasn't it?"
        assert fake_invoker.calls[0]["effort_tier"] == EffortTier.DEEP

    def test_summarize(self, fake_invoker, tasks, ai_text):
        fake_invoker.replies.append("- Tech shapes life")
        result = tasks.summarize(ai_text, mode="bullets", length="short")
        assert result.summary == "- Tech shapes life"
        assert fake_invoker.calls[0]["effort_tier"] == EffortTier.DEEP

    def test_chat(self, fake_invoker, tasks):
        fake_invoker.replies.append("Sure, happy to help!")
        result = tasks.chat("Can you help?", history=[{"role": "user", "content": "Hi"}])
        assert result.response == "Sure, happy to help!"
        assert fake_invoker.calls[0]["effort_tier"] == EffortTier.FAST
        assert "User: Hi" in fake_invoker.calls[0]["prompt"]

    def test_chat_requires_message(self, fake_invoker, tasks):
        with pytest.raises(ClientInputError):
            tasks.chat("   ")
        assert fake_invoker.calls == []


class TestCitation:
    def test_missing_title_rejected_without_model_call(self, fake_invoker, tasks):
        with pytest.raises(ClientInputError):
            tasks.citation({"authors": "Cal Newport", "year": 2016})
        with pytest.raises(ClientInputError):
            tasks.citation(None)
        assert fake_invoker.calls == []

    def test_generates_citation(self, fake_invoker, tasks):
        fake_invoker.replies.append("Newport, C. (2016). Deep work. Grand Central.\n")
        result = tasks.citation({"title": "Deep Work", "authors": "Cal Newport", "year": 2016}, style="APA")
        assert result.citation == "Newport, C. (2016). Deep work. Grand Central."
        assert fake_invoker.calls[0]["effort_tier"] == EffortTier.FAST
        assert "Title: Deep Work" in fake_invoker.calls[0]["prompt"]
