"""
Shared fixtures: a scripted model invoker and app/task instances built around it.
"""

import json

import pytest

from ai_tasks import WritingTasks
from main import create_app
from model_invoker import ModelInvoker, ProviderError


class FakeInvoker(ModelInvoker):
    """Returns queued replies and records every call."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.calls = []

    def invoke(self, prompt, effort_tier, max_output_tokens=None):
        self.calls.append({"prompt": prompt, "effort_tier": effort_tier, "max_output_tokens": max_output_tokens})
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else ""


@pytest.fixture
def fake_invoker():
    return FakeInvoker()


@pytest.fixture
def failing_invoker():
    return FakeInvoker(error=ProviderError("quota exceeded"))


@pytest.fixture
def tasks(fake_invoker):
    return WritingTasks(fake_invoker)


@pytest.fixture
def app(fake_invoker):
    flask_app = create_app(fake_invoker)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def human_text():
    return "honestly i didn't think the gig'd be that lit, but dude we totally vibed lol"


@pytest.fixture
def ai_text():
    return (
        "Furthermore, it is important to note that technology has transformed society. "
        "Moreover, in today's world, innovation continues to shape our daily lives."
    )


@pytest.fixture
def detection_reply():
    """Builds a JSON detection reply; keyword arguments override fields."""
    def _reply(**overrides):
        payload = {
            "verdict": "Human-Written",
            "confidenceScore": 85,
            "reasoning": ["Uses contractions", "Informal slang", "Varied rhythm"],
            "metrics": {
                "perplexityScore": 80,
                "burstinessScore": 75,
                "readabilityScore": 70,
                "repetitivenessScore": 20,
            },
            "detectedPatterns": [],
            "suspiciousSegments": [],
        }
        payload.update(overrides)
        return json.dumps(payload)
    return _reply
