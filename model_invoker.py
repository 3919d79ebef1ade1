# -*- coding: utf-8 -*-
"""
Model invocation for the writing tools.

Every task sends exactly one prompt to the provider. The effort tier picks the
reasoning budget; temperature and the output ceiling are fixed by CONFIG.
"""

import logging
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import openai

from settings import CONFIG


class EffortTier(str, Enum):
    FAST = "fast"
    DEEP = "deep"


class ProviderError(Exception):
    """The provider call failed (network, auth, quota, non-2xx)."""


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    effort_tier: EffortTier
    temperature: float
    max_output_tokens: int


class ModelInvoker(ABC):
    """Interface the task handlers depend on."""

    @abstractmethod
    def invoke(self, prompt: str, effort_tier: EffortTier, max_output_tokens: Optional[int] = None) -> str:
        raise NotImplementedError


class OpenAIModelInvoker(ModelInvoker):
    def __init__(self, client: Optional[openai.OpenAI], config: dict = CONFIG):
        self.client = client
        self.config = config

    @classmethod
    def from_env(cls, config: dict = CONFIG) -> "OpenAIModelInvoker":
        """Builds the invoker from OPENAI_API_KEY. A missing key leaves the client unset."""
        openai_api_key = os.environ.get("OPENAI_API_KEY")
        openai_client = None
        logging.info("Attempting to initialize OpenAI client...")
        if not openai_api_key:
            logging.warning("OpenAI API Key not found. Model calls will fail with a service error.")
        else:
            try:
                openai_client = openai.OpenAI(
                    api_key=openai_api_key,
                    timeout=config["openai_timeout_seconds"],
                    max_retries=config["openai_max_retries"],
                )
                logging.info("OpenAI client initialized successfully.")
            except openai.OpenAIError as e:
                logging.error(f"Failed to initialize OpenAI client: {e}", exc_info=True)
                openai_client = None
        return cls(openai_client, config)

    def build_request(self, prompt: str, effort_tier: EffortTier, max_output_tokens: Optional[int] = None) -> GenerationRequest:
        return GenerationRequest(
            prompt=prompt,
            effort_tier=EffortTier(effort_tier),
            temperature=self.config["openai_temperature"],
            max_output_tokens=max_output_tokens or self.config["openai_max_output_tokens"],
        )

    def invoke(self, prompt: str, effort_tier: EffortTier, max_output_tokens: Optional[int] = None) -> str:
        if self.client is None:
            raise ProviderError("OpenAI client is not configured")

        gen_request = self.build_request(prompt, effort_tier, max_output_tokens)
        reasoning_effort = self.config["effort_levels"][gen_request.effort_tier.value]
        logging.info(f"Calling {self.config['openai_model']} (effort={gen_request.effort_tier.value}/{reasoning_effort}, max_tokens={gen_request.max_output_tokens})...")
        start_time = time.time()
        try:
            response = self.client.chat.completions.create(
                model=self.config["openai_model"],
                messages=[{"role": "user", "content": gen_request.prompt}],
                temperature=gen_request.temperature,
                max_completion_tokens=gen_request.max_output_tokens,
                reasoning_effort=reasoning_effort,
            )
        except openai.OpenAIError as e:
            logging.error(f"Error during OpenAI API call: {e}", exc_info=True)
            raise ProviderError(str(e)) from e

        end_time = time.time()
        logging.info(f"OpenAI call completed in {end_time - start_time:.2f} seconds.")
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
