# -*- coding: utf-8 -*-
"""
Text completion capability backed by the OpenAI chat completions API.

The extraction engine only needs ``prompt -> text``; anything callable with
that shape can stand in for ``OpenAICompletion`` (tests pass plain functions).
"""
from __future__ import annotations

import os
import typing as t

import openai
from openai import OpenAI

from . import config


TextCompletion = t.Callable[[str], str]


class CompletionError(RuntimeError):
    """Raised when the capability cannot produce a response."""


class CompletionLengthError(CompletionError):
    """Raised when the prompt or the response exceeds the capability's size limit."""


class OpenAICompletion:
    """Callable wrapper around ``client.chat.completions.create``."""

    def __init__(
        self,
        client: OpenAI,
        model: str = config.SYLLABUS_MODEL,
        temperature: float = config.SYLLABUS_TEMPERATURE,
        max_tokens: int = config.SYLLABUS_MAX_TOKENS,
    ) -> None:
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def __call__(self, prompt: str) -> str:
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                response_format={"type": "json_object"},
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.BadRequestError as e:
            if e.code == "context_length_exceeded":
                raise CompletionLengthError(f"Syllabus text exceeds the model context window: {e}") from e
            raise CompletionError(f"OpenAI rejected the request: {e}") from e
        except openai.OpenAIError as e:
            raise CompletionError(f"OpenAI request failed: {e}") from e

        if not completion.choices:
            raise CompletionError("No response from OpenAI")
        choice = completion.choices[0]
        if choice.finish_reason == "length":
            raise CompletionLengthError(f"Response truncated after {self.max_tokens} tokens")
        content = choice.message.content
        if not content:
            raise CompletionError("Empty response from OpenAI")
        return content


def create_completion(api_key: t.Optional[str] = None) -> t.Optional[OpenAICompletion]:
    """
    Build the default completion capability.

    :param api_key: OpenAI API key; defaults to ``OPENAI_API_KEY``.
    :return: None when no key is configured.
    """
    key = api_key or os.getenv("OPENAI_API_KEY")
    if not key:
        return None
    return OpenAICompletion(OpenAI(api_key=key, timeout=config.SYLLABUS_REQUEST_TIMEOUT))
