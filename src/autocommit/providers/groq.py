"""Groq provider."""

from __future__ import annotations

from autocommit.providers.base import OpenAICompatibleProvider


class GroqProvider(OpenAICompatibleProvider):
    name = "groq"
    display_name = "Groq"
    default_model = "llama-3.1-8b-instant"
    default_endpoint = "https://api.groq.com/openai/v1/chat/completions"
    max_tokens = 1000
