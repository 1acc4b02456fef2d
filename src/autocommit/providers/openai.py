"""OpenAI provider."""

from __future__ import annotations

from autocommit.providers.base import OpenAICompatibleProvider


class OpenAIProvider(OpenAICompatibleProvider):
    name = "openai"
    display_name = "OpenAI"
    default_model = "gpt-4o-mini"
    default_endpoint = "https://api.openai.com/v1/chat/completions"
    max_tokens = 500
