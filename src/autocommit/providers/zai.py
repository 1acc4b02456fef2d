"""z.ai (GLM models) provider."""

from __future__ import annotations

from autocommit.providers.base import OpenAICompatibleProvider


class ZaiProvider(OpenAICompatibleProvider):
    name = "zai"
    display_name = "Z AI"
    default_model = "glm-4.7-Flash"
    default_endpoint = "https://api.z.ai/api/paas/v4/chat/completions"
    # GLM reasoning models spend part of the budget before the answer
    max_tokens = 1500
