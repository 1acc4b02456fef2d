"""Chat-completion providers and their registry."""

from autocommit.providers.base import ChatProvider, OpenAICompatibleProvider
from autocommit.providers.errors import (
    GenerationError,
    GenerationErrorKind,
    UnknownProviderError,
)
from autocommit.providers.groq import GroqProvider
from autocommit.providers.openai import OpenAIProvider
from autocommit.providers.zai import ZaiProvider

# Order drives the default config template.
BUILTIN_PROVIDERS = [ZaiProvider, GroqProvider, OpenAIProvider]

__all__ = [
    "BUILTIN_PROVIDERS",
    "ChatProvider",
    "GenerationError",
    "GenerationErrorKind",
    "GroqProvider",
    "OpenAICompatibleProvider",
    "OpenAIProvider",
    "UnknownProviderError",
    "ZaiProvider",
]
