"""Configuration schema — dataclasses for the config file."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from autocommit.config.defaults import DEFAULT_SYSTEM_PROMPT


@dataclass(frozen=True)
class ProviderConfig:
    name: str
    api_key: str = ""
    model: str = ""
    endpoint: str = ""

    def has_api_key(self, placeholder: str = "") -> bool:
        """False for an empty key or one still set to a template placeholder."""
        key = self.api_key.strip()
        if not key:
            return False
        if placeholder and key == placeholder:
            return False
        return key != f"your-{self.name}-api-key-here"


@dataclass
class AutocommitConfig:
    default_provider: str = "groq"
    system_prompt: str = ""  # empty = built-in prompt
    auto_add: bool = False
    auto_push: bool = False
    push_on_eof: bool = True  # answer for the push prompt when stdin is closed
    providers: List[ProviderConfig] = field(default_factory=list)

    def get_provider(self, name: str) -> Optional[ProviderConfig]:
        for provider in self.providers:
            if provider.name == name:
                return provider
        return None

    @property
    def effective_system_prompt(self) -> str:
        if self.system_prompt.strip():
            return self.system_prompt
        return DEFAULT_SYSTEM_PROMPT
