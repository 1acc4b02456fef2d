"""Provider registry — maps a provider name to its implementation."""

from __future__ import annotations

from typing import Dict, List, Optional, Type

from autocommit.config.schema import ProviderConfig
from autocommit.providers.base import ChatProvider
from autocommit.providers.errors import UnknownProviderError


class ProviderRegistry:
    """Central store for chat-completion backends, keyed by name."""

    def __init__(self) -> None:
        self._providers: Dict[str, Type[ChatProvider]] = {}

    # ---- registration ----

    def register(self, provider_cls: Type[ChatProvider]) -> None:
        self._providers[provider_cls.name] = provider_cls

    def register_many(self, provider_classes: List[Type[ChatProvider]]) -> None:
        for cls in provider_classes:
            self.register(cls)

    # ---- queries ----

    def names(self) -> List[str]:
        return list(self._providers)

    def get(self, name: str) -> Optional[Type[ChatProvider]]:
        return self._providers.get(name)

    # ---- construction ----

    def create(self, name: str, config: ProviderConfig) -> ChatProvider:
        """Instantiate the provider registered under *name*."""
        provider_cls = self.get(name)
        if provider_cls is None:
            known = ", ".join(self.names()) or "none"
            raise UnknownProviderError(f"Unsupported provider: {name} (available: {known})")
        return provider_cls(config)


def build_registry() -> ProviderRegistry:
    """Create a registry holding every built-in provider."""
    from autocommit.providers import BUILTIN_PROVIDERS

    registry = ProviderRegistry()
    registry.register_many(BUILTIN_PROVIDERS)
    return registry
