from enum import Enum

from src.core.settings import Settings
from src.shared.exceptions import ConfigurationFault

from .base import AuthorityStore


class AuthorityBackend(str, Enum):
    """Supported authority backends."""

    MEMORY = "memory"
    HTTP = "http"


class AuthorityFactory:
    """Factory for creating the configured authority store."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def create(self) -> AuthorityStore:
        backend = AuthorityBackend(self.settings.AUTHORITY_BACKEND)

        if backend == AuthorityBackend.HTTP:
            if not self.settings.AUTHORITY_BASE_URL:
                raise ConfigurationFault(
                    "AUTHORITY_BASE_URL is required for the http authority backend"
                )
            from .http import HttpAuthority

            return HttpAuthority(
                base_url=self.settings.AUTHORITY_BASE_URL,
                api_key=self.settings.AUTHORITY_API_KEY,
                timeout=self.settings.AUTHORITY_TIMEOUT,
            )

        from .memory import InMemoryAuthority

        return InMemoryAuthority()
