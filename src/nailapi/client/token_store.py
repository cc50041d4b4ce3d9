from typing import Protocol

from nailapi.shared.auth import TokenPair


class TokenStore(Protocol):
    """Protocol for persisted token storage implementations."""

    async def load(self) -> TokenPair | None:
        """Load the stored token pair, if any."""
        ...

    async def save(self, access_token: str, refresh_token: str) -> None:
        """Persist a token pair, replacing any previous one."""
        ...

    async def clear(self) -> None:
        """Remove the stored token pair."""
        ...


class InMemoryTokenStore:
    """Process-local TokenStore; nothing survives a restart."""

    def __init__(self, tokens: TokenPair | None = None):
        self._tokens = tokens

    async def load(self) -> TokenPair | None:
        return self._tokens

    async def save(self, access_token: str, refresh_token: str) -> None:
        self._tokens = TokenPair(access_token=access_token, refresh_token=refresh_token)

    async def clear(self) -> None:
        self._tokens = None
