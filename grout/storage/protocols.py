"""Storage and admission protocol definitions using typing.Protocol."""

from typing import Protocol


class Cache(Protocol):
    """Cache protocol for rendered images."""

    def get(self, key: str) -> bytes | None:
        """Get cached bytes, marking the entry as recently used."""
        ...

    def put(self, key: str, data: bytes) -> None:
        """Store bytes, evicting the least recently used entry when full."""
        ...


class Limiter(Protocol):
    """Admission control protocol."""

    def admit(self, client_id: str) -> bool:
        """Consume one request from the client's budget if possible."""
        ...

    async def startup(self) -> None:
        """Start background work."""
        ...

    async def shutdown(self) -> None:
        """Stop background work."""
        ...
