"""Base interface for credential cache repositories."""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class CacheRepository(Protocol):
    """Protocol for credential cache implementations.

    Entries are keyed by (host identity, operation). ``get`` returns ``None``
    on a miss and on any read failure. ``set`` never raises. ``delete`` of a
    missing entry is a no-op.
    """

    def get(self, host_identity: str, operation: str) -> Optional[bytes]: ...

    def set(self, host_identity: str, operation: str, content: bytes) -> None: ...

    def delete(self, host_identity: str, operation: str) -> None: ...


def make_cache_name(host_identity: str, operation: str) -> str:
    """Cache entry name shared by every backend.

    Components are joined as-is, so a host or operation containing ``-`` can
    map two different pairs to the same name.
    """
    return f"ssh-cache-{host_identity}-{operation}"
