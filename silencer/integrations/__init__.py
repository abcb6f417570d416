"""Transports connect the silence service to a remote alerting service.

The service only depends on the SilenceTransport interface. Two
implementations ship with the package:

- ``alertmanager.AlertmanagerTransport``: Alertmanager API v2 over httpx
- ``memory.InMemorySilenceTransport``: an in-process fake for tests and dry runs

To add a new backend:
1. Create a new file in this directory
2. Implement a class that inherits from SilenceTransport
3. Raise TransportError for every failure, never a library-specific exception
"""

from abc import ABC, abstractmethod

from silencer.schemas import PostableSilence, Silence


class SilenceTransport(ABC):
    """Base class for all silence transports."""

    @abstractmethod
    def create_silence(self, silence: PostableSilence) -> str:
        """Submit a new silence and return the id assigned by the remote service."""
        ...

    @abstractmethod
    def list_silences(self, filter: list[str]) -> list[Silence]:
        """Return silences matching the server-side matcher expressions.

        An empty list means all silences. Expressions are passed through
        verbatim, e.g. ``severity="critical"``.
        """
        ...

    @abstractmethod
    def get_silence(self, silence_id: str) -> Silence:
        """Look up a single silence by id."""
        ...

    @abstractmethod
    def delete_silence(self, silence_id: str) -> None:
        """Expire a silence by id."""
        ...
