"""Wiring helpers: settings -> httpx.Client -> transport -> service.

Every factory takes its settings explicitly; ``get_settings()`` is only
consulted when the caller passes none.
"""

from collections.abc import Generator
from contextlib import contextmanager

import httpx

from silencer.config import Settings, get_settings
from silencer.core.silence import SilenceService
from silencer.integrations.alertmanager import AlertmanagerTransport


def create_http_client(settings: Settings | None = None) -> httpx.Client:
    settings = settings or get_settings()
    return httpx.Client(
        timeout=settings.request_timeout_seconds,
        verify=settings.tls_verify,
        headers={"Accept": "application/json"},
    )


def create_silence_service(
    settings: Settings | None = None,
    client: httpx.Client | None = None,
) -> SilenceService:
    """Build a service backed by Alertmanager.

    When ``client`` is omitted a new one is created. Close it with
    ``service.transport.close()``, or use ``silence_service()`` instead.
    """
    settings = settings or get_settings()
    client = client or create_http_client(settings)
    return SilenceService(AlertmanagerTransport(client, settings.api_base_url))


@contextmanager
def silence_service(settings: Settings | None = None) -> Generator[SilenceService, None, None]:
    """Context-managed service whose HTTP client is closed on exit."""
    settings = settings or get_settings()
    with create_http_client(settings) as client:
        yield create_silence_service(settings, client)
