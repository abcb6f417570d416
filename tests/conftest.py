"""Shared fixtures.

Service tests mock the transport at the SilenceTransport boundary so the
exact sequence of create/get/delete calls can be asserted. Transport
tests use httpx.MockTransport or the in-memory fake instead.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from silencer.core.silence import SilenceService
from silencer.integrations import SilenceTransport
from silencer.schemas import Matcher, Silence, SilenceState, SilenceStatus

T0 = datetime(2024, 1, 15, 10, 0, tzinfo=UTC)


def _make_silence(**overrides) -> Silence:
    """Create a realistic silence as Alertmanager would return it."""
    defaults = {
        "id": "id-123",
        "matchers": [Matcher(name="severity", value="critical")],
        "starts_at": T0,
        "ends_at": T0 + timedelta(hours=1),
        "created_by": "ops",
        "comment": "maint",
        "status": SilenceStatus(state=SilenceState.ACTIVE),
    }
    state = overrides.pop("state", None)
    if state is not None:
        overrides["status"] = SilenceStatus(state=state)
    defaults.update(overrides)
    return Silence(**defaults)


@pytest.fixture()
def make_silence():
    return _make_silence


@pytest.fixture()
def transport() -> MagicMock:
    mock = MagicMock(spec=SilenceTransport)
    mock.create_silence.return_value = "new-id"
    mock.list_silences.return_value = []
    mock.delete_silence.return_value = None
    return mock


@pytest.fixture()
def service(transport: MagicMock) -> SilenceService:
    return SilenceService(transport)
