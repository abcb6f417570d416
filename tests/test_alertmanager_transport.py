"""Alertmanager HTTP transport tests against an httpx.MockTransport."""

import json
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from silencer.exceptions import TransportError
from silencer.integrations.alertmanager import AlertmanagerTransport
from silencer.schemas import Matcher, PostableSilence, SilenceState

BASE = "http://alertmanager:9093/api/v2"
T0 = datetime(2024, 1, 15, 10, 0, tzinfo=UTC)


def _silence_json(silence_id: str = "id-123", state: str = "active") -> dict:
    return {
        "id": silence_id,
        "status": {"state": state},
        "updatedAt": "2024-01-15T10:00:00.000Z",
        "comment": "maint",
        "createdBy": "ops",
        "startsAt": "2024-01-15T10:00:00.000Z",
        "endsAt": "2024-01-15T11:00:00.000Z",
        "matchers": [{"name": "severity", "value": "critical", "isRegex": False, "isEqual": True}],
    }


def _make_transport(handler) -> tuple[AlertmanagerTransport, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    client = httpx.Client(transport=httpx.MockTransport(recording_handler))
    return AlertmanagerTransport(client, BASE + "/"), requests


def _postable() -> PostableSilence:
    return PostableSilence(
        matchers=[Matcher(name="severity", value="critical")],
        starts_at=T0,
        ends_at=T0 + timedelta(hours=1),
        created_by="ops",
        comment="maint",
    )


# ─── Requests ────────────────────────────────────────────


class TestRequests:
    def test_create_posts_silence_body(self):
        transport, requests = _make_transport(
            lambda r: httpx.Response(200, json={"silenceID": "new-id"})
        )

        assert transport.create_silence(_postable()) == "new-id"

        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == f"{BASE}/silences"
        body = json.loads(request.content)
        assert body == {
            "matchers": [
                {"name": "severity", "value": "critical", "isRegex": False, "isEqual": True}
            ],
            "startsAt": "2024-01-15T10:00:00Z",
            "endsAt": "2024-01-15T11:00:00Z",
            "createdBy": "ops",
            "comment": "maint",
        }

    def test_list_without_filter_sends_no_params(self):
        transport, requests = _make_transport(lambda r: httpx.Response(200, json=[]))
        assert transport.list_silences([]) == []
        assert requests[0].url.params.multi_items() == []

    def test_list_sends_repeated_filter_params(self):
        transport, requests = _make_transport(
            lambda r: httpx.Response(200, json=[_silence_json("a"), _silence_json("b", "expired")])
        )

        silences = transport.list_silences(['severity="critical"', "team=ops"])

        assert [s.id for s in silences] == ["a", "b"]
        assert silences[1].state == SilenceState.EXPIRED
        assert requests[0].method == "GET"
        assert requests[0].url.path == "/api/v2/silences"
        assert requests[0].url.params.get_list("filter") == ['severity="critical"', "team=ops"]

    def test_get_single_silence(self):
        transport, requests = _make_transport(lambda r: httpx.Response(200, json=_silence_json()))

        silence = transport.get_silence("id-123")

        assert silence.id == "id-123"
        assert silence.state == SilenceState.ACTIVE
        assert str(requests[0].url) == f"{BASE}/silence/id-123"

    def test_delete_silence(self):
        transport, requests = _make_transport(lambda r: httpx.Response(200))
        assert transport.delete_silence("id-123") is None
        assert requests[0].method == "DELETE"
        assert str(requests[0].url) == f"{BASE}/silence/id-123"

    def test_ids_are_escaped_into_a_single_path_segment(self):
        transport, requests = _make_transport(lambda r: httpx.Response(200))
        transport.delete_silence("../silences")
        assert requests[0].url.raw_path == b"/api/v2/silence/..%2Fsilences"


# ─── Error Mapping ───────────────────────────────────────


class TestErrors:
    def test_non_2xx_becomes_transport_error(self):
        transport, _ = _make_transport(lambda r: httpx.Response(404, text="silence not found"))

        with pytest.raises(TransportError) as exc_info:
            transport.delete_silence("missing")

        err = exc_info.value
        assert err.status_code == 404
        assert err.is_not_found
        assert "silence not found" in str(err)
        assert isinstance(err.__cause__, httpx.HTTPStatusError)

    def test_server_error_on_create(self):
        transport, _ = _make_transport(lambda r: httpx.Response(500))
        with pytest.raises(TransportError) as exc_info:
            transport.create_silence(_postable())
        assert exc_info.value.status_code == 500

    def test_connection_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        transport, _ = _make_transport(refuse)
        with pytest.raises(TransportError) as exc_info:
            transport.list_silences([])
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_invalid_json(self):
        transport, _ = _make_transport(lambda r: httpx.Response(200, text="<html>proxy</html>"))
        with pytest.raises(TransportError, match="Malformed response"):
            transport.list_silences([])

    def test_schema_mismatch(self):
        transport, _ = _make_transport(lambda r: httpx.Response(200, json={"id": "x"}))
        with pytest.raises(TransportError, match="Malformed response"):
            transport.get_silence("x")

    def test_create_response_without_id(self):
        transport, _ = _make_transport(lambda r: httpx.Response(200, json={}))
        with pytest.raises(TransportError, match="Malformed response"):
            transport.create_silence(_postable())

    def test_long_error_bodies_are_truncated(self):
        transport, _ = _make_transport(lambda r: httpx.Response(502, text="x" * 5000))
        with pytest.raises(TransportError) as exc_info:
            transport.list_silences([])
        assert len(str(exc_info.value)) < 400
