"""Prometheus Alertmanager API v2 transport.

Endpoints used:

  POST   /api/v2/silences            body: PostableSilence  -> {"silenceID": "..."}
  GET    /api/v2/silences?filter=..  -> [GettableSilence, ...]
  GET    /api/v2/silence/{id}        -> GettableSilence
  DELETE /api/v2/silence/{id}

Example silence as returned by GET:
{
  "id": "2f4d8c1e-6a0b-4c5e-9b7a-1d2e3f405162",
  "status": {"state": "active"},
  "updatedAt": "2024-01-15T10:00:00.000Z",
  "comment": "planned maintenance",
  "createdBy": "upgrade-operator",
  "startsAt": "2024-01-15T10:00:00.000Z",
  "endsAt": "2024-01-15T11:00:00.000Z",
  "matchers": [
    {"name": "severity", "value": "critical", "isRegex": false, "isEqual": true}
  ]
}

Docs: https://github.com/prometheus/alertmanager/blob/main/api/v2/openapi.yaml
"""

import logging
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from silencer.exceptions import TransportError
from silencer.integrations import SilenceTransport
from silencer.schemas import PostableSilence, Silence

logger = logging.getLogger(__name__)

_silence_list = TypeAdapter(list[Silence])

# Response bodies can be large HTML error pages; keep messages readable
_MAX_ERROR_BODY = 200


class AlertmanagerTransport(SilenceTransport):
    """Talks to one Alertmanager instance through a caller-owned httpx.Client.

    TLS trust, timeouts, proxies and auth headers are properties of the
    client passed in. No retries are attempted here.
    """

    def __init__(self, client: httpx.Client, base_url: str) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")

    def close(self) -> None:
        self._client.close()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = self._url(path)
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            body = exc.response.text.strip()[:_MAX_ERROR_BODY]
            raise TransportError(
                f"{method} {url} returned {status}: {body or exc.response.reason_phrase}",
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc
        return response

    def _parse(self, response: httpx.Response, parser):
        try:
            return parser(response.json())
        except (ValueError, KeyError, TypeError, ValidationError) as exc:
            raise TransportError(
                f"Malformed response from {response.request.url}: {exc}",
                status_code=response.status_code,
            ) from exc

    # ─── SilenceTransport ────────────────────────────────

    def create_silence(self, silence: PostableSilence) -> str:
        response = self._request("POST", "/silences", json=silence.to_wire())
        return self._parse(response, lambda data: str(data["silenceID"]))

    def list_silences(self, filter: list[str]) -> list[Silence]:
        params = {"filter": list(filter)} if filter else None
        response = self._request("GET", "/silences", params=params)
        silences = self._parse(response, _silence_list.validate_python)
        logger.debug("Alertmanager returned %d silences (filter=%s)", len(silences), filter)
        return silences

    def get_silence(self, silence_id: str) -> Silence:
        response = self._request("GET", f"/silence/{quote(silence_id, safe='')}")
        return self._parse(response, Silence.model_validate)

    def delete_silence(self, silence_id: str) -> None:
        self._request("DELETE", f"/silence/{quote(silence_id, safe='')}")
