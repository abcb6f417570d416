"""In-process stand-in for Alertmanager's silence API.

Behaves like the real service for everything the client relies on:
ids are assigned on create, state is derived from the clock, and delete
expires a silence instead of removing it. Useful for tests and for
running an operator in dry-run mode without a live Alertmanager.
"""

import logging
import re
import threading
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from silencer.exceptions import TransportError
from silencer.integrations import SilenceTransport
from silencer.schemas import Matcher, PostableSilence, Silence, SilenceState, SilenceStatus

logger = logging.getLogger(__name__)

# label="value", label!="value", label=~"re", label!~"re" (quotes optional)
_FILTER_RE = re.compile(r'^\s*([a-zA-Z_][a-zA-Z0-9_]*)\s*(=~|!~|!=|=)\s*"?(.*?)"?\s*$')


def _utcnow() -> datetime:
    return datetime.now(UTC)


def parse_filter(expression: str) -> Matcher:
    """Parse a single matcher expression as accepted by ``GET /silences``."""
    match = _FILTER_RE.match(expression)
    if not match:
        raise TransportError(f"bad matcher format: {expression}", status_code=400)
    name, op, value = match.groups()
    is_regex = op in ("=~", "!~")
    if is_regex:
        try:
            re.compile(value)
        except re.error as exc:
            raise TransportError(f"bad regex in matcher {expression}: {exc}", status_code=400) from exc
    return Matcher(name=name, value=value, is_regex=is_regex, is_equal=not op.startswith("!"))


def _filter_matches(f: Matcher, value: str) -> bool:
    if f.is_regex:
        hit = re.fullmatch(f.value, value) is not None
    else:
        hit = f.value == value
    return hit if f.is_equal else not hit


def _silence_passes(filters: list[Matcher], silence: Silence) -> bool:
    """Every filter must match the silence's matcher value for the same label.

    An absent label has the value "". Empty-valued filters are skipped when
    they cannot say anything: a negative one when the label is present, a
    positive one when it is absent.
    """
    values = {m.name: m.value for m in silence.matchers}
    for f in filters:
        present = f.name in values
        if f.value == "" and present != f.is_equal:
            continue
        if not _filter_matches(f, values.get(f.name, "")):
            return False
    return True


def state_at(starts_at: datetime, ends_at: datetime, now: datetime) -> SilenceState:
    if now < starts_at:
        return SilenceState.PENDING
    if now < ends_at:
        return SilenceState.ACTIVE
    return SilenceState.EXPIRED


class InMemorySilenceTransport(SilenceTransport):
    """Dictionary-backed transport with an injectable clock.

    Every call is appended to ``calls`` as ``(operation, argument)`` so tests
    can assert on the exact request sequence.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._silences: dict[str, dict] = {}
        self.calls: list[tuple[str, object]] = []

    def _snapshot(self, record: dict, now: datetime) -> Silence:
        return Silence(
            id=record["id"],
            matchers=list(record["matchers"]),
            starts_at=record["starts_at"],
            ends_at=record["ends_at"],
            created_by=record["created_by"],
            comment=record["comment"],
            status=SilenceStatus(state=state_at(record["starts_at"], record["ends_at"], now)),
            updated_at=record["updated_at"],
        )

    def _lookup(self, silence_id: str) -> dict:
        record = self._silences.get(silence_id)
        if record is None:
            raise TransportError(f"silence {silence_id} not found", status_code=404)
        return record

    # ─── SilenceTransport ────────────────────────────────

    def create_silence(self, silence: PostableSilence) -> str:
        now = self._clock()
        with self._lock:
            self.calls.append(("create", silence))
            if silence.ends_at <= now:
                raise TransportError("silence end time can't be in the past", status_code=400)
            silence_id = str(uuid.uuid4())
            self._silences[silence_id] = {
                "id": silence_id,
                "matchers": list(silence.matchers),
                # Alertmanager moves a start time in the past up to now
                "starts_at": max(silence.starts_at, now),
                "ends_at": silence.ends_at,
                "created_by": silence.created_by,
                "comment": silence.comment,
                "updated_at": now,
            }
        logger.debug("Stored silence %s", silence_id)
        return silence_id

    def list_silences(self, filter: list[str]) -> list[Silence]:
        now = self._clock()
        with self._lock:
            self.calls.append(("list", list(filter)))
            filters = [parse_filter(expr) for expr in filter]
            silences = [self._snapshot(r, now) for r in self._silences.values()]
        return [s for s in silences if _silence_passes(filters, s)]

    def get_silence(self, silence_id: str) -> Silence:
        now = self._clock()
        with self._lock:
            self.calls.append(("get", silence_id))
            return self._snapshot(self._lookup(silence_id), now)

    def delete_silence(self, silence_id: str) -> None:
        now = self._clock()
        with self._lock:
            self.calls.append(("delete", silence_id))
            record = self._lookup(silence_id)
            state = state_at(record["starts_at"], record["ends_at"], now)
            if state == SilenceState.EXPIRED:
                return
            if state == SilenceState.PENDING:
                record["starts_at"] = now
            record["ends_at"] = now
            record["updated_at"] = now
        logger.debug("Expired silence %s (was %s)", silence_id, state)

    def operations(self) -> list[str]:
        """Names of the operations issued so far, in order."""
        return [op for op, _ in self.calls]
