"""Silence management against a remote Alertmanager.

Create, list and delete map one-to-one onto the transport. Update and
filter are built on top of them:

- update replaces a silence, since Alertmanager cannot edit one in place:
  look up the original, create a copy with the new end time, then delete
  the original only if it is currently active. A failed or invalid
  create leaves everything untouched. A failed delete leaves both silences
  in place, which is reported but not rolled back. Nothing locks the silence between
  the lookup and the writes, so a concurrent update or delete of the same
  id can race with this one.
- filter fetches every silence and keeps those for which all predicates
  hold, evaluated left to right with short-circuit.
"""

# SilenceService.list shadows the builtin inside the class body
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from pydantic import ValidationError

from silencer.core.predicates import SilencePredicate, matches_all
from silencer.exceptions import CompositeOperationError, TransportError, UpdatePhase
from silencer.integrations import SilenceTransport
from silencer.schemas import Matcher, PostableSilence, Silence, SilenceState

logger = logging.getLogger(__name__)


class SilenceService:
    """Stateless apart from its transport; safe to share between threads."""

    def __init__(self, transport: SilenceTransport) -> None:
        self.transport = transport

    # ─── Direct Operations ───────────────────────────────

    def create(
        self,
        matchers: Iterable[Matcher | dict],
        starts_at: datetime | str,
        ends_at: datetime | str,
        created_by: str,
        comment: str = "",
    ) -> None:
        """Create a silence.

        Nothing is returned; use ``list`` or ``filter`` to find the new
        silence. Raises ``pydantic.ValidationError`` before any request if
        the input is invalid and ``TransportError`` if the request fails.
        """
        silence = PostableSilence(
            matchers=list(matchers),
            starts_at=starts_at,
            ends_at=ends_at,
            created_by=created_by,
            comment=comment,
        )
        silence_id = self.transport.create_silence(silence)
        logger.info(
            "Created silence %s (%s) until %s",
            silence_id,
            ", ".join(str(m) for m in silence.matchers),
            silence.ends_at.isoformat(),
        )

    def list(self, filter: Sequence[str] | None = None) -> list[Silence]:
        """List silences, optionally pre-filtered server-side by matcher expressions."""
        silences = self.transport.list_silences(list(filter or []))
        logger.debug("Listed %d silences", len(silences))
        return silences

    def delete(self, silence_id: str) -> None:
        """Expire a silence. The remote result is propagated as-is."""
        self.transport.delete_silence(silence_id)
        logger.info("Deleted silence %s", silence_id)

    # ─── Replace-style Update ────────────────────────────

    def update(self, silence_id: str, ends_at: datetime | str) -> None:
        """Move a silence's end time by replacing it.

        The id changes: the replacement is a new silence. See the module
        docstring for the failure states each phase can leave behind.
        """
        original = self.transport.get_silence(silence_id)

        try:
            self.create(
                original.matchers,
                original.starts_at,
                ends_at,
                original.created_by,
                original.comment,
            )
        except (TransportError, ValidationError) as exc:
            raise CompositeOperationError(
                UpdatePhase.CREATE_REPLACEMENT, exc, silence_id
            ) from exc

        if original.state != SilenceState.ACTIVE:
            logger.info(
                "Left silence %s in place after replacement (state: %s)",
                silence_id,
                original.state,
            )
            return

        try:
            self.delete(original.id)
        except TransportError as exc:
            logger.warning(
                "Replacement created but silence %s could not be removed; "
                "both silences now exist",
                silence_id,
            )
            raise CompositeOperationError(
                UpdatePhase.REMOVE_REPLACED, exc, silence_id
            ) from exc

    # ─── Predicate Filter ────────────────────────────────

    def filter(self, *predicates: SilencePredicate) -> list[Silence]:
        """Return all silences for which every predicate holds, in list order."""
        silences = self.list()
        matched = [s for s in silences if matches_all(s, predicates)]
        logger.debug("Filter kept %d of %d silences", len(matched), len(silences))
        return matched
