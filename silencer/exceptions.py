"""Error types raised by the silence client."""

from enum import StrEnum

from pydantic import ValidationError


class SilencerError(Exception):
    """Base class for all silencer errors."""


class TransportError(SilencerError):
    """The transport failed: connectivity, non-2xx status or a malformed response.

    Raised unchanged to the caller of create/list/delete/filter. The
    underlying exception, if any, is available as ``__cause__``.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class UpdatePhase(StrEnum):
    CREATE_REPLACEMENT = "create_replacement"
    REMOVE_REPLACED = "remove_replaced"


_PHASE_MESSAGES = {
    UpdatePhase.CREATE_REPLACEMENT: "unable to create replacement silence",
    UpdatePhase.REMOVE_REPLACED: "unable to remove replaced silence",
}


class CompositeOperationError(SilencerError):
    """A phase of the replace-style update failed.

    ``phase`` tells the caller which state the remote service was left in:

    - ``CREATE_REPLACEMENT``: nothing changed, the original silence is intact.
      ``cause`` is a ValidationError when the replacement was rejected locally.
    - ``REMOVE_REPLACED``: the replacement exists and so does the original.
    """

    def __init__(
        self,
        phase: UpdatePhase,
        cause: TransportError | ValidationError,
        silence_id: str,
    ) -> None:
        super().__init__(f"{_PHASE_MESSAGES[phase]}: {cause}")
        self.phase = phase
        self.cause = cause
        self.silence_id = silence_id

    @property
    def safe(self) -> bool:
        """True when the failure left no duplicate silence behind."""
        return self.phase == UpdatePhase.CREATE_REPLACEMENT
