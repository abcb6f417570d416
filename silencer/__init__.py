"""Alertmanager silence client for automated operators."""

from silencer.core.silence import SilenceService
from silencer.exceptions import (
    CompositeOperationError,
    SilencerError,
    TransportError,
    UpdatePhase,
)
from silencer.integrations import SilenceTransport
from silencer.schemas import Matcher, PostableSilence, Silence, SilenceState, SilenceStatus

__version__ = "0.1.0"

__all__ = [
    "CompositeOperationError",
    "Matcher",
    "PostableSilence",
    "Silence",
    "SilenceService",
    "SilenceState",
    "SilenceStatus",
    "SilenceTransport",
    "SilencerError",
    "TransportError",
    "UpdatePhase",
]
