"""Wire models for Alertmanager silences (API v2).

Field aliases match the Alertmanager JSON names exactly (``startsAt``,
``createdBy``, ``isRegex`` ...). Python code uses the snake_case names;
serialize with ``by_alias=True`` when talking to the remote service.
"""

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator

# ─── Enums ───────────────────────────────────────────────


class SilenceState(StrEnum):
    """Lifecycle state computed by Alertmanager. Never set by the client."""

    EXPIRED = "expired"
    ACTIVE = "active"
    PENDING = "pending"


# ─── Helpers ─────────────────────────────────────────────


def _ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they serialize as RFC3339."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


# ─── Matchers ────────────────────────────────────────────


class Matcher(BaseModel):
    """A single label condition of a silence."""

    name: str = Field(..., min_length=1, description="Label name to match")
    value: str = Field(..., description="Value (or regex) to match against")
    is_regex: bool = Field(
        default=False, alias="isRegex", description="Whether value is a regular expression"
    )
    is_equal: bool = Field(
        default=True, alias="isEqual", description="False negates the match (!= / !~)"
    )

    model_config = {"populate_by_name": True, "frozen": True}

    def __str__(self) -> str:
        op = ("=~" if self.is_regex else "=") if self.is_equal else ("!~" if self.is_regex else "!=")
        return f'{self.name}{op}"{self.value}"'


# ─── Silences ────────────────────────────────────────────


class SilenceStatus(BaseModel):
    state: SilenceState


class PostableSilence(BaseModel):
    """Request body for creating a silence.

    Validated locally so an obviously broken request never reaches the
    remote service.
    """

    matchers: list[Matcher] = Field(..., min_length=1)
    starts_at: datetime = Field(..., alias="startsAt")
    ends_at: datetime = Field(..., alias="endsAt")
    created_by: str = Field(..., min_length=1, alias="createdBy")
    comment: str = ""

    model_config = {"populate_by_name": True}

    @field_validator("starts_at", "ends_at")
    @classmethod
    def normalize_timezone(cls, v: datetime) -> datetime:
        return _ensure_utc(v)

    @model_validator(mode="after")
    def validate_time_range(self) -> "PostableSilence":
        if self.ends_at <= self.starts_at:
            raise ValueError("endsAt must be after startsAt")
        return self

    def to_wire(self) -> dict:
        """JSON-ready payload with Alertmanager field names."""
        return self.model_dump(mode="json", by_alias=True)


class Silence(BaseModel):
    """A silence as returned by Alertmanager (``GettableSilence``)."""

    id: str
    matchers: list[Matcher]
    starts_at: datetime = Field(..., alias="startsAt")
    ends_at: datetime = Field(..., alias="endsAt")
    created_by: str = Field(..., alias="createdBy")
    comment: str = ""
    status: SilenceStatus | None = None
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    model_config = {"populate_by_name": True}

    @field_validator("starts_at", "ends_at", "updated_at")
    @classmethod
    def normalize_timezone(cls, v: datetime | None) -> datetime | None:
        if v is None:
            return v
        return _ensure_utc(v)

    @property
    def state(self) -> SilenceState | None:
        return self.status.state if self.status else None

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "Matcher",
    "PostableSilence",
    "Silence",
    "SilenceState",
    "SilenceStatus",
]
