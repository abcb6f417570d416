"""Composable silence predicates for ``SilenceService.filter``.

A predicate is any callable taking a Silence and returning a bool. Plain
functions and lambdas work; the factories below cover the common cases.

Predicates must be pure and total: no side effects, and never raise.
Anything ambiguous (missing status, unparsable data) resolves to False.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from silencer.schemas import Matcher, Silence, SilenceState


class SilencePredicate(Protocol):
    def __call__(self, silence: Silence) -> bool: ...


# ─── State ───────────────────────────────────────────────


def state_is(*states: SilenceState | str) -> SilencePredicate:
    """Match silences whose remote-computed state is one of ``states``."""
    wanted = frozenset(SilenceState(s) for s in states)

    def predicate(silence: Silence) -> bool:
        return silence.state is not None and silence.state in wanted

    return predicate


def is_active() -> SilencePredicate:
    return state_is(SilenceState.ACTIVE)


def is_pending() -> SilencePredicate:
    return state_is(SilenceState.PENDING)


def is_expired() -> SilencePredicate:
    return state_is(SilenceState.EXPIRED)


# ─── Metadata ────────────────────────────────────────────


def created_by(creator: str) -> SilencePredicate:
    def predicate(silence: Silence) -> bool:
        return silence.created_by == creator

    return predicate


def comment_equals(text: str) -> SilencePredicate:
    def predicate(silence: Silence) -> bool:
        return silence.comment == text

    return predicate


def comment_contains(text: str) -> SilencePredicate:
    def predicate(silence: Silence) -> bool:
        return text in (silence.comment or "")

    return predicate


# ─── Matchers ────────────────────────────────────────────


def has_matcher(
    name: str,
    value: str | None = None,
    is_regex: bool | None = None,
    is_equal: bool | None = None,
) -> SilencePredicate:
    """Match silences with a matcher on label ``name``.

    Optional arguments narrow the match; None means "any".
    """

    def matches(m: Matcher) -> bool:
        if m.name != name:
            return False
        if value is not None and m.value != value:
            return False
        if is_regex is not None and m.is_regex != is_regex:
            return False
        if is_equal is not None and m.is_equal != is_equal:
            return False
        return True

    def predicate(silence: Silence) -> bool:
        return any(matches(m) for m in silence.matchers)

    return predicate


def matchers_equal(matchers: Iterable[Matcher | dict]) -> SilencePredicate:
    """Match silences carrying exactly this set of matchers, in any order."""
    expected = frozenset(
        m if isinstance(m, Matcher) else Matcher.model_validate(m) for m in matchers
    )

    def predicate(silence: Silence) -> bool:
        return frozenset(silence.matchers) == expected

    return predicate


# ─── Time Window ─────────────────────────────────────────


def ends_before(when: datetime) -> SilencePredicate:
    def predicate(silence: Silence) -> bool:
        try:
            return silence.ends_at < when
        except TypeError:
            # naive vs aware comparison
            return False

    return predicate


def ends_after(when: datetime) -> SilencePredicate:
    def predicate(silence: Silence) -> bool:
        try:
            return silence.ends_at > when
        except TypeError:
            return False

    return predicate


def active_at(when: datetime) -> SilencePredicate:
    """Match silences whose window covers ``when``, regardless of reported state."""

    def predicate(silence: Silence) -> bool:
        try:
            return silence.starts_at <= when < silence.ends_at
        except TypeError:
            return False

    return predicate


# ─── Combinators ─────────────────────────────────────────


def all_of(*predicates: SilencePredicate) -> SilencePredicate:
    def predicate(silence: Silence) -> bool:
        return all(p(silence) for p in predicates)

    return predicate


def any_of(*predicates: SilencePredicate) -> SilencePredicate:
    def predicate(silence: Silence) -> bool:
        return any(p(silence) for p in predicates)

    return predicate


def negate(inner: SilencePredicate) -> SilencePredicate:
    def predicate(silence: Silence) -> bool:
        return not inner(silence)

    return predicate


def matches_all(silence: Silence, predicates: Iterable[SilencePredicate]) -> bool:
    """Left-to-right AND, stopping at the first False. Empty means True."""
    return all(p(silence) for p in predicates)
