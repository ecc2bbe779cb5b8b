"""Role-based source/target language resolution.

Guests always translate toward the canonical language. Hosts translate toward
the guest side: the ``guestLanguage`` the client declared for audio, or the
sender's own session language for text. Both fall back to the default guest
language when unspecified.
"""

from __future__ import annotations

from dataclasses import dataclass

from hotel_relay.services.language.directory import (
    CANONICAL_LANGUAGE,
    DEFAULT_GUEST_LANGUAGE,
)
from hotel_relay.services.sessions import Role


@dataclass(frozen=True)
class LanguagePair:
    source: str
    target: str


def resolve_audio_languages(
    role: Role,
    declared_language: str | None,
    guest_language: str | None,
    session_language: str | None = None,
) -> LanguagePair:
    """Languages for a voice turn. Source is what the speaker declared."""
    source = declared_language or session_language or DEFAULT_GUEST_LANGUAGE
    if role is Role.GUEST:
        target = CANONICAL_LANGUAGE
    else:
        target = guest_language or DEFAULT_GUEST_LANGUAGE
    return LanguagePair(source=source, target=target)


def resolve_text_languages(
    role: Role,
    explicit_language: str | None,
    session_language: str | None,
) -> LanguagePair:
    """Languages for a typed turn.

    An explicit ``language`` on the message overrides the role-inferred
    source. The target follows the same role rule as audio, using the
    sender's session language in place of a declared guest language.
    """
    if role is Role.GUEST:
        source = explicit_language or session_language or DEFAULT_GUEST_LANGUAGE
        target = CANONICAL_LANGUAGE
    else:
        source = explicit_language or CANONICAL_LANGUAGE
        target = session_language or DEFAULT_GUEST_LANGUAGE
    return LanguagePair(source=source, target=target)
