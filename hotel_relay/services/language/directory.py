"""Static language directory.

Maps the BCP-47 style codes used on the wire (``hi-IN``, ``en-IN`` ...) to
display names, and carries the static supported-language list that providers
fall back to when the remote catalogue is unavailable.
"""

from __future__ import annotations

from dataclasses import dataclass

CANONICAL_LANGUAGE = "en-IN"
DEFAULT_GUEST_LANGUAGE = "hi-IN"


@dataclass(frozen=True)
class SupportedLanguage:
    """A language the provider can transcribe and translate."""

    code: str
    name: str
    native_name: str


DEFAULT_LANGUAGES: tuple[SupportedLanguage, ...] = (
    SupportedLanguage("hi-IN", "Hindi", "हिन्दी"),
    SupportedLanguage("bn-IN", "Bengali", "বাংলা"),
    SupportedLanguage("ta-IN", "Tamil", "தமிழ்"),
    SupportedLanguage("te-IN", "Telugu", "తెలుగు"),
    SupportedLanguage("mr-IN", "Marathi", "मराठी"),
    SupportedLanguage("gu-IN", "Gujarati", "ગુજરાતી"),
    SupportedLanguage("kn-IN", "Kannada", "ಕನ್ನಡ"),
    SupportedLanguage("ml-IN", "Malayalam", "മലയാളം"),
    SupportedLanguage("pa-IN", "Punjabi", "ਪੰਜਾਬੀ"),
    SupportedLanguage("or-IN", "Odia", "ଓଡ଼ିଆ"),
    SupportedLanguage("en-IN", "English", "English"),
)

LANGUAGE_NAMES: dict[str, str] = {lang.code: lang.name for lang in DEFAULT_LANGUAGES}


def language_name(code: str | None) -> str:
    """Display name for *code*; unknown codes are returned unchanged."""
    if not code:
        return ""
    return LANGUAGE_NAMES.get(code, code)
