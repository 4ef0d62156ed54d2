"""
Language resolution and the fixed per-language texts.

Only a small fixed set of languages is supported. Every localized table
below has an entry for each of them, and `localized()` is the single place
that falls back to English.
"""
from typing import Mapping, Optional, Tuple, TypeVar

T = TypeVar("T")

DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES: Tuple[str, ...] = ("en", "it", "de")

# Quick-reply labels; the first MAX_SUGGESTIONS are attached to a reply
SUGGESTION_LABELS: Mapping[str, Tuple[str, ...]] = {
    "en": ("Journal", "Progress", "Coach", "SOS", "Invite", "Settings"),
    "it": ("Journal", "Progress", "Coach", "SOS", "Invite", "Impostazioni"),
    "de": ("Journal", "Fortschritt", "Coach", "SOS", "Einladen", "Einstellungen"),
}

FALLBACK_MESSAGES: Mapping[str, str] = {
    "en": "I hit a hiccup. Let's try again in a moment.",
    "it": "Ho avuto un intoppo. Riproviamo tra poco.",
    "de": "Kleiner Hänger. Versuchen wir es gleich nochmal.",
}

WELCOME_MESSAGES: Mapping[str, str] = {
    "en": "Hi 🌿 I'm HITH, your gentle space for journaling, coaching and tiny steps.",
    "it": "Ciao 🌿 sono HITH, il tuo spazio gentile per diario, coaching e piccoli passi.",
    "de": "Hi 🌿 ich bin HITH, dein sanfter Raum für Tagebuch, Coaching und kleine Schritte.",
}


def localized(table: Mapping[str, T], language: str) -> T:
    """Look up a per-language value, falling back to English."""
    if language in table:
        return table[language]
    return table[DEFAULT_LANGUAGE]


class LanguageResolver:
    """
    Maps a client-supplied locale hint to a supported language code.

    Example:
        >>> LanguageResolver().resolve("it-IT")
        'it'
        >>> LanguageResolver().resolve("fr")
        'en'
    """

    def __init__(self, supported: Tuple[str, ...] = SUPPORTED_LANGUAGES):
        self.supported = supported

    def resolve(self, locale_hint: Optional[str]) -> str:
        code = (locale_hint or DEFAULT_LANGUAGE)[:2]
        return code if code in self.supported else DEFAULT_LANGUAGE
