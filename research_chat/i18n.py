"""Translation of timeline and CLI messages.

Catalogues live under ``research_chat/locale/<language>/LC_MESSAGES`` as
``research_chat.po`` sources; :mod:`polib` compiles them in memory.  A compiled
``research_chat.mo`` beside a source takes precedence.  Until :func:`install`
finds a catalogue, :func:`_` returns messages unchanged.
"""

from __future__ import annotations

import logging
import os
from io import BytesIO
from pathlib import Path
from gettext import GNUTranslations, NullTranslations

import polib

DOMAIN = "research_chat"
LOCALE_DIR = Path(__file__).resolve().parent / "locale"
_LANGUAGE_ENV = ("LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG")

logger = logging.getLogger(__name__)

_active: NullTranslations = NullTranslations()


def _(message: str) -> str:
    """Translate *message* with the active catalogue."""
    return _active.gettext(message)


def candidate_languages(language: str | None = None) -> list[str]:
    """Return catalogue directory names to try, most specific first.

    ``"ru_RU.UTF-8"`` yields ``["ru_RU", "ru"]``.  Without *language* the
    usual locale environment variables are consulted in gettext order.
    """
    if language:
        requested = [language]
    else:
        requested = []
        for name in _LANGUAGE_ENV:
            requested.extend(
                token for token in os.environ.get(name, "").split(":") if token
            )
    names: list[str] = []
    for token in requested:
        base = token.split(".", 1)[0].split("@", 1)[0].strip()
        if not base or base in {"C", "POSIX"}:
            continue
        for name in (base, base.split("_", 1)[0]):
            if name not in names:
                names.append(name)
    return names


def load_catalog(
    language: str | None = None,
    *,
    domain: str = DOMAIN,
    localedir: str | os.PathLike[str] = LOCALE_DIR,
) -> GNUTranslations | None:
    """Return the first catalogue found for *language*, or ``None``."""
    for name in candidate_languages(language):
        directory = Path(localedir) / name / "LC_MESSAGES"
        mo_path = directory / f"{domain}.mo"
        if mo_path.is_file():
            with mo_path.open("rb") as fh:
                return GNUTranslations(fh)
        po_path = directory / f"{domain}.po"
        if not po_path.is_file():
            continue
        try:
            catalog = polib.pofile(str(po_path))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable catalogue %s: %s", po_path, exc)
            continue
        return GNUTranslations(BytesIO(catalog.to_binary()))
    return None


def install(
    language: str | None = None,
    *,
    domain: str = DOMAIN,
    localedir: str | os.PathLike[str] = LOCALE_DIR,
) -> bool:
    """Activate the catalogue for *language* and report whether one was found.

    When none matches, messages stay untranslated.
    """
    global _active
    catalog = load_catalog(language, domain=domain, localedir=localedir)
    if catalog is None:
        if language:
            logger.info("No %s catalogue for language %r", domain, language)
        _active = NullTranslations()
        return False
    _active = catalog
    return True


def reset() -> None:
    """Return to untranslated messages."""
    global _active
    _active = NullTranslations()


__all__ = ["DOMAIN", "LOCALE_DIR", "_", "candidate_languages", "install", "load_catalog", "reset"]
