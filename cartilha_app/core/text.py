"""Normalização de texto compartilhada por similaridade e extração de palavras-chave."""

from __future__ import annotations

import re
import unicodedata

_NON_WORD = re.compile(r"[^\w\s]")
MIN_TOKEN_LENGTH = 3


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def normalize(text: str) -> list[str]:
    """Tokeniza ``text`` em minúsculas, sem acentos e sem pontuação.

    Tokens com dois caracteres ou menos são descartados. Stopwords não são
    removidas aqui.
    """

    cleaned = _NON_WORD.sub(" ", strip_accents(text.lower()))
    return [token for token in cleaned.split() if len(token) >= MIN_TOKEN_LENGTH]
