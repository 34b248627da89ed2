"""Consulta híbrida de entradas com fallback por palavra-chave."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from cartilha_app.config import AppSettings
from cartilha_app.core.schemas import LegalEntry
from cartilha_app.core.text import strip_accents
from cartilha_app.store.base import EntryLookup, HybridSearch, StoreError

logger = logging.getLogger(__name__)


class RetrievalStore(EntryLookup, HybridSearch, Protocol):
    """Store com busca híbrida e busca simples de fallback."""


def resolve_target_country(
    explicit_country: str | None,
    detected_countries: Sequence[str] | None,
) -> str | None:
    if detected_countries:
        return detected_countries[0].upper()
    if explicit_country:
        return explicit_country.strip().upper() or None
    return None


def keyword_match_score(entry: LegalEntry, keywords: Sequence[str]) -> int:
    text = strip_accents(f"{entry.topic} {entry.plain_explanation}".lower())
    return sum(1 for keyword in keywords if keyword.lower() in text)


def rank_by_keywords(
    entries: Sequence[LegalEntry],
    keywords: Sequence[str],
) -> list[LegalEntry]:
    return sorted(
        entries,
        key=lambda entry: keyword_match_score(entry, keywords),
        reverse=True,
    )


def _with_country_name(entry: LegalEntry) -> LegalEntry:
    if entry.country_name:
        return entry
    return entry.model_copy(update={"country_name": entry.country_code})


class HybridRetriever:
    """Recupera até ``max_entries`` entradas relevantes para uma mensagem."""

    def __init__(
        self,
        store: RetrievalStore,
        max_entries: int = 5,
        query_keywords: int = 5,
        fallback_limit: int = 10,
    ) -> None:
        self._store = store
        self._max_entries = max_entries
        self._query_keywords = query_keywords
        self._fallback_limit = fallback_limit

    @classmethod
    def from_settings(
        cls,
        store: RetrievalStore,
        settings: AppSettings,
    ) -> HybridRetriever:
        return cls(
            store=store,
            max_entries=settings.RAG_MAX_ENTRIES,
            query_keywords=settings.RAG_QUERY_KEYWORDS,
            fallback_limit=settings.RAG_FALLBACK_LIMIT,
        )

    def _search_hybrid(
        self,
        keywords: Sequence[str],
        country: str | None,
    ) -> list[LegalEntry]:
        query = " ".join(keywords[: self._query_keywords]) or None
        try:
            return self._store.hybrid_search(
                query=query,
                country=country,
                category_id=None,
                limit=self._max_entries,
            )
        except StoreError as exc:
            logger.warning("Busca híbrida falhou, usando fallback: %s", exc)
            return []

    def _search_fallback(
        self,
        keywords: Sequence[str],
        country: str | None,
    ) -> list[LegalEntry]:
        try:
            rows = self._store.search_entries(
                keyword=keywords[0] if keywords else None,
                country_code=country,
                approved_only=True,
                limit=self._fallback_limit,
            )
        except StoreError as exc:
            logger.warning("Busca de fallback falhou: %s", exc)
            return []
        return rank_by_keywords(rows, keywords)

    def retrieve(
        self,
        keywords: Sequence[str],
        explicit_country: str | None = None,
        detected_countries: Sequence[str] | None = None,
    ) -> list[LegalEntry]:
        country = resolve_target_country(explicit_country, detected_countries)

        entries = self._search_hybrid(keywords, country)
        if not entries:
            entries = self._search_fallback(keywords, country)

        return [_with_country_name(entry) for entry in entries[: self._max_entries]]
