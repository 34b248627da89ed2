"""Contratos dos colaboradores de persistência consumidos pelo núcleo."""

from __future__ import annotations

from typing import Protocol

from cartilha_app.core.schemas import LegalEntry, StandardTopic


class StoreError(RuntimeError):
    """Falha do backend de persistência (rede, erro remoto, payload inválido)."""


class EntryLookup(Protocol):
    def list_entries(
        self,
        country_code: str,
        category_id: int | None = None,
    ) -> list[LegalEntry]:
        """Lista entradas de um país, opcionalmente de uma categoria."""

    def search_entries(
        self,
        keyword: str | None,
        country_code: str | None = None,
        approved_only: bool = True,
        limit: int = 10,
    ) -> list[LegalEntry]:
        """Busca simples por substring em tópico ou explicação."""


class HybridSearch(Protocol):
    def hybrid_search(
        self,
        query: str | None,
        country: str | None,
        category_id: int | None,
        limit: int,
    ) -> list[LegalEntry]:
        """Busca híbrida (lexical + semântica) executada no servidor."""


class StandardTopicLookup(Protocol):
    def list_standard_topics(
        self,
        category_id: int | None = None,
    ) -> list[StandardTopic]:
        """Lista tópicos padronizados, opcionalmente de uma categoria."""


class EntryStore(EntryLookup, HybridSearch, StandardTopicLookup, Protocol):
    """Colaborador completo usado pela API e pela CLI."""
