"""Store em memória para execução local, CLI e testes."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from cartilha_app.core.schemas import LegalEntry, StandardTopic
from cartilha_app.core.text import normalize, strip_accents
from cartilha_app.store.base import StoreError


def _is_approved(entry: LegalEntry) -> bool:
    # Entradas cadastradas fora do fluxo de moderação não têm status.
    return entry.moderation_status in (None, "approved")


def _overlap_score(query_tokens: set[str], entry: LegalEntry) -> int:
    entry_tokens = set(
        normalize(f"{entry.topic} {entry.plain_explanation} {entry.legal_basis}")
    )
    return len(query_tokens & entry_tokens)


class InMemoryEntryStore:
    """Coleção imutável de entradas com as mesmas consultas do store remoto."""

    def __init__(
        self,
        entries: Iterable[LegalEntry] = (),
        standard_topics: Iterable[StandardTopic] = (),
        country_names: dict[str, str] | None = None,
    ) -> None:
        names = {code.upper(): name for code, name in (country_names or {}).items()}
        self._entries = tuple(
            entry
            if entry.country_name or entry.country_code not in names
            else entry.model_copy(update={"country_name": names[entry.country_code]})
            for entry in entries
        )
        self._standard_topics = tuple(standard_topics)

    @classmethod
    def from_json_file(cls, path: str | Path) -> InMemoryEntryStore:
        """Carrega ``{"entries": [...], "standard_topics": [...], "countries": {...}}``.

        Uma lista simples no topo do arquivo é tratada como lista de entradas.
        """

        try:
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Não foi possível ler {path}: {exc}") from exc

        if isinstance(payload, list):
            payload = {"entries": payload}

        try:
            entries = [LegalEntry.model_validate(row) for row in payload.get("entries", [])]
            standard_topics = [
                StandardTopic.model_validate(row)
                for row in payload.get("standard_topics", [])
            ]
        except ValidationError as exc:
            raise StoreError(f"Arquivo {path} com entrada inválida: {exc}") from exc

        return cls(
            entries=entries,
            standard_topics=standard_topics,
            country_names=payload.get("countries"),
        )

    def list_entries(
        self,
        country_code: str,
        category_id: int | None = None,
    ) -> list[LegalEntry]:
        code = country_code.upper()
        return [
            entry
            for entry in self._entries
            if entry.country_code == code
            and (category_id is None or entry.category_id == category_id)
        ]

    def search_entries(
        self,
        keyword: str | None,
        country_code: str | None = None,
        approved_only: bool = True,
        limit: int = 10,
    ) -> list[LegalEntry]:
        needle = strip_accents(keyword.lower()) if keyword else None
        results: list[LegalEntry] = []
        for entry in self._entries:
            if approved_only and not _is_approved(entry):
                continue
            if country_code and entry.country_code != country_code.upper():
                continue
            if needle is not None:
                haystacks = (entry.topic, entry.plain_explanation)
                if not any(needle in strip_accents(text.lower()) for text in haystacks):
                    continue
            results.append(entry)
            if len(results) >= limit:
                break
        return results

    def hybrid_search(
        self,
        query: str | None,
        country: str | None,
        category_id: int | None,
        limit: int,
    ) -> list[LegalEntry]:
        query_tokens = set(normalize(query or ""))
        scored: list[tuple[int, LegalEntry]] = []
        for entry in self._entries:
            if not _is_approved(entry):
                continue
            if country and entry.country_code != country.upper():
                continue
            if category_id is not None and entry.category_id != category_id:
                continue
            score = _overlap_score(query_tokens, entry)
            if query_tokens and score == 0:
                continue
            scored.append((score, entry))

        scored.sort(key=lambda item: item[0], reverse=True)
        return [entry for _, entry in scored[:limit]]

    def list_standard_topics(
        self,
        category_id: int | None = None,
    ) -> list[StandardTopic]:
        return [
            topic
            for topic in self._standard_topics
            if category_id is None or topic.category_id == category_id
        ]
