"""Store remoto sobre a API REST (PostgREST) do Supabase."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from cartilha_app.config import AppSettings
from cartilha_app.core.schemas import LegalEntry, StandardTopic
from cartilha_app.store.base import StoreError

logger = logging.getLogger(__name__)

ENTRY_COLUMNS = (
    "id,country_code,category_id,topic,status,legal_basis,"
    "plain_explanation,cultural_note,moderation_status"
)


def flatten_country_name(row: dict[str, Any]) -> dict[str, Any]:
    """Achata o join ``countries(name)`` para o campo ``country_name``.

    O join chega como objeto ou como lista de um elemento, conforme o formato
    da consulta.
    """

    flattened = dict(row)
    joined = flattened.pop("countries", None)
    if isinstance(joined, list):
        joined = joined[0] if joined else None
    if isinstance(joined, dict) and joined.get("name"):
        flattened.setdefault("country_name", joined["name"])
    if not flattened.get("country_name"):
        flattened["country_name"] = flattened.get("country_code")
    return flattened


class SupabaseEntryStore:
    """Cliente HTTP das tabelas ``cartilha_entries`` e ``standard_topics``."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        hybrid_function: str = "search_entries_hybrid",
        timeout_s: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._hybrid_function = hybrid_function
        self._client = client or httpx.Client(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            timeout=timeout_s,
        )
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    @classmethod
    def from_settings(cls, settings: AppSettings) -> SupabaseEntryStore:
        if not settings.SUPABASE_ANON_KEY:
            raise ValueError("SUPABASE_ANON_KEY é obrigatório para STORE_BACKEND=supabase.")
        return cls(
            base_url=settings.SUPABASE_URL,
            api_key=settings.SUPABASE_ANON_KEY,
            hybrid_function=settings.SUPABASE_HYBRID_FUNCTION,
            timeout_s=settings.SUPABASE_TIMEOUT_SECONDS,
        )

    def close(self) -> None:
        self._client.close()

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        try:
            response = self._client.request(
                method,
                path,
                params=params,
                json=payload,
                headers=self._headers,
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise StoreError(f"Erro na consulta {method} {path}: {exc}") from exc

        if not isinstance(data, list):
            raise StoreError(f"Resposta inesperada de {path}: {type(data).__name__}")
        return data

    def _parse_entries(self, rows: list[dict[str, Any]]) -> list[LegalEntry]:
        entries: list[LegalEntry] = []
        for row in rows:
            try:
                entries.append(LegalEntry.model_validate(flatten_country_name(row)))
            except ValidationError as exc:
                logger.warning(
                    "Entrada inválida recebida do Supabase (%s): %s", row.get("id"), exc
                )
        return entries

    def list_entries(
        self,
        country_code: str,
        category_id: int | None = None,
    ) -> list[LegalEntry]:
        params = {
            "select": ENTRY_COLUMNS,
            "country_code": f"eq.{country_code.upper()}",
        }
        if category_id is not None:
            params["category_id"] = f"eq.{category_id}"
        return self._parse_entries(self._request("GET", "/cartilha_entries", params))

    def search_entries(
        self,
        keyword: str | None,
        country_code: str | None = None,
        approved_only: bool = True,
        limit: int = 10,
    ) -> list[LegalEntry]:
        params = {
            "select": f"{ENTRY_COLUMNS},countries!inner(name)",
            "limit": str(limit),
        }
        if approved_only:
            params["moderation_status"] = "eq.approved"
        if country_code:
            params["country_code"] = f"eq.{country_code.upper()}"
        if keyword:
            params["or"] = (
                f"(topic.ilike.*{keyword}*,plain_explanation.ilike.*{keyword}*)"
            )
        return self._parse_entries(self._request("GET", "/cartilha_entries", params))

    def hybrid_search(
        self,
        query: str | None,
        country: str | None,
        category_id: int | None,
        limit: int,
    ) -> list[LegalEntry]:
        payload = {
            "search_query": query,
            "country_filter": country,
            "category_filter": category_id,
            "result_limit": limit,
        }
        rows = self._request("POST", f"/rpc/{self._hybrid_function}", payload=payload)
        logger.debug("Busca híbrida retornou %s linhas", len(rows))
        return self._parse_entries(rows)

    def list_standard_topics(
        self,
        category_id: int | None = None,
    ) -> list[StandardTopic]:
        params = {
            "select": "topic_name,category_id,description,keywords",
            "order": "topic_name",
        }
        if category_id is not None:
            params["category_id"] = f"eq.{category_id}"
        rows = self._request("GET", "/standard_topics", params)
        try:
            return [StandardTopic.model_validate(row) for row in rows]
        except ValidationError as exc:
            raise StoreError(f"Tópico padronizado inválido: {exc}") from exc
