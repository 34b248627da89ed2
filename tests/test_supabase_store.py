import json
import logging

import httpx
import pytest

from cartilha_app.core.duplicates import check_similarity
from cartilha_app.core.schemas import EntryDraft
from cartilha_app.store.base import StoreError
from cartilha_app.store.supabase import SupabaseEntryStore, flatten_country_name

ROW = {
    "id": "a1",
    "country_code": "BR",
    "category_id": 2,
    "topic": "Beijo em público",
    "status": "yellow",
    "legal_basis": "Código Penal art. 233",
    "plain_explanation": "Tolerado mas pode gerar multa",
    "cultural_note": None,
    "moderation_status": "approved",
}


def _store(handler) -> SupabaseEntryStore:
    client = httpx.Client(
        base_url="http://supabase.test/rest/v1",
        transport=httpx.MockTransport(handler),
    )
    return SupabaseEntryStore(base_url="http://supabase.test", api_key="anon", client=client)


def test_flatten_country_name_accepts_object_list_or_nothing() -> None:
    assert flatten_country_name({**ROW, "countries": {"name": "Brasil"}})["country_name"] == "Brasil"
    assert flatten_country_name({**ROW, "countries": [{"name": "Brasil"}]})["country_name"] == "Brasil"
    assert flatten_country_name({**ROW, "countries": []})["country_name"] == "BR"
    assert "countries" not in flatten_country_name({**ROW, "countries": None})


def test_list_entries_filters_by_country_and_category() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=[ROW])

    entries = _store(handler).list_entries("br", category_id=2)

    assert entries[0].id == "a1"
    request = captured[0]
    assert request.url.path == "/rest/v1/cartilha_entries"
    assert request.url.params["country_code"] == "eq.BR"
    assert request.url.params["category_id"] == "eq.2"
    assert request.headers["apikey"] == "anon"


def test_search_entries_uses_ilike_on_topic_and_explanation() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=[{**ROW, "countries": {"name": "Brasil"}}])

    entries = _store(handler).search_entries("beijo", country_code="BR", limit=10)

    params = captured[0].url.params
    assert params["moderation_status"] == "eq.approved"
    assert params["or"] == "(topic.ilike.*beijo*,plain_explanation.ilike.*beijo*)"
    assert params["limit"] == "10"
    assert entries[0].country_name == "Brasil"


def test_hybrid_search_calls_rpc_function() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=[{**ROW, "countries": [{"name": "Brasil"}]}])

    entries = _store(handler).hybrid_search("beijo publico", "BR", None, 5)

    request = captured[0]
    assert request.method == "POST"
    assert request.url.path == "/rest/v1/rpc/search_entries_hybrid"
    assert json.loads(request.content) == {
        "search_query": "beijo publico",
        "country_filter": "BR",
        "category_filter": None,
        "result_limit": 5,
    }
    assert entries[0].country_name == "Brasil"


def test_http_errors_become_store_errors() -> None:
    store = _store(lambda request: httpx.Response(500, json={"message": "boom"}))

    with pytest.raises(StoreError):
        store.list_entries("BR")


def test_unexpected_payload_becomes_store_error() -> None:
    store = _store(lambda request: httpx.Response(200, json={"rows": []}))

    with pytest.raises(StoreError):
        store.hybrid_search(None, None, None, 5)


def test_invalid_rows_are_skipped_without_dropping_the_batch(caplog) -> None:
    rows = [
        ROW,
        {**ROW, "id": "a2", "plain_explanation": ""},
        {**ROW, "id": "a3", "status": "blue"},
    ]
    store = _store(lambda request: httpx.Response(200, json=rows))

    with caplog.at_level(logging.WARNING, logger="cartilha_app.store.supabase"):
        entries = store.list_entries("BR")

    assert [entry.id for entry in entries] == ["a1"]
    assert "Entrada inválida recebida do Supabase" in caplog.text


def test_similarity_check_survives_one_bad_row() -> None:
    rows = [ROW, {**ROW, "id": "a2", "plain_explanation": ""}]
    store = _store(lambda request: httpx.Response(200, json=rows))
    draft = EntryDraft(country_code="BR", category_id=2, topic="Beijo em publico")

    report = check_similarity(draft, lookup=store)

    assert [candidate.id for candidate in report.similar] == ["a1"]


def test_list_standard_topics_parses_keywords() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=[
                {"topic_name": "Beijo em público", "category_id": 3, "keywords": None},
                {"topic_name": "Consumo de álcool", "category_id": 2, "keywords": ["alcool"]},
            ],
        )

    topics = _store(handler).list_standard_topics()

    assert topics[0].keywords == []
    assert topics[1].keywords == ["alcool"]
