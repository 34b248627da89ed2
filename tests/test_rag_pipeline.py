from cartilha_app.core.schemas import ChatContext, LegalEntry
from cartilha_app.rag.pipeline import perform_rag
from cartilha_app.rag.retrieval import HybridRetriever
from cartilha_app.store.memory import InMemoryEntryStore

ENTRIES = [
    LegalEntry(
        id="jp-1",
        country_code="JP",
        topic="Consumo de álcool na rua",
        status="green",
        legal_basis="Sem proibição nacional",
        plain_explanation="Beber na rua é permitido na maior parte das cidades.",
    ),
    LegalEntry(
        id="br-1",
        country_code="BR",
        topic="Beijo em público",
        status="yellow",
        legal_basis="Código Penal art. 233",
        plain_explanation="Tolerado mas pode gerar multa",
    ),
    LegalEntry(
        id="br-2",
        country_code="BR",
        topic="Consumo de álcool na rua",
        status="yellow",
        plain_explanation="Proibido em alguns municípios",
        moderation_status="pending",
    ),
]


def _retriever() -> HybridRetriever:
    store = InMemoryEntryStore(
        entries=ENTRIES,
        country_names={"JP": "Japão", "BR": "Brasil"},
    )
    return HybridRetriever(store=store)


def test_perform_rag_detects_country_and_retrieves_entries() -> None:
    prompt, result = perform_rag("Posso beber álcool na rua no Japão?", _retriever())

    assert result.detected_countries == ["JP"]
    assert result.keywords == ["beber", "alcool", "rua", "japao"]
    assert [entry.id for entry in result.entries] == ["jp-1"]
    assert "Consumo de álcool na rua (Japão): Permitido." in prompt


def test_perform_rag_uses_browsing_context_country() -> None:
    context = ChatContext(country_code="BR", country_name="Brasil")

    prompt, result = perform_rag("Posso beber álcool na rua?", _retriever(), context)

    assert result.detected_countries == []
    assert [entry.id for entry in result.entries] == []
    assert "Não foram encontrados dados específicos" in prompt
    assert "visualizando informações sobre Brasil" in prompt


def test_perform_rag_without_matches_still_builds_prompt() -> None:
    prompt, result = perform_rag("que para com uma sobre", _retriever())

    assert result.keywords == []
    assert "Pergunta do usuário: que para com uma sobre" in prompt
