"""Pipeline RAG completo de um turno de chat."""

from __future__ import annotations

from cartilha_app.core.schemas import ChatContext, RAGResult
from cartilha_app.rag.countries import detect_countries
from cartilha_app.rag.keywords import extract_keywords
from cartilha_app.rag.prompt import build_prompt
from cartilha_app.rag.retrieval import HybridRetriever


def perform_rag(
    message: str,
    retriever: HybridRetriever,
    context: ChatContext | None = None,
) -> tuple[str, RAGResult]:
    keywords = extract_keywords(message)
    detected_countries = detect_countries(message)

    entries = retriever.retrieve(
        keywords,
        explicit_country=context.country_code if context else None,
        detected_countries=detected_countries,
    )
    prompt = build_prompt(message, entries, context)

    return prompt, RAGResult(
        entries=entries,
        keywords=keywords,
        detected_countries=detected_countries,
    )
