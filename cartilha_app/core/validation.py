"""Validação de entradas e sugestão de tópicos padronizados."""

from __future__ import annotations

import logging
import re
from typing import Any

from cartilha_app.core.schemas import (
    EntryDraft,
    LegalEntry,
    StandardTopic,
    TopicSuggestion,
    ValidationReport,
)
from cartilha_app.store.base import StandardTopicLookup, StoreError

logger = logging.getLogger(__name__)

VALID_STATUSES = ("green", "yellow", "red")

BLOCKED_WORDS = ("spam", "test123", "asdf", "xxx", "fake")

PLACEHOLDER_TOPIC = re.compile(r"^(test|teste|exemplo|sample|lorem)", re.IGNORECASE)

MIN_TOPIC_CHARS = 3
MAX_TOPIC_CHARS = 100
MIN_LEGAL_BASIS_CHARS = 5
MIN_EXPLANATION_CHARS = 20
MAX_EXPLANATION_CHARS = 1000

PARTIAL_NAME_POINTS = 5
KEYWORD_POINTS = 2
MIN_SUGGESTION_SCORE = 3


def parse_legal_entry(data: dict[str, Any]) -> LegalEntry:
    """Converte um payload em ``LegalEntry``; status inválido levanta erro."""

    return LegalEntry.model_validate(data)


def validate_entry_fields(draft: EntryDraft) -> tuple[list[str], list[str]]:
    errors: list[str] = []
    warnings: list[str] = []

    if len(draft.country_code) != 2:
        errors.append("País inválido")
    if not draft.category_id or draft.category_id < 1:
        errors.append("Categoria obrigatória")
    if len(draft.topic.strip()) < MIN_TOPIC_CHARS:
        errors.append(f"Tópico deve ter pelo menos {MIN_TOPIC_CHARS} caracteres")
    if draft.status not in VALID_STATUSES:
        errors.append("Status inválido")
    if len(draft.legal_basis.strip()) < MIN_LEGAL_BASIS_CHARS:
        errors.append(
            f"Base legal deve ter pelo menos {MIN_LEGAL_BASIS_CHARS} caracteres"
        )
    if len(draft.plain_explanation.strip()) < MIN_EXPLANATION_CHARS:
        errors.append(
            f"Explicação deve ter pelo menos {MIN_EXPLANATION_CHARS} caracteres"
        )

    if len(draft.topic) > MAX_TOPIC_CHARS:
        warnings.append("Tópico muito longo, considere resumir")
    if len(draft.plain_explanation) > MAX_EXPLANATION_CHARS:
        warnings.append("Explicação muito longa, considere resumir")

    all_text = f"{draft.topic} {draft.legal_basis} {draft.plain_explanation}".lower()
    for word in BLOCKED_WORDS:
        if word in all_text:
            errors.append(f"Conteúdo contém palavra bloqueada: {word}")

    if PLACEHOLDER_TOPIC.match(draft.topic):
        warnings.append("Tópico parece ser um placeholder")

    return errors, warnings


def _best_standard_topic(
    topic: str,
    standard_topics: list[StandardTopic],
) -> TopicSuggestion:
    normalized = topic.strip().lower()

    best_match: StandardTopic | None = None
    best_score = 0
    for standard in standard_topics:
        name = standard.topic_name.lower()
        if name == normalized:
            return TopicSuggestion(
                topic=standard.topic_name,
                category=standard.category_id,
            )

        score = 0
        if name in normalized or normalized in name:
            score += PARTIAL_NAME_POINTS
        for keyword in standard.keywords:
            if keyword.lower() in normalized:
                score += KEYWORD_POINTS

        if score > best_score:
            best_score = score
            best_match = standard

    if best_match is not None and best_score >= MIN_SUGGESTION_SCORE:
        return TopicSuggestion(
            topic=best_match.topic_name,
            category=best_match.category_id,
        )
    return TopicSuggestion()


def suggest_standard_topic(
    topic: str,
    lookup: StandardTopicLookup,
    category_id: int | None = None,
) -> TopicSuggestion:
    try:
        standard_topics = lookup.list_standard_topics(category_id=category_id)
    except StoreError as exc:
        logger.warning("Falha ao buscar tópicos padronizados: %s", exc)
        return TopicSuggestion()
    return _best_standard_topic(topic, standard_topics)


def validate_entry(
    draft: EntryDraft,
    lookup: StandardTopicLookup | None = None,
) -> ValidationReport:
    """Valida campos do rascunho e sugere um tópico padronizado."""

    errors, warnings = validate_entry_fields(draft)
    suggestions = TopicSuggestion()
    if lookup is not None and len(draft.topic) >= MIN_TOPIC_CHARS:
        suggestions = suggest_standard_topic(
            draft.topic,
            lookup=lookup,
            category_id=draft.category_id,
        )

    return ValidationReport(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        suggestions=suggestions,
    )
