"""Detecção de entradas duplicadas ou quase duplicadas durante o cadastro."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

from cartilha_app.config import AppSettings
from cartilha_app.core.schemas import (
    EntryDraft,
    LegalEntry,
    SimilarityCandidate,
    SimilarityReport,
)
from cartilha_app.core.similarity import classify_topics, jaccard_similarity
from cartilha_app.store.base import EntryLookup, StoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DuplicateThresholds:
    """Constantes calibráveis do detector de duplicatas."""

    topic_prune: float = 0.4
    min_combined: float = 0.35
    topic_weight: float = 0.6
    max_candidates: int = 5

    @property
    def content_weight(self) -> float:
        return 1.0 - self.topic_weight

    @classmethod
    def from_settings(cls, settings: AppSettings) -> DuplicateThresholds:
        return cls(
            topic_prune=settings.SIMILARITY_TOPIC_PRUNE,
            min_combined=settings.SIMILARITY_MIN_COMBINED,
            topic_weight=settings.SIMILARITY_TOPIC_WEIGHT,
            max_candidates=settings.SIMILARITY_MAX_CANDIDATES,
        )


def _content_text(explanation: str | None, legal_basis: str | None) -> str:
    return f"{explanation or ''} {legal_basis or ''}"


def find_similar(
    draft: EntryDraft,
    existing_entries: Iterable[LegalEntry],
    thresholds: DuplicateThresholds | None = None,
) -> list[SimilarityCandidate]:
    """Pontua cada entrada existente contra o rascunho e devolve as melhores.

    ``existing_entries`` já vem filtrado pelo chamador para o mesmo país (e,
    opcionalmente, a mesma categoria).
    """

    limits = thresholds or DuplicateThresholds()
    draft_content = _content_text(draft.plain_explanation, draft.legal_basis)

    candidates: list[SimilarityCandidate] = []
    for entry in existing_entries:
        topic_similarity = classify_topics(draft.topic, entry.topic)
        if topic_similarity.score < limits.topic_prune:
            continue

        entry_content = _content_text(entry.plain_explanation, entry.legal_basis)
        content_similarity = 0.0
        if draft_content.strip() or entry_content.strip():
            content_similarity = jaccard_similarity(draft_content, entry_content)
        combined = (
            topic_similarity.score * limits.topic_weight
            + content_similarity * limits.content_weight
        )
        if combined < limits.min_combined:
            continue

        score = min(100, max(0, math.floor(combined * 100 + 0.5)))
        candidates.append(
            SimilarityCandidate(
                id=entry.id,
                topic=entry.topic,
                status=entry.status,
                legal_basis=entry.legal_basis,
                plain_explanation=entry.plain_explanation,
                cultural_note=entry.cultural_note,
                score=score,
                reason=topic_similarity.reason or f"{score}% similar",
            )
        )

    candidates.sort(key=lambda candidate: candidate.score, reverse=True)
    return candidates[: limits.max_candidates]


def check_similarity(
    draft: EntryDraft,
    lookup: EntryLookup,
    thresholds: DuplicateThresholds | None = None,
) -> SimilarityReport:
    """Busca o escopo do rascunho no store e pontua os candidatos.

    Falhas do store resultam em relatório vazio: a detecção é apenas
    consultiva e nunca bloqueia o salvamento.
    """

    try:
        existing_entries = lookup.list_entries(
            country_code=draft.country_code,
            category_id=draft.category_id,
        )
    except StoreError as exc:
        logger.warning(
            "Falha ao buscar entradas para similaridade (%s): %s",
            draft.country_code,
            exc,
        )
        existing_entries = []

    similar = find_similar(draft, existing_entries, thresholds=thresholds)
    return SimilarityReport(
        similar=similar,
        has_similar=bool(similar),
        sequence=draft.sequence,
    )
