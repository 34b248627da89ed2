"""Medidas de similaridade entre textos e classificação de tópicos."""

from __future__ import annotations

from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein

from cartilha_app.core.text import normalize

REASON_IDENTICAL = "Tópico idêntico"
REASON_CONTAINED = "Tópico contido no outro"
REASON_SPELLING = "Tópicos muito similares (escrita)"
REASON_SHARED_WORDS = "Tópicos com palavras em comum"

CONTAINED_SCORE = 0.9
SPELLING_THRESHOLD = 0.8
SHARED_WORDS_THRESHOLD = 0.5


@dataclass(frozen=True)
class TopicSimilarity:
    score: float
    reason: str


def jaccard_similarity(text_a: str, text_b: str) -> float:
    """Razão entre tokens em comum e tokens distintos dos dois textos."""

    if text_a == text_b and text_a:
        return 1.0

    tokens_a = set(normalize(text_a))
    tokens_b = set(normalize(text_b))
    union = tokens_a | tokens_b
    if not union:
        return 0.0
    return len(tokens_a & tokens_b) / len(union)


def levenshtein_similarity(text_a: str, text_b: str) -> float:
    """Distância de edição normalizada: ``1 - distancia / maior_comprimento``."""

    lower_a = text_a.lower()
    lower_b = text_b.lower()
    if lower_a == lower_b:
        return 1.0
    if not lower_a or not lower_b:
        return 0.0

    return Levenshtein.normalized_similarity(lower_a, lower_b)


def classify_topics(topic_a: str, topic_b: str) -> TopicSimilarity:
    """Combina sinais exatos, de contenção, Levenshtein e Jaccard.

    O primeiro critério atendido vence. Quando nenhum critério é atendido o
    motivo fica vazio e cabe ao chamador gerar um rótulo genérico.
    """

    normalized_a = topic_a.strip().lower()
    normalized_b = topic_b.strip().lower()

    if normalized_a == normalized_b:
        return TopicSimilarity(score=1.0, reason=REASON_IDENTICAL)

    if normalized_a in normalized_b or normalized_b in normalized_a:
        return TopicSimilarity(score=CONTAINED_SCORE, reason=REASON_CONTAINED)

    levenshtein = levenshtein_similarity(normalized_a, normalized_b)
    if levenshtein > SPELLING_THRESHOLD:
        return TopicSimilarity(score=levenshtein, reason=REASON_SPELLING)

    jaccard = jaccard_similarity(normalized_a, normalized_b)
    if jaccard > SHARED_WORDS_THRESHOLD:
        return TopicSimilarity(score=jaccard, reason=REASON_SHARED_WORDS)

    return TopicSimilarity(score=max(levenshtein, jaccard), reason="")
