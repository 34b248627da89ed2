import pytest

from cartilha_app.core.similarity import (
    REASON_CONTAINED,
    REASON_IDENTICAL,
    REASON_SHARED_WORDS,
    REASON_SPELLING,
    classify_topics,
    jaccard_similarity,
    levenshtein_similarity,
)
from cartilha_app.core.text import normalize

SAMPLES = [
    "Não é permitido beijar em público!",
    "Consumo de álcool — proibido (art. 12, §3º).",
    "ÇÃO ção Ação",
    "a b c de",
    "",
    "Maconha recreativa: 50g por pessoa",
]


def test_normalize_strips_accents_punctuation_and_short_tokens() -> None:
    assert normalize("Não é permitido, beijar em público!") == [
        "nao",
        "permitido",
        "beijar",
        "publico",
    ]


@pytest.mark.parametrize("text", SAMPLES)
def test_normalize_is_idempotent(text: str) -> None:
    tokens = normalize(text)

    assert normalize(" ".join(tokens)) == tokens


def test_jaccard_counts_shared_tokens() -> None:
    assert jaccard_similarity("cannabis recreativa", "cannabis medicinal") == pytest.approx(1 / 3)


def test_jaccard_ignores_accents_and_case() -> None:
    assert jaccard_similarity("Beijo em PÚBLICO", "beijo publico") == 1.0


def test_jaccard_empty_union_is_zero() -> None:
    assert jaccard_similarity("", "") == 0.0
    assert jaccard_similarity("a b", "de") == 0.0


def test_jaccard_of_identical_whitespace_is_one() -> None:
    assert jaccard_similarity(" ", " ") == 1.0


def test_levenshtein_known_distance() -> None:
    assert levenshtein_similarity("kitten", "sitting") == pytest.approx(1 - 3 / 7)


def test_levenshtein_single_accent_edit() -> None:
    assert levenshtein_similarity("Beijo em público", "beijo em publico") == pytest.approx(1 - 1 / 16)


def test_levenshtein_edge_cases() -> None:
    assert levenshtein_similarity("ABC", "abc") == 1.0
    assert levenshtein_similarity("", "") == 1.0
    assert levenshtein_similarity("abc", "") == 0.0


@pytest.mark.parametrize("text", [value for value in SAMPLES if value.strip()])
def test_similarity_identity(text: str) -> None:
    assert jaccard_similarity(text, text) == 1.0
    assert levenshtein_similarity(text, text) == 1.0


@pytest.mark.parametrize(
    ("text_a", "text_b"),
    [
        ("Beijo em público", "Beijo em publico"),
        ("Maconha recreativa", "Aborto"),
        ("venda de alcool na rua", "alcool na rua proibido venda"),
        ("", "qualquer coisa"),
    ],
)
def test_similarity_is_symmetric(text_a: str, text_b: str) -> None:
    assert jaccard_similarity(text_a, text_b) == jaccard_similarity(text_b, text_a)
    assert levenshtein_similarity(text_a, text_b) == levenshtein_similarity(text_b, text_a)


def test_classify_identical_topic_after_trim_and_lower() -> None:
    result = classify_topics("Beijo em público", "  beijo em PÚBLICO ")

    assert result.score == 1.0
    assert result.reason == REASON_IDENTICAL


def test_classify_contained_topic() -> None:
    result = classify_topics("Aborto", "Aborto legal")

    assert result.score == 0.9
    assert result.reason == REASON_CONTAINED


def test_classify_spelling_variant_prefers_levenshtein() -> None:
    result = classify_topics("Beijo em público", "Beijo em publico")

    assert result.score == pytest.approx(15 / 16)
    assert result.reason == REASON_SPELLING


def test_classify_shared_words() -> None:
    result = classify_topics("venda de alcool na rua", "alcool na rua proibido venda")

    assert result.score == pytest.approx(0.75)
    assert result.reason == REASON_SHARED_WORDS


def test_classify_unrelated_topics_have_empty_reason() -> None:
    result = classify_topics("Maconha recreativa", "Aborto")

    assert result.reason == ""
    assert 0.0 <= result.score < 0.4
