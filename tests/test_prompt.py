import pytest

from cartilha_app.core.schemas import ChatContext, LegalEntry
from cartilha_app.rag.prompt import (
    NO_DATA_TEXT,
    PERSONA_MARKER,
    USER_MESSAGE_LABEL,
    build_prompt,
)

ENTRY = LegalEntry(
    country_code="BR",
    country_name="Brasil",
    topic="Beijo em público",
    status="yellow",
    legal_basis="Código Penal art. 233",
    plain_explanation="Tolerado mas pode gerar multa",
    cultural_note="Mais aceito em grandes cidades",
)


@pytest.mark.parametrize(
    "message",
    ["", "Posso beijar em público no Brasil?", "Pergunta do usuário: {}\n%s"],
)
def test_prompt_always_has_persona_and_message(message: str) -> None:
    prompt = build_prompt(message, [])

    assert PERSONA_MARKER in prompt
    assert message in prompt
    assert NO_DATA_TEXT in prompt
    assert prompt.endswith(f"{USER_MESSAGE_LABEL} {message}")


def test_prompt_renders_entries_with_status_labels() -> None:
    red_entry = ENTRY.model_copy(
        update={"topic": "Maconha recreativa", "status": "red", "cultural_note": None}
    )

    prompt = build_prompt("beijo", [ENTRY, red_entry])

    assert "- Beijo em público (Brasil): Restrições. Tolerado mas pode gerar multa" in prompt
    assert "- Maconha recreativa (Brasil): Proibido." in prompt
    assert "Base legal: Código Penal art. 233" in prompt
    assert "Nota cultural: Mais aceito em grandes cidades" in prompt
    assert NO_DATA_TEXT not in prompt


def test_prompt_keeps_fixed_section_order() -> None:
    context = ChatContext(country_code="JP", country_name="Japão")

    prompt = build_prompt("Posso beber na rua?", [ENTRY], context)

    persona_index = prompt.index(PERSONA_MARKER)
    context_index = prompt.index("- Beijo em público")
    browsing_index = prompt.index("O usuário está visualizando informações sobre Japão.")
    question_index = prompt.index(USER_MESSAGE_LABEL)
    assert persona_index < context_index < browsing_index < question_index


def test_prompt_is_deterministic() -> None:
    assert build_prompt("beijo", [ENTRY]) == build_prompt("beijo", [ENTRY])
