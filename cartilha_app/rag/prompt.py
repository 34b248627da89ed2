"""Montagem do prompt enviado ao LLM."""

from __future__ import annotations

from collections.abc import Sequence

from cartilha_app.core.schemas import STATUS_LABELS, ChatContext, LegalEntry

PERSONA_MARKER = (
    "Você é um assistente especializado em informações sobre leis e direitos "
    "em diferentes países."
)

SYSTEM_PROMPT = (
    f"{PERSONA_MARKER}\n"
    "Responda de forma clara, concisa e educativa, sempre em português do Brasil.\n"
    "Use os dados fornecidos como base para suas respostas.\n"
    "Se não tiver informações suficientes, sugira que o usuário explore o app "
    "manualmente.\n"
    "Legenda de status: ✅ Permitido, ⚠️ Restrições, 🚫 Proibido.\n"
    "Sempre mencione que as informações são educacionais e não constituem "
    "aconselhamento jurídico."
)

NO_DATA_TEXT = "Não foram encontrados dados específicos para esta pergunta."
USER_MESSAGE_LABEL = "Pergunta do usuário:"


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, STATUS_LABELS["red"])


def _entry_lines(entry: LegalEntry) -> list[str]:
    lines = [
        f"- {entry.topic} ({entry.display_country}): "
        f"{status_label(entry.status)}. {entry.plain_explanation}"
    ]
    if entry.legal_basis:
        lines.append(f"  Base legal: {entry.legal_basis}")
    if entry.cultural_note:
        lines.append(f"  Nota cultural: {entry.cultural_note}")
    return lines


def build_context_block(
    entries: Sequence[LegalEntry],
    context: ChatContext | None = None,
) -> str:
    if entries:
        lines = ["Dados relevantes encontrados:"]
        for entry in entries:
            lines.extend(_entry_lines(entry))
    else:
        lines = [NO_DATA_TEXT]

    if context is not None and context.country_name:
        lines.append(
            "Contexto: O usuário está visualizando informações sobre "
            f"{context.country_name}."
        )
    return "\n".join(lines)


def build_prompt(
    user_message: str,
    entries: Sequence[LegalEntry],
    context: ChatContext | None = None,
) -> str:
    """Persona fixa, bloco de contexto recuperado e a pergunta, nessa ordem."""

    context_block = build_context_block(entries, context)
    return f"{SYSTEM_PROMPT}\n\n{context_block}\n\n{USER_MESSAGE_LABEL} {user_message}"
