"""Turno de chat: RAG, chamada ao LLM e resposta com fontes."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Protocol
from uuid import uuid4

import httpx

from cartilha_app.audit import append_audit_event
from cartilha_app.chat.llm_gateway import LLMOutput, OpenRouterLLMGateway
from cartilha_app.chat.rate_limit import RateLimiter, resolve_rate_limiter
from cartilha_app.config import AppSettings
from cartilha_app.core.schemas import (
    STATUS_ICONS,
    ChatRequest,
    ChatResponse,
    ChatSource,
    LegalEntry,
    RAGResult,
)
from cartilha_app.rag.pipeline import perform_rag
from cartilha_app.rag.prompt import USER_MESSAGE_LABEL, status_label
from cartilha_app.rag.retrieval import HybridRetriever, RetrievalStore

logger = logging.getLogger(__name__)

DISCLAIMER = "⚠️ *Esta é uma informação educacional e não constitui aconselhamento jurídico.*"
RATE_LIMIT_MESSAGE = "Muitas requisições. Aguarde um momento."
EMPTY_ANSWER_FALLBACK = (
    "Olá! 😊 Como posso ajudar você hoje? "
    "Pergunte sobre leis e direitos em qualquer país!"
)
MAX_LISTED_ENTRIES = 3

_INSTRUCTION_TAGS = re.compile(r"\[/?INST\]")
_SYSTEM_BLOCK = re.compile(r"<<SYS>>.*?<</SYS>>", re.DOTALL)
_LEAKED_QUESTION = re.compile(rf"{re.escape(USER_MESSAGE_LABEL)}.*", re.DOTALL)


class LLMGateway(Protocol):
    def generate(self, prompt: str) -> LLMOutput:
        """Gera a resposta final a partir do prompt completo."""


class RateLimitExceeded(Exception):
    """Cliente excedeu o número de requisições da janela."""


def _resolve_gateway(settings: AppSettings) -> LLMGateway | None:
    if not settings.OPENROUTER_API_KEY:
        return None
    return OpenRouterLLMGateway(
        api_key=settings.OPENROUTER_API_KEY,
        model=settings.OPENROUTER_MODEL,
        base_url=settings.OPENROUTER_BASE_URL,
        timeout_s=settings.OPENROUTER_TIMEOUT_SECONDS,
        max_tokens=settings.LLM_MAX_TOKENS,
        temperature=settings.LLM_TEMPERATURE,
    )


def clean_llm_answer(text: str) -> str:
    """Remove marcadores de instrução e trechos do prompt que vazaram."""

    cleaned = _INSTRUCTION_TAGS.sub("", text)
    cleaned = _SYSTEM_BLOCK.sub("", cleaned)
    cleaned = _LEAKED_QUESTION.sub("", cleaned).strip()
    if len(cleaned) < 5:
        return EMPTY_ANSWER_FALLBACK
    return cleaned


def build_sources(entries: Sequence[LegalEntry]) -> list[ChatSource]:
    return [
        ChatSource(country_code=entry.country_code, topic=entry.topic, status=entry.status)
        for entry in entries
    ]


def _entry_summary(entry: LegalEntry) -> str:
    icon = STATUS_ICONS.get(entry.status, "")
    return (
        f"**{entry.topic}** ({entry.display_country}): "
        f"{icon} {status_label(entry.status)}\n{entry.plain_explanation}"
    )


def build_offline_answer(message: str, rag_result: RAGResult) -> str:
    """Resposta montada apenas com os dados recuperados, sem LLM."""

    if not rag_result.entries:
        if rag_result.detected_countries:
            countries = ", ".join(rag_result.detected_countries)
            return (
                f"Encontrei o país {countries} na sua pergunta, mas não encontrei "
                "dados sobre esse tema. Tente explorar o país diretamente no app."
            )
        return (
            f'Não encontrei informações específicas sobre "{message}". '
            "Tente explorar os países diretamente no app para encontrar o que procura."
        )

    summaries = [_entry_summary(entry) for entry in rag_result.entries[:MAX_LISTED_ENTRIES]]
    return "Com base nos dados disponíveis:\n\n" + "\n\n".join(summaries) + f"\n\n{DISCLAIMER}"


def build_degraded_answer(rag_result: RAGResult) -> str:
    if not rag_result.entries:
        return "Não foi possível consultar o assistente agora. Explore os países diretamente no app."

    entry = rag_result.entries[0]
    return (
        f"**{entry.topic}** em **{entry.display_country}**: "
        f"{status_label(entry.status)}.\n\n{entry.plain_explanation}\n\n"
        "⚠️ *Informação educacional.*"
    )


class ChatService:
    """Serviço do assistente de chat com RAG."""

    def __init__(
        self,
        settings: AppSettings,
        store: RetrievalStore,
        gateway: LLMGateway | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self._settings = settings
        self._retriever = HybridRetriever.from_settings(store=store, settings=settings)
        self._gateway = gateway if gateway is not None else _resolve_gateway(settings)
        self._rate_limiter = rate_limiter or resolve_rate_limiter(settings)

    def chat(self, request: ChatRequest, client_key: str = "unknown") -> ChatResponse:
        trace_id = str(uuid4())

        if not self._rate_limiter.check(client_key):
            append_audit_event(
                audit_file=self._settings.AUDIT_LOG_PATH,
                event="chat_rate_limited",
                trace_id=trace_id,
            )
            raise RateLimitExceeded(RATE_LIMIT_MESSAGE)

        prompt, rag_result = perform_rag(
            request.message,
            retriever=self._retriever,
            context=request.context,
        )
        logger.debug(
            "RAG trace_id=%s keywords=%s countries=%s entries=%s",
            trace_id,
            rag_result.keywords,
            rag_result.detected_countries,
            len(rag_result.entries),
        )
        sources = build_sources(rag_result.entries)

        if self._gateway is None:
            answer = build_offline_answer(request.message, rag_result)
            event = "chat_completed_offline"
        else:
            try:
                output = self._gateway.generate(prompt)
                answer = clean_llm_answer(output.text)
                event = "chat_completed"
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("Falha na chamada ao LLM (trace_id=%s): %s", trace_id, exc)
                answer = build_degraded_answer(rag_result)
                event = "chat_llm_fallback"

        append_audit_event(
            audit_file=self._settings.AUDIT_LOG_PATH,
            event=event,
            trace_id=trace_id,
            entries=len(rag_result.entries),
        )
        return ChatResponse(message=answer, sources=sources)
