"""FastAPI app entrypoint."""

from __future__ import annotations

from collections import Counter
from typing import Any

from fastapi import FastAPI, HTTPException, Request

from cartilha_app.admin.service import AdminService
from cartilha_app.audit import parse_audit_events
from cartilha_app.chat.service import ChatService, RateLimitExceeded
from cartilha_app.config import load_settings
from cartilha_app.core.schemas import (
    ChatRequest,
    ChatResponse,
    EntryDraft,
    SimilarityReport,
    ValidationReport,
)
from cartilha_app.logging_setup import configure_logging
from cartilha_app.store.factory import resolve_store

settings = load_settings()
configure_logging(settings)
store = resolve_store(settings)
admin_service = AdminService(settings=settings, store=store)
chat_service = ChatService(settings=settings, store=store)

app = FastAPI(title=settings.PROJECT_NAME)


def _client_key(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client is not None:
        return request.client.host
    return "unknown"


@app.get("/health")
def health() -> dict[str, str]:
    """Simple health check."""
    return {"status": "ok"}


@app.get("/admin/metrics")
def admin_metrics() -> dict[str, Any]:
    """Contagem de eventos da trilha de auditoria."""
    events = parse_audit_events(settings.AUDIT_LOG_PATH)
    event_counter = Counter(item.get("event", "desconhecido") for item in events)
    return {
        "total_eventos": len(events),
        "eventos_por_tipo": dict(event_counter),
    }


@app.post("/api/admin/check-similarity", response_model=SimilarityReport)
def check_similarity(payload: EntryDraft) -> SimilarityReport:
    """Lista entradas existentes parecidas com o rascunho em edição."""
    try:
        return admin_service.check_similarity(payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/api/admin/validate-entry", response_model=ValidationReport)
def validate_entry(payload: EntryDraft) -> ValidationReport:
    """Valida campos e sugere tópico padronizado."""
    return admin_service.validate_entry(payload)


@app.post("/api/chat", response_model=ChatResponse)
def chat(payload: ChatRequest, request: Request) -> ChatResponse:
    """Responde perguntas sobre leis com base nas entradas recuperadas."""
    try:
        return chat_service.chat(payload, client_key=_client_key(request))
    except RateLimitExceeded as exc:
        raise HTTPException(status_code=429, detail=str(exc)) from exc
