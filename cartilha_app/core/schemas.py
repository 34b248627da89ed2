"""Schemas do domínio de cartilhas (entradas, similaridade e RAG)."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

LegalStatus = Literal["green", "yellow", "red"]
ModerationStatus = Literal["pending", "approved", "rejected"]

STATUS_LABELS: dict[str, str] = {
    "green": "Permitido",
    "yellow": "Restrições",
    "red": "Proibido",
}

STATUS_ICONS: dict[str, str] = {
    "green": "✅",
    "yellow": "⚠️",
    "red": "🚫",
}


class LegalEntry(BaseModel):
    """Registro (país, categoria, tópico) com o status legal."""

    id: str | None = None
    country_code: str = Field(min_length=2, max_length=2)
    category_id: int = 0
    topic: str = Field(min_length=1)
    status: LegalStatus
    legal_basis: str = ""
    plain_explanation: str = Field(min_length=1)
    cultural_note: str | None = None
    moderation_status: ModerationStatus | None = None
    country_name: str | None = Field(
        default=None,
        description="Nome de exibição do país, achatado na borda do store",
    )

    @field_validator("id", mode="before")
    def _coerce_id(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("country_code", mode="before")
    def _normalize_country_code(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("legal_basis", mode="before")
    def _default_legal_basis(cls, value: object) -> object:
        return "" if value is None else value

    @property
    def display_country(self) -> str:
        return self.country_name or self.country_code


class EntryDraft(BaseModel):
    """Valores parciais do formulário de criação de entrada.

    Todos os campos são tolerantes: a pontuação de similaridade precisa rodar
    mesmo com o formulário incompleto.
    """

    country_code: str = ""
    category_id: int | None = None
    topic: str = ""
    status: str | None = None
    legal_basis: str = ""
    plain_explanation: str = ""
    cultural_note: str | None = None
    sequence: int | None = Field(
        default=None,
        description="Número de sequência do chamador, devolvido no relatório",
    )

    @field_validator("country_code", mode="before")
    def _normalize_country_code(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("category_id", mode="before")
    def _unset_category(cls, value: object) -> object:
        # O formulário começa com categoria 0: equivale a "todas as categorias".
        return value or None

    @field_validator("topic", "legal_basis", "plain_explanation", mode="before")
    def _empty_text(cls, value: object) -> object:
        return "" if value is None else value


class SimilarityCandidate(BaseModel):
    """Entrada existente que pode ser a mesma que está sendo criada."""

    id: str | None
    topic: str
    status: str
    legal_basis: str
    plain_explanation: str
    cultural_note: str | None = None
    score: int = Field(ge=0, le=100)
    reason: str


class SimilarityReport(BaseModel):
    similar: list[SimilarityCandidate]
    has_similar: bool
    sequence: int | None = None


class StandardTopic(BaseModel):
    topic_name: str
    category_id: int
    description: str | None = None
    keywords: list[str] = Field(default_factory=list)

    @field_validator("keywords", mode="before")
    def _empty_keywords(cls, value: object) -> object:
        return [] if value is None else value


class TopicSuggestion(BaseModel):
    topic: str | None = None
    category: int | None = None


class ValidationReport(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    suggestions: TopicSuggestion = Field(default_factory=TopicSuggestion)


class ChatContext(BaseModel):
    """País que o usuário está visualizando no momento."""

    country_code: str | None = None
    country_name: str | None = None


class RAGResult(BaseModel):
    entries: list[LegalEntry]
    keywords: list[str]
    detected_countries: list[str]


class ChatRequest(BaseModel):
    message: str = Field(min_length=1, description="Mensagem do usuário")
    context: ChatContext | None = None


class ChatSource(BaseModel):
    country_code: str
    topic: str
    status: str


class ChatResponse(BaseModel):
    message: str
    sources: list[ChatSource] = Field(default_factory=list)
