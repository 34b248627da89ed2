"""Operações consultivas do painel administrativo de entradas."""

from __future__ import annotations

from typing import Protocol
from uuid import uuid4

from cartilha_app.audit import append_audit_event
from cartilha_app.config import AppSettings
from cartilha_app.core.duplicates import DuplicateThresholds, check_similarity
from cartilha_app.core.schemas import EntryDraft, SimilarityReport, ValidationReport
from cartilha_app.core.validation import validate_entry
from cartilha_app.store.base import EntryLookup, StandardTopicLookup


class AdminStore(EntryLookup, StandardTopicLookup, Protocol):
    """Store com listagem de entradas e de tópicos padronizados."""


class AdminService:
    def __init__(self, settings: AppSettings, store: AdminStore) -> None:
        self._settings = settings
        self._store = store
        self._thresholds = DuplicateThresholds.from_settings(settings)

    def check_similarity(self, draft: EntryDraft) -> SimilarityReport:
        if not draft.country_code or not draft.topic:
            raise ValueError("País e tópico são obrigatórios")

        report = check_similarity(draft, lookup=self._store, thresholds=self._thresholds)
        append_audit_event(
            audit_file=self._settings.AUDIT_LOG_PATH,
            event="similarity_checked",
            trace_id=str(uuid4()),
            country=draft.country_code,
            candidates=len(report.similar),
        )
        return report

    def validate_entry(self, draft: EntryDraft) -> ValidationReport:
        report = validate_entry(draft, lookup=self._store)
        append_audit_event(
            audit_file=self._settings.AUDIT_LOG_PATH,
            event="entry_validated",
            trace_id=str(uuid4()),
            valid=report.valid,
        )
        return report
