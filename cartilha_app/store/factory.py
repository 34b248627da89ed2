"""Resolução do store configurado."""

from __future__ import annotations

from cartilha_app.config import AppSettings
from cartilha_app.store.base import EntryStore
from cartilha_app.store.memory import InMemoryEntryStore
from cartilha_app.store.supabase import SupabaseEntryStore


def resolve_store(settings: AppSettings) -> EntryStore:
    if settings.STORE_BACKEND == "supabase":
        return SupabaseEntryStore.from_settings(settings)

    if settings.SEED_ENTRIES_PATH:
        return InMemoryEntryStore.from_json_file(settings.SEED_ENTRIES_PATH)
    return InMemoryEntryStore()
