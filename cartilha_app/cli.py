"""CLI entrypoints for cartilha_app."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from cartilha_app.config import load_settings
from cartilha_app.core.duplicates import DuplicateThresholds, check_similarity
from cartilha_app.core.schemas import ChatContext, EntryDraft
from cartilha_app.logging_setup import configure_logging
from cartilha_app.rag.pipeline import perform_rag
from cartilha_app.rag.retrieval import HybridRetriever
from cartilha_app.store.base import EntryStore
from cartilha_app.store.factory import resolve_store
from cartilha_app.store.memory import InMemoryEntryStore

app = typer.Typer(help="cartilha_app CLI")
DRAFT_OPTION = typer.Option(..., "--input", exists=True, dir_okay=False)
ENTRIES_OPTION = typer.Option(None, "--entries", exists=True, dir_okay=False)
MESSAGE_OPTION = typer.Option(..., "--message")
COUNTRY_OPTION = typer.Option(None, "--country")
COUNTRY_NAME_OPTION = typer.Option(None, "--country-name")


def _load_store(entries_path: Path | None) -> EntryStore:
    if entries_path is not None:
        return InMemoryEntryStore.from_json_file(entries_path)
    return resolve_store(load_settings())


@app.command("check-similarity")
def check_similarity_command(
    input_path: Path = DRAFT_OPTION,
    entries_path: Path | None = ENTRIES_OPTION,
) -> None:
    """Lista entradas existentes parecidas com o rascunho informado."""

    settings = load_settings()
    configure_logging(settings)
    draft = EntryDraft.model_validate(
        json.loads(input_path.read_text(encoding="utf-8"))
    )
    report = check_similarity(
        draft,
        lookup=_load_store(entries_path),
        thresholds=DuplicateThresholds.from_settings(settings),
    )
    typer.echo(report.model_dump_json(indent=2))


@app.command("prompt")
def prompt_command(
    message: str = MESSAGE_OPTION,
    entries_path: Path | None = ENTRIES_OPTION,
    country: str | None = COUNTRY_OPTION,
    country_name: str | None = COUNTRY_NAME_OPTION,
) -> None:
    """Mostra o prompt que seria enviado ao LLM para a mensagem."""

    settings = load_settings()
    configure_logging(settings)
    retriever = HybridRetriever.from_settings(
        store=_load_store(entries_path),
        settings=settings,
    )
    context = None
    if country or country_name:
        context = ChatContext(country_code=country, country_name=country_name)

    prompt, rag_result = perform_rag(message, retriever=retriever, context=context)
    typer.echo(prompt)
    typer.echo("")
    typer.echo(
        json.dumps(
            {
                "keywords": rag_result.keywords,
                "detected_countries": rag_result.detected_countries,
                "entries": len(rag_result.entries),
            },
            ensure_ascii=False,
        )
    )


if __name__ == "__main__":
    app()
