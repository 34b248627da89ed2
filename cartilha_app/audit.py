"""Trilha de auditoria de eventos de cadastro e chat."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path


def append_audit_event(audit_file: str, event: str, trace_id: str, **fields: object) -> None:
    timestamp = datetime.now(timezone.utc).isoformat()
    extras = "".join(
        f" {key}={str(value).replace(' ', '_')}" for key, value in fields.items()
    )
    line = f"{timestamp} trace_id={trace_id} event={event}{extras}\n"
    path = Path(audit_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as audit_stream:
        audit_stream.write(line)


def parse_audit_events(audit_file: str) -> list[dict[str, str]]:
    path = Path(audit_file)
    if not path.exists():
        return []

    events: list[dict[str, str]] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        item: dict[str, str] = {"timestamp": parts[0]}
        for part in parts[1:]:
            if "=" not in part:
                continue
            key, value = part.split("=", 1)
            item[key] = value
        events.append(item)
    return events
