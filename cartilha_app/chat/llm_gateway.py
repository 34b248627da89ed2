"""Gateway para o provedor de LLM (OpenRouter, API compatível com OpenAI)."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import httpx

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


@dataclass(frozen=True)
class LLMOutput:
    text: str
    provider: str
    model: str


def _request_with_retries(
    *,
    client: httpx.Client,
    url: str,
    headers: dict[str, str],
    payload: dict[str, Any],
    max_attempts: int = 3,
    initial_backoff_s: float = 0.4,
) -> dict[str, Any]:
    last_error: Exception | None = None

    for attempt in range(1, max_attempts + 1):
        try:
            response = client.post(url, headers=headers, json=payload)
            response.raise_for_status()
            return response.json()
        except (
            httpx.TimeoutException,
            httpx.NetworkError,
            httpx.HTTPStatusError,
        ) as exc:
            should_retry = attempt < max_attempts
            if isinstance(exc, httpx.HTTPStatusError):
                status = exc.response.status_code
                should_retry = should_retry and status in RETRYABLE_STATUS
            if not should_retry:
                raise

            backoff_s = initial_backoff_s * (2 ** (attempt - 1))
            time.sleep(backoff_s)
            last_error = exc

    if last_error is not None:
        raise last_error
    raise RuntimeError("Falha inesperada de requisição HTTP.")


class OpenRouterLLMGateway:
    """Envia o prompt montado como uma única mensagem de usuário."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "https://openrouter.ai/api/v1",
        timeout_s: float = 30.0,
        max_tokens: int = 512,
        temperature: float = 0.7,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._max_tokens = max_tokens
        self._temperature = temperature

    def _send_request(self, payload: dict[str, Any]) -> dict[str, Any]:
        with httpx.Client(timeout=self._timeout_s) as client:
            return _request_with_retries(
                client=client,
                url=f"{self._base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                payload=payload,
            )

    def generate(self, prompt: str) -> LLMOutput:
        payload: dict[str, Any] = {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        data = self._send_request(payload=payload)

        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise ValueError("Resposta do OpenRouter sem choices.")

        first_choice = choices[0] if isinstance(choices[0], dict) else {}
        message = first_choice.get("message") or {}
        answer_text = str(message.get("content") or "").strip()
        if not answer_text:
            raise ValueError("Resposta do OpenRouter sem conteúdo.")

        return LLMOutput(text=answer_text, provider="openrouter", model=self._model)
