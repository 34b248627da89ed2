"""Detecção de países mencionados em mensagens do chat."""

from __future__ import annotations

import re

COUNTRY_ALIASES: dict[str, str] = {
    "brasil": "BR",
    "brazil": "BR",
    "brasileiro": "BR",
    "brasileira": "BR",
    "estados unidos": "US",
    "eua": "US",
    "americano": "US",
    "americana": "US",
    "alemanha": "DE",
    "germany": "DE",
    "alemão": "DE",
    "alemã": "DE",
    "japão": "JP",
    "japao": "JP",
    "japan": "JP",
    "japonês": "JP",
    "japonesa": "JP",
    "emirados": "AE",
    "dubai": "AE",
    "árabe": "AE",
    "portugal": "PT",
    "português": "PT",
    "portuguesa": "PT",
    "frança": "FR",
    "france": "FR",
    "francês": "FR",
    "argentina": "AR",
    "argentino": "AR",
    "holanda": "NL",
    "países baixos": "NL",
    "holandês": "NL",
    "canadá": "CA",
    "canada": "CA",
    "canadense": "CA",
    "singapura": "SG",
    "singapore": "SG",
}

_COUNTRY_CODE_TOKEN = re.compile(r"\b[A-Z]{2}\b")


def detect_countries(message: str) -> list[str]:
    """Códigos de país citados na mensagem, sem repetição.

    Aliases são buscados como substring da mensagem em minúsculas; códigos de
    duas letras maiúsculas isolados são aceitos como citados literalmente.
    """

    lowered = message.lower()
    detected: list[str] = []
    for alias, code in COUNTRY_ALIASES.items():
        if alias in lowered and code not in detected:
            detected.append(code)

    for code in _COUNTRY_CODE_TOKEN.findall(message):
        if code not in detected:
            detected.append(code)

    return detected
