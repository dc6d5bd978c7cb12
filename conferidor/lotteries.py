"""
Supported Caixa lottery variants and name resolution.
"""

import unicodedata
from typing import Dict, List, Optional

LOTTERIES: Dict[str, str] = {
    "megasena": "Mega-Sena",
    "lotofacil": "Lotofácil",
    "quina": "Quina",
    "lotomania": "Lotomania",
    "timemania": "Timemania",
    "duplasena": "Dupla Sena",
    "federal": "Federal",
    "loteca": "Loteca",
    "diadesorte": "Dia de Sorte",
    "supersete": "Super Sete",
}

LOTTERY_ALIASES: Dict[str, str] = {
    "mega": "megasena",
    "megadavirada": "megasena",
    "loto": "lotofacil",
    "dupla": "duplasena",
    "loteriafederal": "federal",
    "dia": "diadesorte",
    "super7": "supersete",
}


def _normalize_key(value: str) -> str:
    normalized = unicodedata.normalize("NFKD", value)
    ascii_only = normalized.encode("ascii", "ignore").decode("ascii")
    return "".join(ch for ch in ascii_only.lower() if ch.isalnum())


def resolve_lottery_key(name: Optional[str]) -> Optional[str]:
    """
    Resolve a free-text lottery name to the key used by the Caixa API.

    Accents, case, spaces and hyphens are ignored, so "Mega-Sena",
    "mega sena" and "MEGASENA" all resolve to "megasena".

    Returns:
        Canonical key, or None when the name is empty or unknown
    """
    if not name:
        return None
    key = _normalize_key(name)
    key = LOTTERY_ALIASES.get(key, key)
    return key if key in LOTTERIES else None


def display_name(key: str) -> str:
    return LOTTERIES.get(key, key)


def supported_lotteries() -> List[str]:
    return sorted(LOTTERIES)
