"""
Client for the Caixa "Portal de Loterias" results API.
"""

import time

import requests
from loguru import logger

from conferidor.config import DEFAULT_CAIXA_API_BASE_URL
from conferidor.exceptions import ContestNotFoundError, ResultServiceError
from conferidor.models import OfficialResult

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept": "application/json",
}


class CaixaResultClient:
    """Fetches official draw results for a lottery variant and contest number."""

    def __init__(self, base_url: str = DEFAULT_CAIXA_API_BASE_URL, timeout: int = 15,
                 verify_ssl: bool = False):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.verify_ssl = verify_ssl

    def result_url(self, variant: str, contest: int) -> str:
        return f"{self.base_url}/{variant}/{contest}"

    def fetch_result(self, variant: str, contest: int) -> OfficialResult:
        """
        Fetch the official result of one contest.

        Args:
            variant: Caixa API lottery key, e.g. "megasena"
            contest: Contest number

        Returns:
            Parsed OfficialResult

        Raises:
            ContestNotFoundError: If the API answers 404
            ResultServiceError: On network errors, other HTTP errors or a non-JSON body
        """
        url = self.result_url(variant, contest)
        start_time = time.time()

        try:
            response = requests.get(url, headers=DEFAULT_HEADERS, timeout=self.timeout,
                                    verify=self.verify_ssl)
        except requests.Timeout as e:
            logger.error(f"Timeout fetching {url}: {e}")
            raise ResultServiceError("Tempo esgotado ao consultar a API da Caixa.") from e
        except requests.RequestException as e:
            logger.error(f"Connection error fetching {url}: {e}")
            raise ResultServiceError(f"Falha ao se comunicar com a API da Caixa: {e}") from e

        response_time_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Caixa API {url} -> HTTP {response.status_code} in {response_time_ms} ms")

        if response.status_code == 404:
            raise ContestNotFoundError(variant, contest)
        if response.status_code >= 400:
            raise ResultServiceError(
                f"Falha ao se comunicar com a API da Caixa. Status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Caixa API returned invalid JSON for {url}")
            raise ResultServiceError("Resposta inválida da API da Caixa.",
                                     status_code=response.status_code) from e

        if not isinstance(payload, dict):
            raise ResultServiceError("Resposta inválida da API da Caixa.",
                                     status_code=response.status_code)

        return OfficialResult.model_validate(payload)


def create_caixa_client(base_url: str = DEFAULT_CAIXA_API_BASE_URL, timeout: int = 15,
                        verify_ssl: bool = False) -> CaixaResultClient:
    if not verify_ssl:
        logger.warning("TLS certificate verification is disabled for the Caixa API")
    return CaixaResultClient(base_url=base_url, timeout=timeout, verify_ssl=verify_ssl)
