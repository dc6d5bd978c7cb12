import io
import os
import sys

import pytest

# Ensure repository root is on sys.path so `import conferidor.*` works during tests
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from conferidor.config import AppConfig  # noqa: E402
from conferidor.exceptions import ContestNotFoundError  # noqa: E402
from conferidor.models import OfficialResult, ReceiptData  # noqa: E402
from conferidor.ticket_processor import ReceiptProcessor  # noqa: E402

MEGA_SENA_PAYLOAD = {
    "numero": 2850,
    "tipoJogo": "MEGA_SENA",
    "dataApuracao": "10/05/2025",
    "acumulado": False,
    "listaDezenas": ["04", "08", "15", "16", "23", "42"],
    "listaRateioPremio": [
        {"descricaoFaixa": "6 acertos", "faixa": 1, "numeroDeGanhadores": 1, "valorPremio": 5000000.00},
        {"descricaoFaixa": "5 acertos", "faixa": 2, "numeroDeGanhadores": 40, "valorPremio": 50000.00},
        {"descricaoFaixa": "4 acertos", "faixa": 3, "numeroDeGanhadores": 3000, "valorPremio": 900.50},
    ],
}


class FakeTextExtractor:
    def __init__(self, text="MEGA-SENA CONCURSO 2850\nA 04 08 15 16 23 42"):
        self.text = text
        self.calls = []

    def extract_text(self, image_data, mime_type="image/jpeg"):
        self.calls.append((image_data, mime_type))
        return self.text


class FakeDataExtractor:
    def __init__(self, receipt=None):
        self.receipt = receipt or ReceiptData(
            variant="megasena", contest=2850, bets=[[4, 8, 15, 16, 23, 42], [1, 2, 3, 4, 5, 6]]
        )
        self.calls = []

    def extract_receipt_data(self, text):
        self.calls.append(text)
        return self.receipt


class FakeResultFetcher:
    def __init__(self, payload=None, error=None):
        self.payload = payload if payload is not None else MEGA_SENA_PAYLOAD
        self.error = error
        self.calls = []

    def fetch_result(self, variant, contest):
        self.calls.append((variant, contest))
        if self.error is not None:
            raise self.error
        if self.payload is None:
            raise ContestNotFoundError(variant, contest)
        return OfficialResult.model_validate(self.payload)


@pytest.fixture()
def official_result():
    return OfficialResult.model_validate(MEGA_SENA_PAYLOAD)


@pytest.fixture()
def text_extractor():
    return FakeTextExtractor()


@pytest.fixture()
def data_extractor():
    return FakeDataExtractor()


@pytest.fixture()
def result_fetcher():
    return FakeResultFetcher()


@pytest.fixture()
def receipt_processor(text_extractor, data_extractor, result_fetcher):
    return ReceiptProcessor(text_extractor, data_extractor, result_fetcher)


@pytest.fixture()
def app_config():
    return AppConfig(
        gemini_api_key=None,
        gemini_model="gemini-test",
        caixa_api_base_url="https://caixa.test/api",
        caixa_verify_ssl=False,
        caixa_timeout=5,
        max_upload_bytes=4 * 1024 * 1024,
        log_level="INFO",
        log_file=None,
    )


@pytest.fixture()
def fastapi_app(app_config, receipt_processor):
    from conferidor.api import create_app

    return create_app(config=app_config, processor=receipt_processor)


@pytest.fixture()
def png_bytes():
    from PIL import Image

    buffer = io.BytesIO()
    Image.new("RGB", (64, 48), color=(255, 255, 255)).save(buffer, format="PNG")
    return buffer.getvalue()
