from types import SimpleNamespace

import pytest
import requests

from conferidor import caixa_client
from conferidor.caixa_client import CaixaResultClient
from conferidor.exceptions import ContestNotFoundError, ResultServiceError
from conftest import MEGA_SENA_PAYLOAD


def _build_mock_response(status_code, payload=None, json_error=False):
    def _json():
        if json_error:
            raise ValueError("No JSON object could be decoded")
        return payload

    return SimpleNamespace(status_code=status_code, json=_json)


def _patch_get(monkeypatch, response=None, error=None):
    calls = []

    def get(url, headers=None, timeout=None, verify=None):
        calls.append({"url": url, "headers": headers, "timeout": timeout, "verify": verify})
        if error is not None:
            raise error
        return response

    monkeypatch.setattr(caixa_client.requests, "get", get)
    return calls


def test_fetch_result_success(monkeypatch):
    calls = _patch_get(monkeypatch, _build_mock_response(200, MEGA_SENA_PAYLOAD))
    client = CaixaResultClient(base_url="https://caixa.test/api/", timeout=7, verify_ssl=True)

    result = client.fetch_result("megasena", 2850)

    assert result.contest_number == 2850
    assert result.drawn_numbers == ["04", "08", "15", "16", "23", "42"]
    assert calls == [{
        "url": "https://caixa.test/api/megasena/2850",
        "headers": caixa_client.DEFAULT_HEADERS,
        "timeout": 7,
        "verify": True,
    }]


def test_fetch_result_not_found(monkeypatch):
    _patch_get(monkeypatch, _build_mock_response(404))
    client = CaixaResultClient(base_url="https://caixa.test/api")

    with pytest.raises(ContestNotFoundError) as exc_info:
        client.fetch_result("quina", 99999)

    assert exc_info.value.variant == "quina"
    assert exc_info.value.contest == 99999
    assert "99999" in str(exc_info.value)


def test_fetch_result_server_error(monkeypatch):
    _patch_get(monkeypatch, _build_mock_response(503))
    client = CaixaResultClient(base_url="https://caixa.test/api")

    with pytest.raises(ResultServiceError) as exc_info:
        client.fetch_result("megasena", 1)

    assert exc_info.value.status_code == 503
    assert "503" in str(exc_info.value)


def test_fetch_result_timeout(monkeypatch):
    _patch_get(monkeypatch, error=requests.Timeout("read timed out"))
    client = CaixaResultClient(base_url="https://caixa.test/api")

    with pytest.raises(ResultServiceError, match="Tempo esgotado"):
        client.fetch_result("megasena", 1)


def test_fetch_result_connection_error(monkeypatch):
    _patch_get(monkeypatch, error=requests.ConnectionError("refused"))
    client = CaixaResultClient(base_url="https://caixa.test/api")

    with pytest.raises(ResultServiceError):
        client.fetch_result("megasena", 1)


def test_fetch_result_invalid_json(monkeypatch):
    _patch_get(monkeypatch, _build_mock_response(200, json_error=True))
    client = CaixaResultClient(base_url="https://caixa.test/api")

    with pytest.raises(ResultServiceError, match="inválida"):
        client.fetch_result("megasena", 1)


def test_fetch_result_non_object_json(monkeypatch):
    _patch_get(monkeypatch, _build_mock_response(200, payload=[1, 2, 3]))
    client = CaixaResultClient(base_url="https://caixa.test/api")

    with pytest.raises(ResultServiceError):
        client.fetch_result("megasena", 1)


def test_partial_payload_does_not_crash(monkeypatch):
    _patch_get(monkeypatch, _build_mock_response(200, {"numero": 10}))
    result = CaixaResultClient(base_url="https://caixa.test/api").fetch_result("quina", 10)

    assert result.contest_number == 10
    assert result.drawn_numbers == []
    assert result.prize_tiers == []
