"""
Tests for the command-line entry point.
"""
import json

import httpx
import pytest
import respx

from nordigen_client.__main__ import main


@pytest.fixture(autouse=True)
def _cli_env(monkeypatch):
    monkeypatch.setenv("NORDIGEN_BASE_URL", "https://ob.nordigen.com")
    monkeypatch.setenv("NORDIGEN_AUDIT", "false")
    monkeypatch.delenv("NORDIGEN_SECRET_ID", raising=False)
    monkeypatch.delenv("NORDIGEN_SECRET_KEY", raising=False)


def test_institutions_with_access_token(capsys):
    with respx.mock(base_url="https://ob.nordigen.com") as mock:
        route = mock.get("/api/v2/institutions/").mock(
            return_value=httpx.Response(200, json=[{"id": "BANK_X", "name": "Bank X", "countries": ["PT"]}])
        )
        assert main(["--access-token", "tok", "institutions", "PT"]) == 0

    assert route.calls.last.request.headers["Authorization"] == "Bearer tok"
    printed = json.loads(capsys.readouterr().out)
    assert printed[0]["id"] == "BANK_X"


def test_token_issued_from_environment(monkeypatch, capsys):
    monkeypatch.setenv("NORDIGEN_SECRET_ID", "id")
    monkeypatch.setenv("NORDIGEN_SECRET_KEY", "key")

    with respx.mock(base_url="https://ob.nordigen.com") as mock:
        mock.post("/api/v2/token/new/").mock(
            return_value=httpx.Response(
                200, json={"access": "a", "access_expires": 1, "refresh": "r", "refresh_expires": 2}
            )
        )
        assert main(["token"]) == 0

    assert json.loads(capsys.readouterr().out)["access"] == "a"


def test_missing_credentials_exit():
    with pytest.raises(SystemExit):
        main(["institutions", "PT"])


def test_provider_error_exit_code(capsys):
    with respx.mock(base_url="https://ob.nordigen.com") as mock:
        mock.get("/api/v2/requisitions/r-1/").mock(
            return_value=httpx.Response(404, json={"detail": "Not found.", "status_code": 404})
        )
        assert main(["--access-token", "tok", "requisition-get", "r-1"]) == 1

    assert "nordigen error: 404, Not found." in capsys.readouterr().err
