"""
Tests for the logging auditor.
"""
import json
import logging

import httpx

from nordigen_client.core.auditor import LoggingAuditor


def test_ids_are_unique():
    auditor = LoggingAuditor()
    assert auditor.id() != auditor.id()


def test_request_dump_masks_secrets(caplog):
    auditor = LoggingAuditor()
    request = httpx.Request(
        "POST",
        "https://ob.nordigen.com/api/v2/token/new/",
        headers={"Authorization": "Bearer super-secret"},
        content=json.dumps({"secret_id": "id-1", "secret_key": "key-1"}).encode(),
    )

    with caplog.at_level(logging.DEBUG, logger="nordigen_client.audit"):
        auditor.request("req-1", request)

    assert "req-1 request POST https://ob.nordigen.com/api/v2/token/new/" in caplog.text
    assert "super-secret" not in caplog.text
    assert "key-1" not in caplog.text
    assert "id-1" in caplog.text


def test_response_dump_masks_tokens(caplog):
    auditor = LoggingAuditor()
    response = httpx.Response(200, json={"access": "a-token", "refresh": "r-token", "access_expires": 86400})

    with caplog.at_level(logging.DEBUG, logger="nordigen_client.audit"):
        auditor.response("req-2", response)

    assert "req-2 response 200" in caplog.text
    assert "a-token" not in caplog.text
    assert "r-token" not in caplog.text
    assert "86400" in caplog.text


def test_non_json_bodies_are_logged_verbatim(caplog):
    auditor = LoggingAuditor()

    with caplog.at_level(logging.DEBUG, logger="nordigen_client.audit"):
        auditor.response("req-3", httpx.Response(502, text="Bad Gateway"))

    assert "Bad Gateway" in caplog.text


def test_nothing_logged_above_debug(caplog):
    auditor = LoggingAuditor()

    with caplog.at_level(logging.INFO, logger="nordigen_client.audit"):
        auditor.response("req-4", httpx.Response(200, json={"ok": True}))

    assert caplog.records == []
