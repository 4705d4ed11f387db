"""Tests for structlog setup."""

from __future__ import annotations

import logging

import pytest
import structlog

from pkghealth.core.logging import mask_secrets, mask_token, setup_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("pkghealth").setLevel(logging.NOTSET)


class TestSetupLogging:
    def test_explicit_level(self):
        setup_logging("debug")
        assert logging.getLogger("pkghealth").level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("PKGHEALTH_LOG_LEVEL", "info")
        setup_logging()
        assert logging.getLogger("pkghealth").level == logging.INFO

    def test_default_level_is_warning(self, monkeypatch):
        monkeypatch.delenv("PKGHEALTH_LOG_LEVEL", raising=False)
        setup_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_json_renderer(self, capsys):
        setup_logging("info", "json")
        structlog.get_logger("pkghealth.test").info("scan.started", packages=3)

        err = capsys.readouterr().err
        assert '"event": "scan.started"' in err
        assert '"packages": 3' in err

    def test_tokens_are_masked_in_output(self, capsys):
        token = "ghp_" + "a1" * 18
        setup_logging("info", "json")
        structlog.get_logger("pkghealth.test").info("github.request_failed", error=f"bad {token}")

        err = capsys.readouterr().err
        assert token not in err
        assert "ghp_****a1a1a1a1" in err


class TestMaskSecrets:
    def test_mask_token(self):
        assert mask_token("short") == "****"
        assert mask_token("ghp_abcdefghijklmnopqrstuvwxyz") == "ghp_****stuvwxyz"

    def test_secret_keys_are_masked(self):
        event = mask_secrets(None, "info", {"event": "config.loaded", "token": "not-a-pattern-1234"})
        assert event["token"] == "not-****ern-1234"

    def test_embedded_tokens_are_masked(self):
        token = "npm_" + "Z" * 36
        event = mask_secrets(None, "info", {"event": "x", "url": f"https://r/?t={token}", "n": 3})
        assert event["url"] == f"https://r/?t=npm_****{'Z' * 8}"
        assert event["n"] == 3

    def test_plain_values_untouched(self):
        event = mask_secrets(None, "info", {"event": "scan.done", "package": "lodash"})
        assert event == {"event": "scan.done", "package": "lodash"}
