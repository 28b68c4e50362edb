import logging

import pytest

from setlist_share.app_shell.config import validate_ops_rules
from setlist_share.rules.models import OpsRules, ProjectRules, Rules


def _rules(required_env):
    return Rules(
        project=ProjectRules(slug="t", rules_version="1"),
        ops=OpsRules(required_env=required_env),
    )


def test_missing_env_fails_fast(monkeypatch):
    monkeypatch.delenv("SETLIST_TEST_A", raising=False)
    monkeypatch.delenv("SETLIST_TEST_B", raising=False)
    with pytest.raises(RuntimeError, match="SETLIST_TEST_A, SETLIST_TEST_B"):
        validate_ops_rules(_rules(["SETLIST_TEST_A", "SETLIST_TEST_B"]))


def test_present_env_passes(monkeypatch):
    monkeypatch.setenv("SETLIST_TEST_A", "1")
    monkeypatch.setenv("SETLIST_SECRET_KEY", "k")
    validate_ops_rules(_rules(["SETLIST_TEST_A"]))


def test_dev_signing_key_warns(monkeypatch, caplog):
    monkeypatch.delenv("SETLIST_SECRET_KEY", raising=False)
    with caplog.at_level(logging.WARNING):
        validate_ops_rules(_rules([]))
    assert "SETLIST_SECRET_KEY is not set" in caplog.text
