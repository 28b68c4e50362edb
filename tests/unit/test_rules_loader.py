"""Tests for rules file loading and validation."""

from pathlib import Path

import pytest

from setlist_share.rules.loader import load_rules

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


def test_load_project_rules():
    rules = load_rules(PROJECT_ROOT / "rules.yaml")
    assert rules.project.slug == "setlist-share"
    assert rules.setlists.max_songs == 500
    assert rules.setlists.title_max_length == 200
    assert rules.storage.busy_timeout_seconds == 5.0


def test_defaults_apply_for_missing_sections(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("project:\n  slug: demo\n  rules_version: '0.1'\n")

    rules = load_rules(path)
    assert rules.setlists.notes_max_length == 2000
    assert rules.ops.required_env == []


def test_yaml_fenced_in_markdown(tmp_path):
    path = tmp_path / "rules.md"
    path.write_text(
        "# Rules\n\nSome prose.\n\n```yaml\n"
        "project:\n  slug: fenced\n  rules_version: '2'\n"
        "setlists:\n  max_songs: 10\n"
        "```\n\nTrailing text.\n"
    )

    rules = load_rules(path)
    assert rules.project.slug == "fenced"
    assert rules.setlists.max_songs == 10


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("project: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_rules(path)


def test_schema_violation(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text(
        "project:\n  slug: demo\n  rules_version: '1'\nsetlists:\n  max_songs: 0\n"
    )
    with pytest.raises(ValueError, match="Rules validation failed"):
        load_rules(path)
