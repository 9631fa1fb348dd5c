from pathlib import Path

import pytest
from pydantic import ValidationError

from kanjiorder.application.config import AppConfig, resolve_config


def test_defaults():
    config = resolve_config()

    assert config.corpus_path is None
    assert config.priority == ["frequency", "grade_level", "stroke_count"]
    assert config.popular_only is True
    assert config.port == 8787


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("KANJIORDER_CORPUS_PATH", str(tmp_path / "corpus.yaml"))
    monkeypatch.setenv("KANJIORDER_PRIORITY", "stroke_count, frequency")

    config = resolve_config()

    assert config.corpus_path == (tmp_path / "corpus.yaml").resolve()
    assert config.priority == ["stroke_count", "frequency"]


def test_cli_overrides_win_and_none_is_ignored(monkeypatch):
    monkeypatch.setenv("KANJIORDER_PORT", "9000")

    assert resolve_config({"port": 9100}).port == 9100
    assert resolve_config({"port": None}).port == 9000


def test_toml_file(isolated_env):
    cfg_dir = isolated_env / ".config/kanjiorder"
    cfg_dir.mkdir(parents=True)
    (cfg_dir / "config.toml").write_text(
        'priority = ["grade_level"]\npopular_only = false\n', encoding="utf-8"
    )

    config = resolve_config()

    assert config.priority == ["grade_level"]
    assert config.popular_only is False


def test_invalid_priority():
    with pytest.raises(ValidationError):
        AppConfig(priority=["popularity"])


def test_paths_are_resolved(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = AppConfig(corpus_path="corpus.yaml")
    assert config.corpus_path == Path(tmp_path / "corpus.yaml").resolve()
