"""Tests for the newsrag config loader."""

from __future__ import annotations

import warnings
from pathlib import Path

import pytest
import yaml

from newsrag.config import ConfigError, NewsragConfig, RetrievalCfg, load_config


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_yaml(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data), encoding="utf-8")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("NEWSRAG_DB", "NEWSRAG_TOP_K", "NEWSRAG_SEED"):
        monkeypatch.delenv(name, raising=False)


def _load(tmp_path: Path, global_path: Path | None = None) -> NewsragConfig:
    return load_config(
        project_dir=tmp_path,
        global_config_path=global_path or tmp_path / "nonexistent" / "config.yaml",
    )


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


def test_load_config_defaults_no_files(tmp_path: Path) -> None:
    """No config files → all hardcoded defaults."""
    cfg = _load(tmp_path)

    assert cfg.storage.db_path == ".newsrag.db"
    assert cfg.chunking.max_chunk_size == 1000
    assert cfg.retrieval == RetrievalCfg()
    assert cfg.retrieval.top_k == 5
    assert cfg.cache.ttl_seconds == 600.0
    assert cfg.synthesis.seed is None


# ---------------------------------------------------------------------------
# Layering
# ---------------------------------------------------------------------------


def test_global_config_applied(tmp_path: Path) -> None:
    global_path = tmp_path / "home" / "config.yaml"
    _write_yaml(global_path, {"retrieval": {"top_k": 8}, "cache": {"ttl_seconds": 60}})

    cfg = _load(tmp_path, global_path)

    assert cfg.retrieval.top_k == 8
    assert cfg.cache.ttl_seconds == 60.0


def test_project_overrides_global_per_key(tmp_path: Path) -> None:
    """Project config wins on the keys it sets; other global keys survive the deep merge."""
    global_path = tmp_path / "home" / "config.yaml"
    _write_yaml(global_path, {"retrieval": {"top_k": 8, "jitter": 0.0}})
    _write_yaml(tmp_path / "newsrag.yaml", {"retrieval": {"top_k": 3}})

    cfg = _load(tmp_path, global_path)

    assert cfg.retrieval.top_k == 3
    assert cfg.retrieval.jitter == 0.0


def test_env_overrides_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_yaml(
        tmp_path / "newsrag.yaml",
        {"storage": {"db_path": "file.db"}, "retrieval": {"top_k": 3}, "synthesis": {"seed": 1}},
    )
    monkeypatch.setenv("NEWSRAG_DB", "env.db")
    monkeypatch.setenv("NEWSRAG_TOP_K", "9")
    monkeypatch.setenv("NEWSRAG_SEED", "42")

    cfg = _load(tmp_path)

    assert cfg.storage.db_path == "env.db"
    assert cfg.retrieval.top_k == 9
    assert cfg.synthesis.seed == 42


def test_empty_yaml_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / "newsrag.yaml").write_text("", encoding="utf-8")
    assert _load(tmp_path).chunking.max_chunk_size == 1000


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def test_unknown_key_warns(tmp_path: Path) -> None:
    _write_yaml(tmp_path / "newsrag.yaml", {"embedding": {"model": "x"}})
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        _load(tmp_path)
    assert any("embedding" in str(w.message) for w in caught)


def test_non_mapping_yaml_raises(tmp_path: Path) -> None:
    (tmp_path / "newsrag.yaml").write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        _load(tmp_path)


def test_non_numeric_value_raises(tmp_path: Path) -> None:
    _write_yaml(tmp_path / "newsrag.yaml", {"retrieval": {"top_k": "many"}})
    with pytest.raises(ConfigError):
        _load(tmp_path)


@pytest.mark.parametrize(
    "data",
    [
        {"chunking": {"max_chunk_size": 1}},
        {"retrieval": {"top_k": 0}},
        {"retrieval": {"recency_window_days": 0}},
        {"retrieval": {"jitter": -0.5}},
        {"cache": {"ttl_seconds": -1}},
    ],
)
def test_out_of_range_values_raise(tmp_path: Path, data: dict) -> None:
    _write_yaml(tmp_path / "newsrag.yaml", data)
    with pytest.raises(ConfigError):
        _load(tmp_path)


def test_invalid_env_value_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEWSRAG_TOP_K", "lots")
    with pytest.raises(ConfigError, match="NEWSRAG"):
        _load(tmp_path)
