"""newsrag configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (NEWSRAG_DB, NEWSRAG_TOP_K, NEWSRAG_SEED)
  3. Per-project newsrag.yaml  (current working directory)
  4. Global ~/.newsrag/config.yaml
  5. Hardcoded defaults

All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".newsrag"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "newsrag.yaml"

# Known top-level sections; unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(
    ["storage", "chunking", "retrieval", "cache", "synthesis"]
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file or environment variable holds an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class StorageCfg:
    """Passage store location (newsrag.yaml: storage:)."""

    db_path: str = ".newsrag.db"


@dataclass
class ChunkingCfg:
    """Article chunking (newsrag.yaml: chunking:)."""

    max_chunk_size: int = 1_000


@dataclass
class RetrievalCfg:
    """Lexical retrieval scoring (newsrag.yaml: retrieval:)."""

    top_k: int = 5
    recency_window_days: float = 30.0
    recency_multiplier: float = 3.0
    jitter: float = 0.1


@dataclass
class CacheCfg:
    """Response cache (newsrag.yaml: cache:)."""

    ttl_seconds: float = 600.0


@dataclass
class SynthesisCfg:
    """Response synthesis (newsrag.yaml: synthesis:).

    Attributes:
        seed: Seed for tie-breaking and phrasing choices. None means unseeded.
    """

    seed: int | None = None


@dataclass
class NewsragConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    storage: StorageCfg = field(default_factory=StorageCfg)
    chunking: ChunkingCfg = field(default_factory=ChunkingCfg)
    retrieval: RetrievalCfg = field(default_factory=RetrievalCfg)
    cache: CacheCfg = field(default_factory=CacheCfg)
    synthesis: SynthesisCfg = field(default_factory=SynthesisCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _validate(cfg: NewsragConfig) -> None:
    """Raise ConfigError for values the pipeline cannot run with."""
    if cfg.chunking.max_chunk_size < 2:
        raise ConfigError("chunking.max_chunk_size must be >= 2")
    if cfg.retrieval.top_k < 1:
        raise ConfigError("retrieval.top_k must be >= 1")
    if cfg.retrieval.recency_window_days <= 0:
        raise ConfigError("retrieval.recency_window_days must be > 0")
    if cfg.retrieval.jitter < 0:
        raise ConfigError("retrieval.jitter must be >= 0")
    if cfg.cache.ttl_seconds < 0:
        raise ConfigError("cache.ttl_seconds must be >= 0")


def _read_yaml(path: Path) -> dict[str, Any]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file '{path}' must contain a mapping at the top level.")
    return raw


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> NewsragConfig:
    """Build a *NewsragConfig* from a merged raw YAML dict."""
    cfg = NewsragConfig()

    try:
        if "storage" in data:
            s = data["storage"]
            cfg.storage = StorageCfg(db_path=str(s.get("db_path", cfg.storage.db_path)))

        if "chunking" in data:
            c = data["chunking"]
            cfg.chunking = ChunkingCfg(
                max_chunk_size=int(c.get("max_chunk_size", cfg.chunking.max_chunk_size)),
            )

        if "retrieval" in data:
            r = data["retrieval"]
            cfg.retrieval = RetrievalCfg(
                top_k=int(r.get("top_k", cfg.retrieval.top_k)),
                recency_window_days=float(
                    r.get("recency_window_days", cfg.retrieval.recency_window_days)
                ),
                recency_multiplier=float(
                    r.get("recency_multiplier", cfg.retrieval.recency_multiplier)
                ),
                jitter=float(r.get("jitter", cfg.retrieval.jitter)),
            )

        if "cache" in data:
            ca = data["cache"]
            cfg.cache = CacheCfg(ttl_seconds=float(ca.get("ttl_seconds", cfg.cache.ttl_seconds)))

        if "synthesis" in data:
            sy = data["synthesis"]
            seed = sy.get("seed", cfg.synthesis.seed)
            cfg.synthesis = SynthesisCfg(seed=int(seed) if seed is not None else None)
    except (AttributeError, TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid configuration value: {exc}") from exc

    return cfg


def _apply_env_overrides(cfg: NewsragConfig) -> NewsragConfig:
    """Apply NEWSRAG_* environment variable overrides."""
    if db_path := os.environ.get("NEWSRAG_DB"):
        cfg.storage.db_path = db_path
    try:
        if top_k := os.environ.get("NEWSRAG_TOP_K"):
            cfg.retrieval.top_k = int(top_k)
        if seed := os.environ.get("NEWSRAG_SEED"):
            cfg.synthesis.seed = int(seed)
    except ValueError as exc:
        raise ConfigError(f"Invalid NEWSRAG_* environment value: {exc}") from exc
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> NewsragConfig:
    """Load and return a merged *NewsragConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *newsrag.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Raises:
        ConfigError: If a config file is malformed or a value is out of range.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    if global_path.exists():
        raw_global = _read_yaml(global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)
    cfg = _apply_env_overrides(cfg)
    _validate(cfg)
    return cfg
