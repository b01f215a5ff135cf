"""hukukrag configuration loader.

Priority (high → low):
  1. CLI flags              (handled at call site — not in this module)
  2. Environment variables  (HUKUKRAG_MAX_CHUNK_CHARS, HUKUKRAG_RETRIEVAL_LIMIT)
  3. Per-project hukukrag.yaml
  4. Global ~/.hukukrag/config.yaml
  5. Hardcoded defaults

The library functions take plain arguments; this config only feeds the CLI.
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

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".hukukrag"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "hukukrag.yaml"

# Known top-level sections; unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(["chunker", "retrieval", "context", "citations"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file or env var contains an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class ChunkerCfg:
    """Legal chunker sizes (hukukrag.yaml: chunker:)."""

    max_chars: int = 1_500
    min_chars: int = 100


@dataclass
class RetrievalCfg:
    """Keyword retrieval and rerank (hukukrag.yaml: retrieval:)."""

    limit: int = 10
    entity_boost: float = 0.1


@dataclass
class ContextCfg:
    """Conversation window and summarisation (hukukrag.yaml: context:)."""

    max_messages: int = 10
    max_tokens: int = 4_000
    include_summary: bool = True
    summarize_threshold: int = 20
    resummarize_after: int = 10


@dataclass
class CitationsCfg:
    """Citation handling (hukukrag.yaml: citations:).

    Attributes:
        strict: When True, ``hukukrag cite`` exits non-zero on invalid markers.
    """

    strict: bool = False


@dataclass
class HukukConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    chunker: ChunkerCfg = field(default_factory=ChunkerCfg)
    retrieval: RetrievalCfg = field(default_factory=RetrievalCfg)
    context: ContextCfg = field(default_factory=ContextCfg)
    citations: CitationsCfg = field(default_factory=CitationsCfg)


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


def _validate(cfg: HukukConfig) -> None:
    """Raise ConfigError for values the library cannot work with."""
    positive = {
        "chunker.max_chars": cfg.chunker.max_chars,
        "retrieval.limit": cfg.retrieval.limit,
        "context.max_messages": cfg.context.max_messages,
        "context.max_tokens": cfg.context.max_tokens,
        "context.summarize_threshold": cfg.context.summarize_threshold,
        "context.resummarize_after": cfg.context.resummarize_after,
    }
    for name, value in positive.items():
        if value < 1:
            raise ConfigError(f"{name} must be >= 1 (got {value}).")
    if cfg.chunker.min_chars < 0:
        raise ConfigError(f"chunker.min_chars must be >= 0 (got {cfg.chunker.min_chars}).")
    if cfg.retrieval.entity_boost < 0:
        raise ConfigError(
            f"retrieval.entity_boost must be >= 0 (got {cfg.retrieval.entity_boost})."
        )


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


def _cfg_from_dict(data: dict[str, Any]) -> HukukConfig:
    """Build a *HukukConfig* from a merged raw YAML dict."""
    cfg = HukukConfig()

    try:
        if "chunker" in data:
            c = data["chunker"] or {}
            cfg.chunker = ChunkerCfg(
                max_chars=int(c.get("max_chars", cfg.chunker.max_chars)),
                min_chars=int(c.get("min_chars", cfg.chunker.min_chars)),
            )

        if "retrieval" in data:
            r = data["retrieval"] or {}
            cfg.retrieval = RetrievalCfg(
                limit=int(r.get("limit", cfg.retrieval.limit)),
                entity_boost=float(r.get("entity_boost", cfg.retrieval.entity_boost)),
            )

        if "context" in data:
            x = data["context"] or {}
            cfg.context = ContextCfg(
                max_messages=int(x.get("max_messages", cfg.context.max_messages)),
                max_tokens=int(x.get("max_tokens", cfg.context.max_tokens)),
                include_summary=bool(x.get("include_summary", cfg.context.include_summary)),
                summarize_threshold=int(
                    x.get("summarize_threshold", cfg.context.summarize_threshold)
                ),
                resummarize_after=int(
                    x.get("resummarize_after", cfg.context.resummarize_after)
                ),
            )

        if "citations" in data:
            ci = data["citations"] or {}
            cfg.citations = CitationsCfg(strict=bool(ci.get("strict", cfg.citations.strict)))
    except (TypeError, ValueError, AttributeError) as exc:
        raise ConfigError(f"Invalid config value: {exc}") from exc

    return cfg


def _apply_env_overrides(cfg: HukukConfig) -> HukukConfig:
    """Apply HUKUKRAG_* environment variable overrides (layer 2)."""
    overrides = (
        ("HUKUKRAG_MAX_CHUNK_CHARS", cfg.chunker, "max_chars"),
        ("HUKUKRAG_RETRIEVAL_LIMIT", cfg.retrieval, "limit"),
    )
    for env_var, section, attr in overrides:
        if raw := os.environ.get(env_var):
            try:
                setattr(section, attr, int(raw))
            except ValueError as exc:
                raise ConfigError(f"{env_var} must be an integer (got '{raw}').") from exc
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> HukukConfig:
    """Load and return a merged *HukukConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *hukukrag.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Raises:
        ConfigError: If a value has the wrong type or is out of range.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    # Layer 1: global config
    if global_path.exists():
        raw_global = yaml.safe_load(global_path.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    # Layer 2: per-project config
    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = yaml.safe_load(project_cfg_path.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)

    # Layer 3: env var overrides
    cfg = _apply_env_overrides(cfg)

    _validate(cfg)
    return cfg
