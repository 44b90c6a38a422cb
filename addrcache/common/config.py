"""Utility helpers for loading YAML configuration with environment overrides."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml
from pydantic import ValidationError

from addrcache.common.errors import InvalidConfigError
from addrcache.common.models import AppConfig, CacheSettings

DEFAULT_CONFIG_PATH = "config/address_cache.yaml"


@dataclass
class ConfigLoader:
    """Loads configuration files and expands environment variables."""

    base_dir: Path

    def load(self, relative_path: str) -> Dict[str, Any]:
        path = self.base_dir / relative_path
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        return self._expand_env(data)

    def _expand_env(self, node: Any) -> Any:
        if isinstance(node, dict):
            return {key: self._expand_env(value) for key, value in node.items()}
        if isinstance(node, list):
            return [self._expand_env(item) for item in node]
        if isinstance(node, str):
            return os.path.expandvars(node)
        return node


def load_config(relative_path: str = DEFAULT_CONFIG_PATH, base_dir: Path | None = None) -> AppConfig:
    """Load and validate the application config.

    ``base_dir`` defaults to the repository root. Validation failures are
    reported as :class:`InvalidConfigError`.
    """

    base = base_dir if base_dir is not None else Path(__file__).resolve().parents[2]
    raw = ConfigLoader(base).load(relative_path)
    try:
        return AppConfig.model_validate(raw)
    except ValidationError as exc:
        raise InvalidConfigError(f"invalid config in {relative_path}: {exc}") from exc


def parse_settings(data: Mapping[str, Any]) -> CacheSettings:
    try:
        return CacheSettings.model_validate(dict(data))
    except ValidationError as exc:
        raise InvalidConfigError(f"invalid cache settings: {exc}") from exc
