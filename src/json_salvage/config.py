"""Configuration loading and validation."""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigError

DEFAULT_CONFIG_PATH = "~/.json-salvage/config.yaml"


class MarkerConfig(BaseModel):
    final_output: str = "【最终输出】"  # Section header preceding the final ```json block
    step_open: str = "【Step "
    step_close: str = " 执行中】"
    process_label: str = "思考过程："
    result_label: str = "输出结果："


class RepairConfig(BaseModel):
    enabled: bool = True
    anchor_key: str | None = "shots"  # Array key the truncation repair anchors on


class ThinkingConfig(BaseModel):
    field: str = "thinking"  # Optional side-channel key added by the merger
    key_prefix: str = ""  # "" -> "1_2", "step" -> "step1_2"


class SalvageConfig(BaseModel):
    markers: MarkerConfig = Field(default_factory=MarkerConfig)
    repair: RepairConfig = Field(default_factory=RepairConfig)
    thinking: ThinkingConfig = Field(default_factory=ThinkingConfig)


DEFAULT_CONFIG = SalvageConfig()


def _interpolate_env_vars(text: str) -> str:
    """Replace ${VAR_NAME} with environment variable values."""

    def replacer(match: re.Match) -> str:
        var_name = match.group(1)
        return os.environ.get(var_name, "")

    return re.sub(r"\$\{(\w+)\}", replacer, text)


def _config_from_env() -> SalvageConfig:
    """Build config from JSON_SALVAGE_* environment variables.

    Unset variables fall back to the model defaults.
    """
    markers = MarkerConfig()
    final_marker = os.environ.get("JSON_SALVAGE_FINAL_MARKER")
    if final_marker:
        markers = MarkerConfig(final_output=final_marker)

    anchor = os.environ.get("JSON_SALVAGE_ANCHOR_KEY", RepairConfig().anchor_key)
    repair_enabled = os.environ.get("JSON_SALVAGE_REPAIR", "1").lower() not in (
        "0",
        "false",
        "no",
        "off",
    )

    return SalvageConfig(
        markers=markers,
        repair=RepairConfig(enabled=repair_enabled, anchor_key=anchor or None),
        thinking=ThinkingConfig(
            field=os.environ.get("JSON_SALVAGE_THINKING_FIELD", "thinking"),
            key_prefix=os.environ.get("JSON_SALVAGE_THINKING_PREFIX", ""),
        ),
    )


def _has_env_overrides() -> bool:
    return any(key.startswith("JSON_SALVAGE_") for key in os.environ)


def load_config(path: str | Path | None = None) -> SalvageConfig:
    """Load config from YAML file, env vars, or defaults.

    Priority: config.yaml (with ${ENV} interpolation) > env vars > defaults.
    """
    path = Path(path or DEFAULT_CONFIG_PATH).expanduser()

    if not path.exists():
        if _has_env_overrides():
            return _config_from_env()
        return SalvageConfig()

    raw_text = path.read_text(encoding="utf-8")
    interpolated = _interpolate_env_vars(raw_text)
    try:
        data = yaml.safe_load(interpolated)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return SalvageConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config in {path}: expected a mapping")
    try:
        return SalvageConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {path}: {e}") from e


def save_config(config: SalvageConfig, path: str | Path | None = None) -> Path:
    """Save config to YAML file."""
    path = Path(path or DEFAULT_CONFIG_PATH).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump()
    path.write_text(
        yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True),
        encoding="utf-8",
    )
    return path
