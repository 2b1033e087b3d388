"""Config loader from env + yaml."""

from __future__ import annotations

from pathlib import Path
import os
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from mail_auth_inspector.core.errors import ConfigError
from mail_auth_inspector.tools.intel.auth_results import AuthTrustPolicy
from mail_auth_inspector.tools.intel.received import DelayThresholds

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "config" / "defaults.yaml"
ENV_PREFIX = "MAIL_AUTH_INSPECTOR_"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppConfig(BaseModel):

    profile: str = Field(default="balanced")
    auth_fallback: Literal["trust_all", "distrust"] = Field(default="trust_all")
    delay_warning_s: int = Field(default=60, gt=0)
    delay_danger_s: int = Field(default=300, gt=0)
    log_level: str = Field(default="WARNING")
    default_config_path: str = Field(default=str(DEFAULT_CONFIG_PATH))

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level

    @model_validator(mode="after")
    def _check_delay_order(self) -> "AppConfig":
        if self.delay_danger_s < self.delay_warning_s:
            raise ValueError("delay_danger_s must not be lower than delay_warning_s")
        return self

    def auth_policy(self) -> AuthTrustPolicy:
        return AuthTrustPolicy(fallback=self.auth_fallback)

    def delay_thresholds(self) -> DelayThresholds:
        return DelayThresholds(warning_after_s=self.delay_warning_s, danger_after_s=self.delay_danger_s)


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}
    try:
        payload = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid yaml in {p}: {exc}") from exc
    return payload if isinstance(payload, dict) else {}


def _pick_env(name: str, fallback: Any) -> Any:
    value = os.getenv(ENV_PREFIX + name)
    return value if value not in (None, "") else fallback


def _parse_int(raw: Any, fallback: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


def _parse_str(raw: Any, fallback: str) -> str:
    value = str(raw if raw is not None else "").strip()
    return value or fallback


def _resolve_default_config_path(path: str | Path | None) -> Path:
    if path is not None:
        return Path(path)
    env_default_path = os.getenv(ENV_PREFIX + "DEFAULT_CONFIG_PATH")
    if env_default_path:
        return Path(env_default_path)
    return DEFAULT_CONFIG_PATH


def load_config(
    path: str | Path | None = None,
    *,
    profile_override: str | None = None,
) -> tuple[AppConfig, dict[str, Any]]:
    default_path = _resolve_default_config_path(path)
    merged = load_yaml(default_path)
    profiles = merged.get("profiles")
    profile_map = profiles if isinstance(profiles, dict) else {}

    active_profile = str(profile_override or _pick_env("PROFILE", merged.get("profile", "balanced")))
    selected_profile = profile_map.get(active_profile, {})
    selected = selected_profile if isinstance(selected_profile, dict) else {}

    payload = {
        "profile": active_profile,
        "auth_fallback": _parse_str(
            _pick_env("AUTH_FALLBACK", selected.get("auth_fallback", merged.get("auth_fallback", "trust_all"))),
            "trust_all",
        ).lower(),
        "delay_warning_s": _parse_int(
            _pick_env("DELAY_WARNING_S", selected.get("delay_warning_s", merged.get("delay_warning_s", 60))),
            60,
        ),
        "delay_danger_s": _parse_int(
            _pick_env("DELAY_DANGER_S", selected.get("delay_danger_s", merged.get("delay_danger_s", 300))),
            300,
        ),
        "log_level": _parse_str(
            _pick_env("LOG_LEVEL", selected.get("log_level", merged.get("log_level", "WARNING"))),
            "WARNING",
        ).upper(),
        "default_config_path": str(default_path),
    }

    try:
        cfg = AppConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration for profile {active_profile!r}: {exc}") from exc
    return cfg, merged
