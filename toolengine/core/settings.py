"""Engine settings resolved from environment variables.

  TOOLENGINE_AUTO_LOAD                  load every discovered tool on initialize (default on)
  TOOLENGINE_TOOLS_DIR                  tool package root (default ./tools)
  TOOLENGINE_MAX_CONCURRENT_EXECUTIONS  process-wide in-flight ceiling (default 100)
  TOOLENGINE_MAX_ACTIVITY_LOGS          activity log retention cap (default 10000)
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import os

from .errors import ConfigError

DEFAULT_MAX_CONCURRENT_EXECUTIONS = 100
DEFAULT_MAX_ACTIVITY_LOGS = 10000


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value < 1:
        raise ConfigError(f"{name} must be >= 1, got {value}")
    return value


@dataclass
class EngineSettings:
    auto_load: bool = True
    tools_dir: Path = Path("tools")
    max_concurrent_executions: int = DEFAULT_MAX_CONCURRENT_EXECUTIONS
    max_activity_logs: int = DEFAULT_MAX_ACTIVITY_LOGS

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        env = os.environ if env is None else env
        auto_load = env.get("TOOLENGINE_AUTO_LOAD", "true").strip().lower() not in ("false", "0", "no", "off")
        return cls(
            auto_load=auto_load,
            tools_dir=Path(env.get("TOOLENGINE_TOOLS_DIR") or (Path.cwd() / "tools")),
            max_concurrent_executions=_env_int(
                env, "TOOLENGINE_MAX_CONCURRENT_EXECUTIONS", DEFAULT_MAX_CONCURRENT_EXECUTIONS
            ),
            max_activity_logs=_env_int(env, "TOOLENGINE_MAX_ACTIVITY_LOGS", DEFAULT_MAX_ACTIVITY_LOGS),
        )


__all__ = ["EngineSettings"]
