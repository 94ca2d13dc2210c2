"""Settings for mixrunner tool invocations."""

from __future__ import annotations

import dataclasses
import os
import shlex
from dataclasses import dataclass
from typing import Mapping

# Defaults
DEFAULT_MIX_EXECUTABLE = "mix"
DEFAULT_SHELL_COMMAND = ("iex", "-S", "mix")

# Environment variables
ENV_PREFER_UMBRELLA = "MIXRUNNER_PREFER_UMBRELLA"
ENV_MIX_EXECUTABLE = "MIXRUNNER_MIX"
ENV_MIX_ENV = "MIXRUNNER_MIX_ENV"
ENV_SHELL_COMMAND = "MIXRUNNER_SHELL"
ENV_TIMEOUT = "MIXRUNNER_TIMEOUT"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str) -> bool:
    """Parse a boolean environment value."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {name}: {value!r}")


@dataclass(frozen=True)
class Settings:
    """Configuration passed explicitly into every tool call."""

    prefer_umbrella: bool = True
    mix_executable: str = DEFAULT_MIX_EXECUTABLE
    mix_env: str | None = None
    shell_command: tuple[str, ...] = DEFAULT_SHELL_COMMAND
    timeout_seconds: float | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from MIXRUNNER_* environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Settings with unset variables left at their defaults
        """
        env = os.environ if environ is None else environ
        changes: dict = {}

        if env.get(ENV_PREFER_UMBRELLA):
            changes["prefer_umbrella"] = _parse_bool(ENV_PREFER_UMBRELLA, env[ENV_PREFER_UMBRELLA])
        if env.get(ENV_MIX_EXECUTABLE):
            changes["mix_executable"] = env[ENV_MIX_EXECUTABLE]
        if env.get(ENV_MIX_ENV):
            changes["mix_env"] = env[ENV_MIX_ENV]
        if env.get(ENV_SHELL_COMMAND):
            changes["shell_command"] = tuple(shlex.split(env[ENV_SHELL_COMMAND]))
        if env.get(ENV_TIMEOUT):
            changes["timeout_seconds"] = float(env[ENV_TIMEOUT])

        return cls(**changes)

    def replace(self, **changes) -> Settings:
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)
