"""Environment variable substitution for configuration files."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping

from lbcert.lib.errors import ConfigError

# Matches ${VAR_NAME}
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def substitute_env_vars(
    text: str, env_vars: Mapping[str, str] | None = None
) -> str:
    """Replace ``${VAR}`` references in text with environment values.

    Args:
        text: Raw configuration text
        env_vars: Mapping to resolve from, defaults to ``os.environ``

    Returns:
        Text with every reference substituted

    Raises:
        ConfigError: If a referenced variable is not set
    """
    env = os.environ if env_vars is None else env_vars

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in env:
            raise ConfigError(
                name,
                f"Environment variable '{name}' is referenced but not set",
            )
        return env[name]

    return _ENV_VAR_PATTERN.sub(_replace, text)
