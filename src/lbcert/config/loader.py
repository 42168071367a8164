"""Configuration loader for lbcert.

Settings are resolved in increasing order of precedence: user config
(``~/.lbcert/config.yml``), project config (``<state-dir>/config.yml``),
``LBCERT_*`` environment variables and finally CLI flags.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from lbcert.config.env_loader import substitute_env_vars
from lbcert.config.validator import flatten_pydantic_errors
from lbcert.lib.errors import ConfigError, FileNotFoundError
from lbcert.models.config import GlobalConfig

logger = logging.getLogger(__name__)

# Environment variable to field name mapping
ENV_VAR_MAP = {
    "endpoint_override": "LBCERT_ENDPOINT_OVERRIDE",
    "state_dir": "LBCERT_STATE_DIR",
    "wait_for_stack": "LBCERT_WAIT_FOR_STACK",
}


def _parse_env_value(field_name: str, value: str) -> Any:
    if field_name == "wait_for_stack":
        return value.lower() in ("true", "1", "yes", "on")
    return value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Deep merge override dict into base dict (in-place)."""
    for key, override_value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(override_value, dict)
        ):
            _deep_merge(base[key], override_value)
        else:
            base[key] = override_value


def _read_yaml_with_env_substitution(path: Path) -> dict[str, Any] | None:
    """Read a YAML file, substituting ``${VAR}`` references before parsing.

    Raises:
        OSError: If file cannot be read
        yaml.YAMLError: If YAML parsing fails
        ConfigError: If env var substitution fails
    """
    raw_text = path.read_text(encoding="utf-8")
    content = yaml.safe_load(substitute_env_vars(raw_text))
    return content if content else None


class ConfigLoader:
    """Loads and merges lbcert configuration sources."""

    def __init__(self, home_dir: Path | None = None) -> None:
        """Create a loader.

        Args:
            home_dir: Directory containing ``.lbcert``, defaults to the user home
        """
        self._home_dir = home_dir

    def load_global_config(self) -> dict[str, Any]:
        """Load ``~/.lbcert/config.yml|config.yaml`` as raw settings."""
        home = self._home_dir or Path.home()
        return self._load_config_dir(home / ".lbcert", "global configuration")

    def load_project_config(self, project_dir: str | Path) -> dict[str, Any]:
        """Load ``config.yml|config.yaml`` from a state directory."""
        return self._load_config_dir(Path(project_dir), "project configuration")

    def load_config_file(self, config_path: str | Path) -> dict[str, Any]:
        """Load an explicitly named configuration file.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigError: If the file cannot be parsed
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(
                str(path), "Pass an existing file to --config or drop the flag."
            )
        return self._parse_file(path, "configuration")

    def resolve(
        self,
        *,
        config_path: str | Path | None = None,
        state_dir: str | None = None,
        cli_overrides: Mapping[str, Any] | None = None,
        env_vars: Mapping[str, str] | None = None,
    ) -> GlobalConfig:
        """Resolve the effective configuration for one invocation.

        Args:
            config_path: Explicit config file; replaces the user config when given
            state_dir: State directory from the CLI, used to find project config
            cli_overrides: Flag values; ``None`` entries are ignored
            env_vars: Environment mapping, defaults to ``os.environ``

        Returns:
            Validated GlobalConfig

        Raises:
            ConfigError: If any source is invalid
        """
        env = os.environ if env_vars is None else env_vars
        overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}

        if config_path is not None:
            merged = self.load_config_file(config_path)
        else:
            merged = self.load_global_config()

        env_settings = self._env_settings(env)
        project_dir = state_dir or env_settings.get("state_dir")
        if project_dir:
            _deep_merge(merged, self.load_project_config(project_dir))

        _deep_merge(merged, env_settings)
        _deep_merge(merged, overrides)

        try:
            return GlobalConfig(**merged)
        except PydanticValidationError as e:
            error_text = "\n".join(flatten_pydantic_errors(e))
            raise ConfigError(
                "config_validation", f"Invalid configuration:\n{error_text}"
            ) from e

    @staticmethod
    def _env_settings(env: Mapping[str, str]) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        for field_name, env_var_name in ENV_VAR_MAP.items():
            if env_var_name in env:
                settings[field_name] = _parse_env_value(field_name, env[env_var_name])
        return settings

    def _load_config_dir(self, config_dir: Path, config_name: str) -> dict[str, Any]:
        yml_path = config_dir / "config.yml"
        yaml_path = config_dir / "config.yaml"

        if yml_path.exists():
            if yaml_path.exists():
                logger.info(
                    f"Both {yml_path} and {yaml_path} exist. "
                    f"Using {yml_path} (prefer .yml extension)."
                )
            return self._parse_file(yml_path, config_name)
        if yaml_path.exists():
            return self._parse_file(yaml_path, config_name)
        return {}

    @staticmethod
    def _parse_file(path: Path, config_name: str) -> dict[str, Any]:
        try:
            content = _read_yaml_with_env_substitution(path)
        except yaml.YAMLError as e:
            raise ConfigError(
                "config_parse", f"Failed to parse {config_name} at {path}: {e}"
            ) from e
        except OSError as e:
            raise ConfigError(
                "config_read", f"Failed to read {config_name} at {path}: {e}"
            ) from e

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigError(
                "config_parse",
                f"Expected a mapping in {config_name} at {path}, "
                f"got {type(content).__name__}",
            )
        logger.debug(f"Loaded {config_name} from {path}")
        return content
